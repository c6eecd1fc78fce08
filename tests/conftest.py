"""Shared fixtures: in-memory database, API client and sample meters."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from smartmeter.core.database import Base, get_db
from smartmeter.core.security import create_access_token
from smartmeter.main import app
from smartmeter.models.enums import MeterStatus
from smartmeter.models.meter import Meter


@pytest.fixture
def test_db() -> Iterator[Session]:
    """Create an in-memory test database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def meters(test_db: Session) -> dict[str, Meter]:
    """Provision an active meter owned by consumer 7, a second active meter and an inactive one."""
    created = {
        "MTR-001": Meter(serial_number="MTR-001", status=MeterStatus.ACTIVE.value, consumer_id=7),
        "MTR-002": Meter(serial_number="MTR-002", status=MeterStatus.ACTIVE.value, consumer_id=8),
        "MTR-999": Meter(serial_number="MTR-999", status=MeterStatus.INACTIVE.value),
    }
    test_db.add_all(created.values())
    test_db.commit()
    return created


@pytest.fixture
def client(test_db: Session) -> Iterator[TestClient]:
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build a bearer header for a caller id."""

    def _headers(caller_id: int) -> dict[str, str]:
        token = create_access_token(data={"sub": str(caller_id)})
        return {"Authorization": f"Bearer {token}"}

    return _headers
