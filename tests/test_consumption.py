"""Tests for consumption listings and totals."""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from smartmeter.core.exceptions import AuthorizationDeniedError, InvalidInputError
from smartmeter.models.meter import Meter
from smartmeter.services.access import ActiveMeterPolicy, MeterOwnerPolicy
from smartmeter.services.consumption import list_readings, total_consumption
from smartmeter.services.readings import record_reading

POLICY = ActiveMeterPolicy()


@pytest.fixture
def january_readings(test_db: Session, meters: dict[str, Meter]) -> None:
    """MTR-001: 10 kWh on Jan 1 and 15 kWh on Jan 15; MTR-002 has its own reading."""
    # Recorded out of order on purpose
    assert record_reading(test_db, "MTR-001", "2024-01-15", Decimal("15"))
    assert record_reading(test_db, "MTR-001", "2024-01-01", Decimal("10"))
    assert record_reading(test_db, "MTR-002", "2024-01-10", Decimal("99"))


class TestTotalConsumption:
    """Tests for total_consumption."""

    def test_january_total(self, test_db: Session, january_readings: None) -> None:
        total = total_consumption(test_db, "MTR-001", "2024-01-01", "2024-01-31", 7, POLICY)
        assert total == Decimal("25")

    def test_accepts_date_objects(self, test_db: Session, january_readings: None) -> None:
        total = total_consumption(
            test_db, "MTR-001", date(2024, 1, 1), date(2024, 1, 31), 7, POLICY
        )
        assert total == Decimal("25")

    def test_empty_window_is_zero(self, test_db: Session, january_readings: None) -> None:
        total = total_consumption(
            test_db, "MTR-001", date(2024, 3, 1), date(2024, 3, 31), 7, POLICY
        )
        assert total == Decimal("0")

    def test_bounds_are_inclusive(self, test_db: Session, january_readings: None) -> None:
        """Readings exactly on either bound are counted."""
        total = total_consumption(
            test_db, "MTR-001", date(2024, 1, 1), date(2024, 1, 15), 7, POLICY
        )
        assert total == Decimal("25")

    def test_date_end_bound_is_start_of_day(
        self, test_db: Session, meters: dict[str, Meter]
    ) -> None:
        """A calendar end date means midnight, so later readings that day are excluded."""
        record_reading(test_db, "MTR-001", "2024-01-31T00:00:00Z", 1)
        record_reading(test_db, "MTR-001", "2024-01-31T12:00:00Z", 2)
        assert total_consumption(
            test_db, "MTR-001", date(2024, 1, 1), date(2024, 1, 31), 7, POLICY
        ) == Decimal("1")

        end_of_day = datetime(2024, 1, 31, 23, 59, 59, tzinfo=UTC)
        assert total_consumption(
            test_db, "MTR-001", date(2024, 1, 1), end_of_day, 7, POLICY
        ) == Decimal("3")

    def test_inverted_window_rejected(self, test_db: Session, january_readings: None) -> None:
        with pytest.raises(InvalidInputError):
            total_consumption(test_db, "MTR-001", date(2024, 2, 1), date(2024, 1, 1), 7, POLICY)

    def test_denied_for_inactive_meter(self, test_db: Session, january_readings: None) -> None:
        with pytest.raises(AuthorizationDeniedError):
            total_consumption(test_db, "MTR-999", date(2024, 1, 1), date(2024, 1, 31), 7, POLICY)

    def test_owner_policy_denies_other_consumer(
        self, test_db: Session, january_readings: None
    ) -> None:
        with pytest.raises(AuthorizationDeniedError):
            total_consumption(
                test_db, "MTR-001", date(2024, 1, 1), date(2024, 1, 31), 8, MeterOwnerPolicy()
            )


class TestListReadings:
    """Tests for list_readings."""

    def test_lists_in_timestamp_order(self, test_db: Session, january_readings: None) -> None:
        listing = list_readings(test_db, "MTR-001", "2024-01-01", "2024-01-31", 7, POLICY)

        assert [r.reading_date for r in listing.readings] == [
            datetime(2024, 1, 1, tzinfo=UTC),
            datetime(2024, 1, 15, tzinfo=UTC),
        ]
        # Raw values, not a running total
        assert [r.energy_consumed for r in listing.readings] == [Decimal("10"), Decimal("15")]
        assert listing.from_timestamp == datetime(2024, 1, 1, tzinfo=UTC)
        assert listing.to_timestamp == datetime(2024, 1, 31, tzinfo=UTC)

    def test_sum_matches_total(self, test_db: Session, meters: dict[str, Meter]) -> None:
        for day, value in [(3, "1.125"), (1, "2.5"), (2, "0.375"), (2, "4")]:
            record_reading(test_db, "MTR-001", f"2024-05-0{day}T08:00:00Z", Decimal(value))

        listing = list_readings(test_db, "MTR-001", "2024-05-01", "2024-05-31", 7, POLICY)
        total = total_consumption(test_db, "MTR-001", "2024-05-01", "2024-05-31", 7, POLICY)

        timestamps = [r.reading_date for r in listing.readings]
        assert timestamps == sorted(timestamps)
        assert sum((r.energy_consumed for r in listing.readings), Decimal("0")) == total
        assert total == Decimal("8")

    def test_empty_window_is_empty(self, test_db: Session, january_readings: None) -> None:
        listing = list_readings(test_db, "MTR-001", "2023-01-01", "2023-12-31", 7, POLICY)
        assert listing.readings == []

    def test_denied_returns_no_data(self, test_db: Session, january_readings: None) -> None:
        with pytest.raises(AuthorizationDeniedError):
            list_readings(test_db, "MTR-404", "2024-01-01", "2024-01-31", 7, POLICY)
