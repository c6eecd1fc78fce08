"""Tests for access policies."""

import pytest
from sqlalchemy.orm import Session

from smartmeter.core.config import settings
from smartmeter.models.meter import Meter
from smartmeter.services.access import (
    ActiveMeterPolicy,
    MeterOwnerPolicy,
    evaluate_access,
    get_access_policy,
)


class ExplodingPolicy:
    """Policy whose evaluation always fails."""

    def can_access(self, db: Session, meter_serial: str, caller_id: int) -> bool:
        raise RuntimeError("registry unavailable")


class TestActiveMeterPolicy:
    """The provisional rule ignores the caller entirely."""

    def test_any_caller_sees_active_meter(self, test_db: Session, meters: dict[str, Meter]) -> None:
        policy = ActiveMeterPolicy()
        assert evaluate_access(policy, test_db, "MTR-001", 7) is True
        assert evaluate_access(policy, test_db, "MTR-001", 12345) is True

    def test_inactive_and_missing_denied(self, test_db: Session, meters: dict[str, Meter]) -> None:
        policy = ActiveMeterPolicy()
        assert evaluate_access(policy, test_db, "MTR-999", 7) is False
        assert evaluate_access(policy, test_db, "MTR-404", 7) is False


class TestMeterOwnerPolicy:
    """Ownership rule: only the meter's consumer may see it."""

    def test_owner_allowed(self, test_db: Session, meters: dict[str, Meter]) -> None:
        assert evaluate_access(MeterOwnerPolicy(), test_db, "MTR-001", 7) is True

    def test_other_consumer_denied(self, test_db: Session, meters: dict[str, Meter]) -> None:
        assert evaluate_access(MeterOwnerPolicy(), test_db, "MTR-001", 8) is False

    def test_unowned_meter_denied(self, test_db: Session, meters: dict[str, Meter]) -> None:
        assert evaluate_access(MeterOwnerPolicy(), test_db, "MTR-999", 7) is False


def test_policy_failure_denies(test_db: Session, meters: dict[str, Meter]) -> None:
    """Errors while evaluating never fall through to allow."""
    assert evaluate_access(ExplodingPolicy(), test_db, "MTR-001", 7) is False


def test_get_access_policy_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "ACCESS_POLICY", "owner")
    assert isinstance(get_access_policy(), MeterOwnerPolicy)
    monkeypatch.setattr(settings, "ACCESS_POLICY", "active_meter")
    assert isinstance(get_access_policy(), ActiveMeterPolicy)


def test_get_access_policy_unknown(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "ACCESS_POLICY", "everyone")
    with pytest.raises(ValueError):
        get_access_policy()
