"""Access policies deciding whether a caller may view a meter's data."""

import logging
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from smartmeter.core.config import settings
from smartmeter.services.meter_registry import get_meter, is_active

logger = logging.getLogger(__name__)


class AccessPolicy(Protocol):
    """Decision rule for caller access to a meter."""

    def can_access(self, db: Session, meter_serial: str, caller_id: int) -> bool: ...


class ActiveMeterPolicy:
    """Allow any caller to see any Active meter.

    Stand-in until callers are linked to the meters they own; see
    MeterOwnerPolicy.
    """

    def can_access(self, db: Session, meter_serial: str, caller_id: int) -> bool:
        return is_active(db, meter_serial)


class MeterOwnerPolicy:
    """Allow a caller to see an Active meter only if they are its consumer."""

    def can_access(self, db: Session, meter_serial: str, caller_id: int) -> bool:
        meter = get_meter(db, meter_serial)
        if meter is None or not meter.get_is_active():
            return False
        return meter.consumer_id is not None and meter.consumer_id == caller_id


ACCESS_POLICIES: dict[str, type] = {
    "active_meter": ActiveMeterPolicy,
    "owner": MeterOwnerPolicy,
}


def get_access_policy() -> AccessPolicy:
    """Build the access policy named by the ACCESS_POLICY setting."""
    try:
        policy_cls = ACCESS_POLICIES[settings.ACCESS_POLICY]
    except KeyError:
        raise ValueError(f"Unknown access policy: {settings.ACCESS_POLICY!r}") from None
    return policy_cls()


def evaluate_access(policy: AccessPolicy, db: Session, meter_serial: str, caller_id: int) -> bool:
    """Run a policy, denying on any failure raised while evaluating it."""
    logger.info("Checking access for caller %s, meter %s", caller_id, meter_serial)
    try:
        allowed = bool(policy.can_access(db, meter_serial, caller_id))
    except Exception as e:
        if isinstance(e, SQLAlchemyError):
            db.rollback()
        logger.exception(
            "Error checking meter access for caller %s, meter %s", caller_id, meter_serial
        )
        return False

    logger.info("Meter %s access result: %s", meter_serial, allowed)
    return allowed
