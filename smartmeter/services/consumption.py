"""Consumption aggregation over inclusive time windows.

Both operations run the access policy first and raise
``AuthorizationDeniedError`` when it refuses, so a denial can never be
mistaken for an empty window. Store errors propagate unchanged.
"""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from smartmeter.core.exceptions import AuthorizationDeniedError
from smartmeter.core.timeutils import WindowBound, resolve_window
from smartmeter.models.meter_reading import MeterReading
from smartmeter.schemas.consumption import ConsumptionEntry, ConsumptionListing
from smartmeter.services.access import AccessPolicy, evaluate_access, get_access_policy

logger = logging.getLogger(__name__)


def require_access(
    db: Session,
    meter_serial: str,
    caller_id: int,
    policy: AccessPolicy | None = None,
) -> None:
    """Raise AuthorizationDeniedError unless the policy grants access."""
    policy = policy or get_access_policy()
    if not evaluate_access(policy, db, meter_serial, caller_id):
        logger.warning("Access denied for caller %s to meter %s", caller_id, meter_serial)
        raise AuthorizationDeniedError()


def _readings_in_window(
    db: Session,
    meter_serial: str,
    start: datetime,
    end: datetime,
) -> list[MeterReading]:
    """Readings of a meter with start <= timestamp <= end, oldest first."""
    return (
        db.query(MeterReading)
        .filter(
            and_(
                MeterReading.meter_serial_number == meter_serial,
                MeterReading.reading_timestamp >= start,
                MeterReading.reading_timestamp <= end,
            )
        )
        .order_by(MeterReading.reading_timestamp, MeterReading.id)
        .all()
    )


def list_readings(
    db: Session,
    meter_serial: str,
    from_date: WindowBound,
    to_date: WindowBound,
    caller_id: int,
    policy: AccessPolicy | None = None,
) -> ConsumptionListing:
    """List raw readings for a meter over an inclusive window.

    Each entry is the reading's own value; no running total is produced.
    """
    logger.info("Getting energy consumption for meter: %s, caller: %s", meter_serial, caller_id)
    start, end = resolve_window(from_date, to_date)
    require_access(db, meter_serial, caller_id, policy)

    try:
        readings = _readings_in_window(db, meter_serial, start, end)
    except SQLAlchemyError:
        logger.exception("Error getting energy consumption for meter %s", meter_serial)
        raise

    logger.info("Found %d readings for meter %s", len(readings), meter_serial)
    return ConsumptionListing(
        meter_serial_no=meter_serial,
        from_timestamp=start,
        to_timestamp=end,
        readings=[
            ConsumptionEntry(reading_date=r.reading_timestamp, energy_consumed=r.energy_consumed)
            for r in readings
        ],
    )


def total_consumption(
    db: Session,
    meter_serial: str,
    from_date: WindowBound,
    to_date: WindowBound,
    caller_id: int,
    policy: AccessPolicy | None = None,
) -> Decimal:
    """Sum energy consumed by a meter over an inclusive window; zero if none."""
    logger.info("Getting total consumption for meter: %s, caller: %s", meter_serial, caller_id)
    start, end = resolve_window(from_date, to_date)
    require_access(db, meter_serial, caller_id, policy)

    try:
        readings = _readings_in_window(db, meter_serial, start, end)
    except SQLAlchemyError:
        logger.exception("Error getting total consumption for meter %s", meter_serial)
        raise

    # Summed as Decimal so the total matches the listing exactly
    total = sum((r.energy_consumed for r in readings), Decimal("0"))
    logger.info("Total consumption for meter %s: %skWh", meter_serial, total)
    return total
