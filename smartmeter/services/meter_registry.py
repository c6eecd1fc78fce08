"""Meter registry lookups."""

from sqlalchemy.orm import Session

from smartmeter.core.exceptions import MeterUnavailableError
from smartmeter.models.enums import MeterAvailability
from smartmeter.models.meter import Meter


def get_meter(db: Session, serial_number: str) -> Meter | None:
    """Get a meter by serial number."""
    return db.query(Meter).filter(Meter.serial_number == serial_number).first()


def check_meter(db: Session, serial_number: str) -> MeterAvailability:
    """Classify a serial number as VALID, NOT_FOUND or INACTIVE."""
    meter = get_meter(db, serial_number)
    if meter is None:
        return MeterAvailability.NOT_FOUND
    if not meter.get_is_active():
        return MeterAvailability.INACTIVE
    return MeterAvailability.VALID


def is_active(db: Session, serial_number: str) -> bool:
    """Check that a meter exists and is Active. Missing and inactive both give False."""
    return check_meter(db, serial_number) is MeterAvailability.VALID


def require_active_meter(db: Session, serial_number: str) -> Meter:
    """Return the meter, raising MeterUnavailableError tagged with the reason otherwise."""
    meter = get_meter(db, serial_number)
    if meter is None:
        raise MeterUnavailableError(serial_number, MeterAvailability.NOT_FOUND)
    if not meter.get_is_active():
        raise MeterUnavailableError(serial_number, MeterAvailability.INACTIVE)
    return meter
