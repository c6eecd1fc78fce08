"""Reading ingestion.

Ingestion is best-effort: business-rule rejections and store failures both
come back as ``False``. Only unparseable date text raises, as
``InvalidInputError``.
"""

import logging
from decimal import Decimal, InvalidOperation

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from smartmeter.core.exceptions import MeterUnavailableError
from smartmeter.core.timeutils import parse_reading_timestamp
from smartmeter.models.meter_reading import MeterReading
from smartmeter.services.meter_registry import require_active_meter

logger = logging.getLogger(__name__)

# energy_consumed is Numeric(12, 3)
ENERGY_QUANTUM = Decimal("0.001")
ENERGY_LIMIT = Decimal("1000000000")


def _as_decimal(value: Decimal | int | float | str) -> Decimal | None:
    """Convert a consumption value to a finite Decimal, or None if impossible."""
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def record_reading(
    db: Session,
    meter_serial: str,
    reading_date_text: str,
    energy_consumed: Decimal | int | float | str,
) -> bool:
    """Validate and append one consumption reading for an Active meter.

    Not idempotent: identical calls store identical readings twice.
    """
    logger.info("Recording energy consumption for meter: %s", meter_serial)

    try:
        require_active_meter(db, meter_serial)
    except MeterUnavailableError as e:
        logger.warning("Meter not found or inactive: %s (%s)", meter_serial, e.availability.value)
        return False
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error recording energy consumption for meter %s", meter_serial)
        return False

    energy = _as_decimal(energy_consumed)
    if energy is None or energy < 0:
        logger.warning("Invalid energy consumption value: %s", energy_consumed)
        return False
    if energy >= ENERGY_LIMIT or energy != energy.quantize(ENERGY_QUANTUM):
        logger.warning("Energy consumption value out of stored precision: %s", energy_consumed)
        return False

    reading_timestamp = parse_reading_timestamp(reading_date_text)

    reading = MeterReading(
        meter_serial_number=meter_serial,
        reading_timestamp=reading_timestamp,
        energy_consumed=energy,
        voltage=Decimal("0"),
        current=Decimal("0"),
    )
    try:
        db.add(reading)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error recording energy consumption for meter %s", meter_serial)
        return False

    logger.info("Successfully recorded %skWh for meter %s", energy, meter_serial)
    return True
