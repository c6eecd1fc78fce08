"""MeterReading database model - the append-only consumption ledger."""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smartmeter.core.database import Base
from smartmeter.models.types import UTCDateTime

if TYPE_CHECKING:
    from smartmeter.models.meter import Meter


class MeterReading(Base):
    """Meter reading ledger entry. Never updated or deleted once stored."""

    __tablename__ = "meter_readings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=lambda: datetime.now(UTC),
    )  # When added to database
    reading_timestamp: Mapped[datetime] = mapped_column(UTCDateTime, index=True)

    # kWh consumed since the previous reading
    energy_consumed: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=3))

    # Auxiliary electrical values, zero when not reported
    voltage: Mapped[Decimal] = mapped_column(Numeric(precision=8, scale=2), default=Decimal("0"))
    current: Mapped[Decimal] = mapped_column(Numeric(precision=8, scale=2), default=Decimal("0"))

    # Foreign keys
    meter_serial_number: Mapped[str] = mapped_column(
        ForeignKey("meters.serial_number"),
        index=True,
    )

    # Relationships
    meter: Mapped["Meter"] = relationship(back_populates="readings")
