"""Meter database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smartmeter.core.database import Base
from smartmeter.models.enums import MeterStatus
from smartmeter.models.types import UTCDateTime

if TYPE_CHECKING:
    from smartmeter.models.meter_reading import MeterReading


class Meter(Base):
    """Physical meter identified by its serial number.

    Rows are maintained by an external provisioning process; this service
    only reads them.
    """

    __tablename__ = "meters"

    serial_number: Mapped[str] = mapped_column(String(50), primary_key=True)
    status: Mapped[str] = mapped_column(String(20), default=MeterStatus.ACTIVE.value, index=True)

    # Owning consumer, used by the ownership access policy
    consumer_id: Mapped[int | None] = mapped_column(nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=lambda: datetime.now(UTC))

    # Relationships
    readings: Mapped[list["MeterReading"]] = relationship(back_populates="meter")

    def get_is_active(self) -> bool:
        """Check if this meter currently accepts readings."""
        return self.status == MeterStatus.ACTIVE.value
