"""Consumption Pydantic schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator


class ReadingRecordRequest(BaseModel):
    """Schema for recording a single energy consumption reading.

    ``reading_date`` is kept as text so that malformed dates surface as a
    distinct validation failure from the service, not a schema error.
    """

    meter_serial_no: str
    reading_date: str
    energy_consumed: Decimal

    @field_validator("meter_serial_no")
    @classmethod
    def validate_serial(cls, v: str) -> str:
        """Validate the meter serial number is not blank."""
        if not v or not v.strip():
            raise ValueError("Meter serial number must not be empty")
        return v.strip()


class ReadingRecordResponse(BaseModel):
    """Result of a reading ingestion request."""

    recorded: bool
    message: str


class ConsumptionEntry(BaseModel):
    """One raw reading in a consumption listing."""

    reading_date: datetime
    energy_consumed: Decimal


class ConsumptionListing(BaseModel):
    """Readings of one meter over an inclusive window, oldest first."""

    meter_serial_no: str
    from_timestamp: datetime
    to_timestamp: datetime
    readings: list[ConsumptionEntry]


class ConsumptionTotal(BaseModel):
    """Summed consumption of one meter over an inclusive window."""

    meter_serial_no: str
    from_timestamp: datetime
    to_timestamp: datetime
    total_consumption: Decimal
