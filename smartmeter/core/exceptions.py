"""Domain exceptions raised by the service layer.

Services never raise ``HTTPException``; ``smartmeter.main`` maps these to
status codes so that validation failures, missing data, authorization
denials and payment conflicts stay distinguishable for any caller.
"""

from smartmeter.models.enums import MeterAvailability


class SmartMeterError(Exception):
    """Base class for all domain errors."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class InvalidInputError(SmartMeterError):
    """Malformed input such as unparseable date text or an inverted window."""


class MeterUnavailableError(SmartMeterError):
    """Meter does not exist or is not Active."""

    def __init__(self, serial_number: str, availability: MeterAvailability) -> None:
        super().__init__(f"Meter not found or inactive: {serial_number}")
        self.serial_number = serial_number
        self.availability = availability


class AuthorizationDeniedError(SmartMeterError):
    """The access policy refused the caller for this meter."""

    def __init__(self, detail: str = "Access to this meter's data is not authorized") -> None:
        super().__init__(detail)


class ConflictError(SmartMeterError):
    """A bill cannot be paid in its current state."""

    def __init__(self, bill_id: int, detail: str) -> None:
        super().__init__(detail)
        self.bill_id = bill_id


class BillNotFoundError(ConflictError):
    """Payment attempted on a bill that does not exist."""

    def __init__(self, bill_id: int) -> None:
        super().__init__(bill_id, f"Bill {bill_id} not found")


class BillAlreadyPaidError(ConflictError):
    """Payment attempted on a bill that is already Paid."""

    def __init__(self, bill_id: int) -> None:
        super().__init__(bill_id, f"Bill {bill_id} is already paid")
