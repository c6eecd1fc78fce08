"""Billing schemas for bill generation and payment."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel

from smartmeter.models.enums import BillStatus, PaymentMethod


class GenerateBillRequest(BaseModel):
    """Schema for generating a bill over a consumption window."""

    consumer_id: int
    meter_serial_no: str
    from_date: datetime | date
    to_date: datetime | date


class PayBillRequest(BaseModel):
    """Schema for paying a bill."""

    payment_method: PaymentMethod = PaymentMethod.CASH


class BillResponse(BaseModel):
    """Schema for bill response."""

    id: int
    consumer_id: int
    meter_serial_number: str
    period_start: datetime
    period_end: datetime
    total_consumption: Decimal
    amount_due: Decimal
    status: BillStatus
    created_at: datetime
    paid_at: datetime | None

    model_config = {"from_attributes": True}


class PaymentResponse(BaseModel):
    """Schema for payment response."""

    id: int
    bill_id: int
    amount: Decimal
    payment_method: PaymentMethod
    paid_at: datetime

    model_config = {"from_attributes": True}
