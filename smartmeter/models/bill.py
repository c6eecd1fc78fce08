"""Bill and Payment database models."""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smartmeter.core.database import Base
from smartmeter.models.enums import BillStatus, PaymentMethod
from smartmeter.models.types import UTCDateTime


class Bill(Base):
    """Monetary obligation for one consumer over one consumption window.

    Created PENDING; the only transition is to PAID, made by a payment.
    """

    __tablename__ = "bills"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    consumer_id: Mapped[int] = mapped_column(index=True)
    meter_serial_number: Mapped[str] = mapped_column(ForeignKey("meters.serial_number"))

    # Billing period, inclusive on both ends
    period_start: Mapped[datetime] = mapped_column(UTCDateTime)
    period_end: Mapped[datetime] = mapped_column(UTCDateTime)

    total_consumption: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=3))
    amount_due: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2))
    status: Mapped[str] = mapped_column(String(20), default=BillStatus.PENDING.value, index=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=lambda: datetime.now(UTC))
    paid_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    # Relationships
    payment: Mapped["Payment | None"] = relationship(back_populates="bill")


class Payment(Base):
    """Successful payment against a bill. Immutable once created."""

    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Unique: a bill has at most one successful payment
    bill_id: Mapped[int] = mapped_column(ForeignKey("bills.id"), unique=True, index=True)

    amount: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2))
    payment_method: Mapped[str] = mapped_column(String(20), default=PaymentMethod.CASH.value)
    paid_at: Mapped[datetime] = mapped_column(UTCDateTime, default=lambda: datetime.now(UTC))

    # Relationships
    bill: Mapped["Bill"] = relationship(back_populates="payment")
