"""Billing service: bill generation and the Pending -> Paid transition."""

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from smartmeter.core.exceptions import (
    BillAlreadyPaidError,
    BillNotFoundError,
    InvalidInputError,
)
from smartmeter.core.timeutils import WindowBound, resolve_window
from smartmeter.models.bill import Bill, Payment
from smartmeter.models.enums import BillStatus, PaymentMethod
from smartmeter.services.access import AccessPolicy, evaluate_access, get_access_policy
from smartmeter.services.consumption import require_access, total_consumption
from smartmeter.services.tariff import Tariff, get_tariff

logger = logging.getLogger(__name__)


def generate_bill(
    db: Session,
    consumer_id: int,
    meter_serial: str,
    from_date: WindowBound,
    to_date: WindowBound,
    tariff: Tariff | None = None,
    policy: AccessPolicy | None = None,
    caller_id: int | None = None,
) -> Bill:
    """Create a Pending bill for a consumer from a meter's consumption window.

    The access policy must grant the meter to the consumer, so a consumer
    who may not see the meter cannot be billed for it. When the request
    comes from a different caller, that caller must be granted it too.
    """
    logger.info(
        "Generating bill for consumer %s, meter %s, %s to %s",
        consumer_id,
        meter_serial,
        from_date,
        to_date,
    )
    period_start, period_end = resolve_window(from_date, to_date)
    if caller_id is not None and caller_id != consumer_id:
        require_access(db, meter_serial, caller_id, policy)
    total = total_consumption(db, meter_serial, period_start, period_end, consumer_id, policy)

    tariff = tariff or get_tariff()
    amount = tariff.amount_due(total, (period_start, period_end))

    bill = Bill(
        consumer_id=consumer_id,
        meter_serial_number=meter_serial,
        period_start=period_start,
        period_end=period_end,
        total_consumption=total,
        amount_due=amount,
        status=BillStatus.PENDING.value,
    )
    db.add(bill)
    db.commit()
    db.refresh(bill)

    logger.info(
        "Generated bill %s for consumer %s: %skWh, amount %s", bill.id, consumer_id, total, amount
    )
    return bill


def get_bill_by_id(db: Session, bill_id: int) -> Bill | None:
    """Get a bill by ID."""
    return db.query(Bill).filter(Bill.id == bill_id).first()


def get_consumer_bills(db: Session, consumer_id: int) -> list[Bill]:
    """Get all bills for a consumer, newest period first."""
    return (
        db.query(Bill)
        .filter(Bill.consumer_id == consumer_id)
        .order_by(Bill.period_start.desc(), Bill.id.desc())
        .all()
    )


def get_pending_bills(db: Session) -> list[Bill]:
    """Get all bills still awaiting payment."""
    return (
        db.query(Bill)
        .filter(Bill.status == BillStatus.PENDING.value)
        .order_by(Bill.created_at, Bill.id)
        .all()
    )


def authorize_bill(
    db: Session,
    bill: Bill,
    caller_id: int,
    policy: AccessPolicy | None = None,
) -> None:
    """Raise AuthorizationDeniedError unless the caller may see the bill's meter."""
    require_access(db, bill.meter_serial_number, caller_id, policy)


def filter_accessible_bills(
    db: Session,
    bills: list[Bill],
    caller_id: int,
    policy: AccessPolicy | None = None,
) -> list[Bill]:
    """Keep the bills whose meter the caller may see, checking each meter once."""
    policy = policy or get_access_policy()
    allowed: dict[str, bool] = {}
    for bill in bills:
        serial = bill.meter_serial_number
        if serial not in allowed:
            allowed[serial] = evaluate_access(policy, db, serial, caller_id)
    return [b for b in bills if allowed[b.meter_serial_number]]


def pay_bill(
    db: Session,
    bill_id: int,
    payment_method: PaymentMethod | str = PaymentMethod.CASH,
    caller_id: int | None = None,
    policy: AccessPolicy | None = None,
) -> Payment:
    """Pay a Pending bill in full and mark it Paid.

    The status change is a single conditional UPDATE (only while Pending), so
    of several concurrent attempts exactly one succeeds; the others raise
    BillAlreadyPaidError. The unique ``payments.bill_id`` constraint backs
    this up at the schema level.

    With a caller id, the caller must be granted the bill's meter.
    """
    try:
        method = PaymentMethod(payment_method)
    except ValueError:
        raise InvalidInputError(f"Unknown payment method: {payment_method!r}") from None

    logger.info("Paying bill %s by %s", bill_id, method.value)
    if caller_id is not None:
        bill = get_bill_by_id(db, bill_id)
        if bill is None:
            logger.warning("Payment rejected, bill %s not found", bill_id)
            raise BillNotFoundError(bill_id)
        authorize_bill(db, bill, caller_id, policy)

    paid_at = datetime.now(UTC)

    transitioned = (
        db.query(Bill)
        .filter(Bill.id == bill_id, Bill.status == BillStatus.PENDING.value)
        .update(
            {Bill.status: BillStatus.PAID.value, Bill.paid_at: paid_at},
            synchronize_session=False,
        )
    )
    if transitioned != 1:
        db.rollback()
        if get_bill_by_id(db, bill_id) is None:
            logger.warning("Payment rejected, bill %s not found", bill_id)
            raise BillNotFoundError(bill_id)
        logger.warning("Payment rejected, bill %s is already paid", bill_id)
        raise BillAlreadyPaidError(bill_id)

    amount = db.query(Bill.amount_due).filter(Bill.id == bill_id).scalar()
    payment = Payment(
        bill_id=bill_id,
        amount=amount,
        payment_method=method.value,
        paid_at=paid_at,
    )
    db.add(payment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Payment rejected, bill %s already has a payment", bill_id)
        raise BillAlreadyPaidError(bill_id) from None

    db.refresh(payment)
    logger.info("Bill %s paid: %s by %s", bill_id, amount, method.value)
    return payment
