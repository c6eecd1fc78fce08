"""Billing routes: generation, lookups and payment."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from smartmeter.core.database import get_db
from smartmeter.core.security import get_caller_id
from smartmeter.schemas.billing import (
    BillResponse,
    GenerateBillRequest,
    PaymentResponse,
    PayBillRequest,
)
from smartmeter.services import billing as billing_service
from smartmeter.services.access import AccessPolicy, get_access_policy
from smartmeter.services.consumption import require_access
from smartmeter.services.tariff import Tariff, get_tariff

router = APIRouter(prefix="/bills", tags=["billing"])


@router.post(
    "/generate",
    response_model=BillResponse,
    status_code=status.HTTP_201_CREATED,
)
def generate_bill(
    data: GenerateBillRequest,
    db: Session = Depends(get_db),
    caller_id: int = Depends(get_caller_id),
    tariff: Tariff = Depends(get_tariff),
    policy: AccessPolicy = Depends(get_access_policy),
) -> BillResponse:
    """Generate a Pending bill from a meter's consumption over a window."""
    bill = billing_service.generate_bill(
        db,
        data.consumer_id,
        data.meter_serial_no,
        data.from_date,
        data.to_date,
        tariff=tariff,
        policy=policy,
        caller_id=caller_id,
    )
    return BillResponse.model_validate(bill)


@router.get("/pending", response_model=list[BillResponse])
def list_pending_bills(
    db: Session = Depends(get_db),
    caller_id: int = Depends(get_caller_id),
    policy: AccessPolicy = Depends(get_access_policy),
) -> list[BillResponse]:
    """List the bills awaiting payment on meters the caller may see."""
    bills = billing_service.filter_accessible_bills(
        db, billing_service.get_pending_bills(db), caller_id, policy
    )
    return [BillResponse.model_validate(b) for b in bills]


@router.get("/consumer/{consumer_id}", response_model=list[BillResponse])
def list_consumer_bills(
    consumer_id: int,
    db: Session = Depends(get_db),
    caller_id: int = Depends(get_caller_id),
    policy: AccessPolicy = Depends(get_access_policy),
) -> list[BillResponse]:
    """List all bills of a consumer."""
    bills = billing_service.get_consumer_bills(db, consumer_id)
    for serial in {b.meter_serial_number for b in bills}:
        require_access(db, serial, caller_id, policy)
    return [BillResponse.model_validate(b) for b in bills]


@router.get("/{bill_id}", response_model=BillResponse)
def get_bill(
    bill_id: int,
    db: Session = Depends(get_db),
    caller_id: int = Depends(get_caller_id),
    policy: AccessPolicy = Depends(get_access_policy),
) -> BillResponse:
    """Get a bill by ID."""
    bill = billing_service.get_bill_by_id(db, bill_id)
    if not bill:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Bill not found",
        )
    billing_service.authorize_bill(db, bill, caller_id, policy)
    return BillResponse.model_validate(bill)


@router.post("/{bill_id}/pay", response_model=PaymentResponse)
def pay_bill(
    bill_id: int,
    data: PayBillRequest | None = None,
    db: Session = Depends(get_db),
    caller_id: int = Depends(get_caller_id),
    policy: AccessPolicy = Depends(get_access_policy),
) -> PaymentResponse:
    """Pay a Pending bill in full. A bill can be paid only once."""
    method = data.payment_method if data else PayBillRequest().payment_method
    payment = billing_service.pay_bill(db, bill_id, method, caller_id=caller_id, policy=policy)
    return PaymentResponse.model_validate(payment)
