"""Energy consumption routes: ingestion, listings and totals."""

import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from smartmeter.core.database import get_db
from smartmeter.core.security import get_caller_id
from smartmeter.core.timeutils import resolve_window
from smartmeter.schemas.consumption import (
    ConsumptionListing,
    ConsumptionTotal,
    ReadingRecordRequest,
    ReadingRecordResponse,
)
from smartmeter.services import consumption as consumption_service
from smartmeter.services import readings as reading_service
from smartmeter.services.access import AccessPolicy, get_access_policy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/consumption", tags=["energy-consumption"])


@router.post(
    "/record",
    response_model=ReadingRecordResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ReadingRecordResponse}},
    dependencies=[Depends(get_caller_id)],
)
def record_consumption(
    record: ReadingRecordRequest,
    db: Session = Depends(get_db),
):
    """Record one energy consumption reading for an Active meter."""
    recorded = reading_service.record_reading(
        db, record.meter_serial_no, record.reading_date, record.energy_consumed
    )
    if not recorded:
        logger.warning("Failed to record energy consumption for meter: %s", record.meter_serial_no)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ReadingRecordResponse(
                recorded=False, message="Failed to record energy consumption"
            ).model_dump(),
        )
    return ReadingRecordResponse(recorded=True, message="Energy consumption recorded successfully")


@router.get("/readings", response_model=ConsumptionListing)
def list_readings(
    meter_serial_no: str = Query(..., description="Meter serial number"),
    from_date: str = Query(..., description="Window start, YYYY-MM-DD or ISO date-time"),
    to_date: str = Query(..., description="Window end (inclusive)"),
    db: Session = Depends(get_db),
    caller_id: int = Depends(get_caller_id),
    policy: AccessPolicy = Depends(get_access_policy),
) -> ConsumptionListing:
    """List individual readings for a meter, oldest first."""
    return consumption_service.list_readings(
        db,
        meter_serial_no,
        from_date,
        to_date,
        caller_id,
        policy,
    )


@router.get("/total", response_model=ConsumptionTotal)
def get_total_consumption(
    meter_serial_no: str = Query(..., description="Meter serial number"),
    from_date: str = Query(..., description="Window start, YYYY-MM-DD or ISO date-time"),
    to_date: str = Query(..., description="Window end (inclusive)"),
    db: Session = Depends(get_db),
    caller_id: int = Depends(get_caller_id),
    policy: AccessPolicy = Depends(get_access_policy),
) -> ConsumptionTotal:
    """Get total kWh consumed by a meter over an inclusive window."""
    start, end = resolve_window(from_date, to_date)
    total = consumption_service.total_consumption(
        db, meter_serial_no, start, end, caller_id, policy
    )
    return ConsumptionTotal(
        meter_serial_no=meter_serial_no,
        from_timestamp=start,
        to_timestamp=end,
        total_consumption=total,
    )
