"""
Availability API Routes

Read-only queries; none of these reserve anything.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.api.responses import SuccessEnvelope, success
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.availability import (
    AvailabilityResponse,
    BatchAvailabilityResponse,
    BookedPeriodsResponse,
    CalendarResponse,
    CheckAvailabilityBatchUseCase,
    CheckAvailabilityUseCase,
    GetAvailabilityCalendarUseCase,
    GetBookedPeriodsUseCase,
)
from src.depends import get_tenant_handle

router = APIRouter(tags=["Availability"])


class BatchAvailabilityRequest(BaseModel):
    item_ids: List[int] = Field(..., min_length=1, max_length=100)
    collection_date: date
    return_date: date
    exclude_invoice_id: Optional[int] = None


@router.get("/availability", response_model=SuccessEnvelope[AvailabilityResponse])
async def check_availability(
    item_id: int,
    collection_date: date,
    return_date: date,
    exclude_invoice_id: Optional[int] = None,
    tenant: TenantHandle = Depends(get_tenant_handle),
):
    """
    Check Availability

    Raises:
        - 400 Bad Request: INVALID_WINDOW
        - 404 Not Found: NOT_FOUND (item)
    """
    result = await CheckAvailabilityUseCase(tenant).execute(
        item_id, collection_date, return_date, exclude_invoice_id
    )
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value)


@router.post("/availability/batch", response_model=SuccessEnvelope[BatchAvailabilityResponse])
async def check_availability_batch(
    request: BatchAvailabilityRequest,
    tenant: TenantHandle = Depends(get_tenant_handle),
):
    result = await CheckAvailabilityBatchUseCase(tenant).execute(
        request.item_ids,
        request.collection_date,
        request.return_date,
        request.exclude_invoice_id,
    )
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value)


@router.get(
    "/items/{item_id}/booked-periods",
    response_model=SuccessEnvelope[BookedPeriodsResponse],
)
async def get_booked_periods(
    item_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
    tenant: TenantHandle = Depends(get_tenant_handle),
):
    result = await GetBookedPeriodsUseCase(tenant).execute(item_id, start, end)
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value)


@router.get("/items/{item_id}/calendar", response_model=SuccessEnvelope[CalendarResponse])
async def get_availability_calendar(
    item_id: int,
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    tenant: TenantHandle = Depends(get_tenant_handle),
):
    result = await GetAvailabilityCalendarUseCase(tenant).execute(item_id, year, month)
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value)
