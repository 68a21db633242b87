"""
Use Case: Check Availability

Read-only answer to "can this item be rented for these dates?".
"""

from datetime import date
from typing import List, Optional

from src.libs.result import Error, Result, Return
from src.app.services.availability_checker import AvailabilityChecker
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.availability.dtos import AvailabilityResponse, BatchAvailabilityResponse
from src.domain.reservation_window import ReservationWindow


class CheckAvailabilityUseCase:
    """
    Business Logic:
    1. Validate the window (collection strictly before return)
    2. Verify the item exists in this store
    3. List occupying invoices with overlapping windows, optionally ignoring one
       invoice (the one being edited)
    """

    def __init__(self, tenant: TenantHandle):
        self.tenant = tenant

    async def execute(
        self,
        item_id: int,
        collection_date: date,
        return_date: date,
        exclude_invoice_id: Optional[int] = None,
    ) -> Result[AvailabilityResponse]:
        uow = self.tenant.unit_of_work()
        async with uow:
            result = await AvailabilityChecker(uow).check(
                item_id,
                ReservationWindow(collection_date, return_date),
                exclude_invoice_id=exclude_invoice_id,
            )
            if result.is_err():
                return result
            return Return.ok(AvailabilityResponse.from_result(result.value))


class CheckAvailabilityBatchUseCase:
    """Check several items against the same window in one read"""

    def __init__(self, tenant: TenantHandle):
        self.tenant = tenant

    async def execute(
        self,
        item_ids: List[int],
        collection_date: date,
        return_date: date,
        exclude_invoice_id: Optional[int] = None,
    ) -> Result[BatchAvailabilityResponse]:
        if not item_ids:
            return Return.err(Error("VALIDATION_ERROR", "At least one item is required"))

        uow = self.tenant.unit_of_work()
        async with uow:
            result = await AvailabilityChecker(uow).check_many(
                item_ids,
                ReservationWindow(collection_date, return_date),
                exclude_invoice_id=exclude_invoice_id,
            )
            if result.is_err():
                return result

            items = [AvailabilityResponse.from_result(r) for r in result.value.values()]
            return Return.ok(
                BatchAvailabilityResponse(
                    collection_date=collection_date,
                    return_date=return_date,
                    all_available=all(i.available for i in items),
                    items=items,
                )
            )
