from datetime import date
from typing import Optional

from src.libs.result import Result, Return
from src.app.services.availability_checker import AvailabilityChecker
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.availability.dtos import (
    BookedPeriodsResponse,
    CalendarDayView,
    CalendarResponse,
    ConflictView,
)


class GetBookedPeriodsUseCase:
    """Occupied windows of an item, optionally limited to [start, end]"""

    def __init__(self, tenant: TenantHandle):
        self.tenant = tenant

    async def execute(
        self, item_id: int, start: Optional[date] = None, end: Optional[date] = None
    ) -> Result[BookedPeriodsResponse]:
        uow = self.tenant.unit_of_work()
        async with uow:
            result = await AvailabilityChecker(uow).booked_periods(item_id, start, end)
            if result.is_err():
                return result
            return Return.ok(
                BookedPeriodsResponse(
                    item_id=item_id,
                    periods=[ConflictView.from_ref(ref) for ref in result.value],
                )
            )


class GetAvailabilityCalendarUseCase:
    """Day-by-day booked/free view of one item for a month"""

    def __init__(self, tenant: TenantHandle):
        self.tenant = tenant

    async def execute(self, item_id: int, year: int, month: int) -> Result[CalendarResponse]:
        uow = self.tenant.unit_of_work()
        async with uow:
            result = await AvailabilityChecker(uow).calendar(item_id, year, month)
            if result.is_err():
                return result
            return Return.ok(
                CalendarResponse(
                    item_id=item_id,
                    year=year,
                    month=month,
                    days=[CalendarDayView.from_day(day) for day in result.value],
                )
            )
