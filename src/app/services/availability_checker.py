"""
Availability checking for rentable items.

An item is available for a window when no invoice in reserved or
out_with_customer holds an overlapping half-open window on it. Sale and
design operations never occupy an item.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import StoreUnitOfWork
from src.domain.entities import Customer, Invoice, InvoiceStatus
from src.domain.reservation_window import ReservationWindow


@dataclass
class ConflictRef:
    invoice_id: int
    invoice_number: str
    status: InvoiceStatus
    customer_name: str
    customer_phone: str
    collection_date: date
    return_date: date

    @classmethod
    def from_row(cls, invoice: Invoice, customer: Customer) -> "ConflictRef":
        return cls(
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            status=invoice.status,
            customer_name=customer.name,
            customer_phone=customer.phone,
            collection_date=invoice.collection_date,
            return_date=invoice.return_date,
        )

    def as_dict(self) -> dict:
        return {
            "invoice_id": self.invoice_id,
            "invoice_number": self.invoice_number,
            "status": self.status.value,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "collection_date": self.collection_date.isoformat(),
            "return_date": self.return_date.isoformat(),
        }


@dataclass
class AvailabilityResult:
    item_id: int
    window: ReservationWindow
    conflicts: List[ConflictRef] = field(default_factory=list)

    @property
    def available(self) -> bool:
        return not self.conflicts


@dataclass
class CalendarDay:
    day: date
    booked: bool
    invoice_numbers: List[str] = field(default_factory=list)


def invalid_window_error(window: ReservationWindow) -> Error:
    return Error(
        "INVALID_WINDOW",
        "Return date must be after collection date",
        reason=f"{window.collection_date.isoformat()} >= {window.return_date.isoformat()}",
    )


def conflict_error(result: AvailabilityResult) -> Error:
    return Error(
        "CONFLICT",
        "Item is already booked for the requested dates",
        details={"conflicts": [c.as_dict() for c in result.conflicts]},
    )


class AvailabilityChecker:
    """
    Read-only view over the occupying invoices of a tenant store.

    Runs inside a unit of work the caller has already entered, so the
    reservation orchestrator can check and insert in one transaction.
    """

    def __init__(self, uow: StoreUnitOfWork):
        self.uow = uow

    async def check(
        self,
        item_id: int,
        window: ReservationWindow,
        exclude_invoice_id: Optional[int] = None,
    ) -> Result[AvailabilityResult]:
        if not window.is_valid:
            return Return.err(invalid_window_error(window))

        item = await self.uow.items.get_by_id(item_id)
        if not item:
            return Return.err(Error("NOT_FOUND", "Item not found", reason=f"item {item_id}"))

        return Return.ok(await self._conflicts(item_id, window, exclude_invoice_id))

    async def check_many(
        self,
        item_ids: Iterable[int],
        window: ReservationWindow,
        exclude_invoice_id: Optional[int] = None,
    ) -> Result[Dict[int, AvailabilityResult]]:
        """Check several items against one window; unknown items fail the whole batch"""
        if not window.is_valid:
            return Return.err(invalid_window_error(window))

        results: Dict[int, AvailabilityResult] = {}
        for item_id in dict.fromkeys(item_ids):
            item = await self.uow.items.get_by_id(item_id)
            if not item:
                return Return.err(
                    Error("NOT_FOUND", "Item not found", reason=f"item {item_id}")
                )
            results[item_id] = await self._conflicts(item_id, window, exclude_invoice_id)
        return Return.ok(results)

    async def booked_periods(
        self,
        item_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Result[List[ConflictRef]]:
        if start is not None and end is not None and start > end:
            return Return.err(
                Error("INVALID_WINDOW", "Range start must not be after range end")
            )

        item = await self.uow.items.get_by_id(item_id)
        if not item:
            return Return.err(Error("NOT_FOUND", "Item not found", reason=f"item {item_id}"))

        rows = await self.uow.invoices.find_booked_periods(item_id, start, end)
        return Return.ok([ConflictRef.from_row(invoice, customer) for invoice, customer in rows])

    async def calendar(self, item_id: int, year: int, month: int) -> Result[List[CalendarDay]]:
        """One entry per day of the month; a day is booked when some window contains it"""
        if not 1 <= month <= 12:
            return Return.err(Error("VALIDATION_ERROR", "Month must be between 1 and 12"))

        first = date(year, month, 1)
        last = date(year, month, calendar.monthrange(year, month)[1])
        periods = await self.booked_periods(item_id, first, last)
        if periods.is_err():
            return periods

        windows = [
            (ReservationWindow(p.collection_date, p.return_date), p.invoice_number)
            for p in periods.value
        ]
        days = []
        day = first
        while day <= last:
            numbers = [number for window, number in windows if window.contains_day(day)]
            days.append(CalendarDay(day=day, booked=bool(numbers), invoice_numbers=numbers))
            day += timedelta(days=1)
        return Return.ok(days)

    async def _conflicts(
        self,
        item_id: int,
        window: ReservationWindow,
        exclude_invoice_id: Optional[int],
    ) -> AvailabilityResult:
        rows = await self.uow.invoices.find_overlapping(
            item_id,
            window.collection_date,
            window.return_date,
            exclude_invoice_id=exclude_invoice_id,
        )
        return AvailabilityResult(
            item_id=item_id,
            window=window,
            conflicts=[ConflictRef.from_row(invoice, customer) for invoice, customer in rows],
        )
