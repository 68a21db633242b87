"""
Availability Use Case DTOs
"""

from datetime import date
from typing import List

from pydantic import BaseModel

from src.app.services.availability_checker import AvailabilityResult, CalendarDay, ConflictRef


class ConflictView(BaseModel):
    """An invoice occupying the item during an overlapping window"""

    invoice_id: int
    invoice_number: str
    status: str
    customer_name: str
    customer_phone: str
    collection_date: date
    return_date: date

    @classmethod
    def from_ref(cls, ref: ConflictRef) -> "ConflictView":
        return cls(
            invoice_id=ref.invoice_id,
            invoice_number=ref.invoice_number,
            status=ref.status.value,
            customer_name=ref.customer_name,
            customer_phone=ref.customer_phone,
            collection_date=ref.collection_date,
            return_date=ref.return_date,
        )


class AvailabilityResponse(BaseModel):
    item_id: int
    available: bool
    collection_date: date
    return_date: date
    conflicts: List[ConflictView]

    @classmethod
    def from_result(cls, result: AvailabilityResult) -> "AvailabilityResponse":
        return cls(
            item_id=result.item_id,
            available=result.available,
            collection_date=result.window.collection_date,
            return_date=result.window.return_date,
            conflicts=[ConflictView.from_ref(ref) for ref in result.conflicts],
        )


class BatchAvailabilityResponse(BaseModel):
    collection_date: date
    return_date: date
    all_available: bool
    items: List[AvailabilityResponse]


class BookedPeriodsResponse(BaseModel):
    item_id: int
    periods: List[ConflictView]


class CalendarDayView(BaseModel):
    day: date
    booked: bool
    invoice_numbers: List[str]

    @classmethod
    def from_day(cls, day: CalendarDay) -> "CalendarDayView":
        return cls(day=day.day, booked=day.booked, invoice_numbers=day.invoice_numbers)


class CalendarResponse(BaseModel):
    item_id: int
    year: int
    month: int
    days: List[CalendarDayView]
