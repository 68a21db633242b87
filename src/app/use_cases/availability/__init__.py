"""Availability use cases (read-only)."""

from .booked_periods_use_case import GetAvailabilityCalendarUseCase, GetBookedPeriodsUseCase
from .check_availability_use_case import (
    CheckAvailabilityBatchUseCase,
    CheckAvailabilityUseCase,
)
from .dtos import (
    AvailabilityResponse,
    BatchAvailabilityResponse,
    BookedPeriodsResponse,
    CalendarResponse,
    ConflictView,
)

__all__ = [
    "CheckAvailabilityUseCase",
    "CheckAvailabilityBatchUseCase",
    "GetBookedPeriodsUseCase",
    "GetAvailabilityCalendarUseCase",
    "AvailabilityResponse",
    "BatchAvailabilityResponse",
    "BookedPeriodsResponse",
    "CalendarResponse",
    "ConflictView",
]
