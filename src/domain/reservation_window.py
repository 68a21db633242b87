"""
Reservation windows.

A window is the half-open date interval [collection_date, return_date) during
which an invoice occupies its item. An item returned on day N may be collected
again by another customer on day N.
"""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class ReservationWindow:
    collection_date: date
    return_date: date

    @property
    def is_valid(self) -> bool:
        return self.collection_date < self.return_date

    def overlaps(self, other: "ReservationWindow") -> bool:
        return (
            self.collection_date < other.return_date
            and self.return_date > other.collection_date
        )

    def contains_day(self, day: date) -> bool:
        return self.collection_date <= day < self.return_date

    def as_dict(self) -> dict:
        return {
            "collection_date": self.collection_date.isoformat(),
            "return_date": self.return_date.isoformat(),
        }
