from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from src.domain.entities import Customer, Invoice, InvoiceStatus, OperationType


@dataclass
class InvoiceFilters:
    status: Optional[InvoiceStatus] = None
    operation_type: Optional[OperationType] = None
    item_id: Optional[int] = None
    customer_phone: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    include_archived: bool = False
    limit: int = 50
    offset: int = 0


class IInvoiceRepository(ABC):
    """Invoice repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID"""
        pass

    @abstractmethod
    async def lock_by_id(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID for update, re-reading its current row"""
        pass

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """Create a new invoice"""
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Invoice:
        """Update existing invoice"""
        pass

    @abstractmethod
    async def next_sequence(self) -> int:
        """Next free invoice sequence number for this store"""
        pass

    @abstractmethod
    async def find_overlapping(
        self,
        item_id: int,
        collection_date: date,
        return_date: date,
        exclude_invoice_id: Optional[int] = None,
    ) -> List[Tuple[Invoice, Customer]]:
        """
        Invoices occupying item_id whose window overlaps
        [collection_date, return_date), with their customers.
        """
        pass

    @abstractmethod
    async def find_booked_periods(
        self,
        item_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Tuple[Invoice, Customer]]:
        """Occupying invoices of item_id, optionally clipped to [start, end]"""
        pass

    @abstractmethod
    async def search(self, filters: InvoiceFilters) -> List[Tuple[Invoice, Customer]]:
        """List invoices with their customers, newest first"""
        pass
