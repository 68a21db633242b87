from abc import ABC, abstractmethod
from typing import List

from src.domain.entities import InvoiceStatusHistory


class IStatusHistoryRepository(ABC):
    """Invoice status history repository interface - application layer"""

    @abstractmethod
    async def create(self, entry: InvoiceStatusHistory) -> InvoiceStatusHistory:
        """Append a history entry (immutable)"""
        pass

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: int) -> List[InvoiceStatusHistory]:
        """All history entries of an invoice, oldest first"""
        pass
