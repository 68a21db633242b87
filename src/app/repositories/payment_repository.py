from abc import ABC, abstractmethod
from typing import List

from src.domain.entities import Payment


class IPaymentRepository(ABC):
    """Payment repository interface - application layer"""

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        """Append a ledger entry (immutable)"""
        pass

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: int) -> List[Payment]:
        """All ledger entries of an invoice, oldest first"""
        pass
