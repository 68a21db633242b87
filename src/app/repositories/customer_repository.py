from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import Customer


class ICustomerRepository(ABC):
    """Customer repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, customer_id: int) -> Optional[Customer]:
        """Get customer by ID"""
        pass

    @abstractmethod
    async def get_by_phone(self, phone: str) -> Optional[Customer]:
        """Get customer by primary phone"""
        pass

    @abstractmethod
    async def create(self, customer: Customer) -> Customer:
        """Create a new customer"""
        pass

    @abstractmethod
    async def update(self, customer: Customer) -> Customer:
        """Update existing customer"""
        pass
