from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.entities import Item


class IItemRepository(ABC):
    """Item repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, item_id: int) -> Optional[Item]:
        """Get item by ID"""
        pass

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[Item]:
        """Get item by display code"""
        pass

    @abstractmethod
    async def lock_by_id(self, item_id: int) -> Optional[Item]:
        """
        Get item by ID holding a row lock until the transaction ends.

        Serializes check-and-reserve for the item on databases that
        support SELECT ... FOR UPDATE.
        """
        pass

    @abstractmethod
    async def list_all(self, category: Optional[str] = None) -> List[Item]:
        """List items ordered by code"""
        pass

    @abstractmethod
    async def create(self, item: Item) -> Item:
        """Create a new item"""
        pass
