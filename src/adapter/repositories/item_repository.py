from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.item_repository import IItemRepository
from src.domain.entities import Item


class ItemRepository(IItemRepository):
    """Item repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, item_id: int) -> Optional[Item]:
        stmt = select(Item).where(Item.id == item_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_code(self, code: str) -> Optional[Item]:
        stmt = select(Item).where(Item.code == code)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def lock_by_id(self, item_id: int) -> Optional[Item]:
        # SQLite ignores FOR UPDATE; the in-process item lock covers it there
        stmt = select(Item).where(Item.id == item_id).with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self, category: Optional[str] = None) -> List[Item]:
        stmt = select(Item)
        if category:
            stmt = stmt.where(Item.category == category)
        stmt = stmt.order_by(Item.code)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, item: Item) -> Item:
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item
