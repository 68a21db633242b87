from typing import List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.status_history_repository import IStatusHistoryRepository
from src.domain.entities import InvoiceStatusHistory


class StatusHistoryRepository(IStatusHistoryRepository):
    """Invoice status history repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: InvoiceStatusHistory) -> InvoiceStatusHistory:
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def get_by_invoice_id(self, invoice_id: int) -> List[InvoiceStatusHistory]:
        stmt = (
            select(InvoiceStatusHistory)
            .where(InvoiceStatusHistory.invoice_id == invoice_id)
            .order_by(InvoiceStatusHistory.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
