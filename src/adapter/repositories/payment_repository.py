from typing import List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.payment_repository import IPaymentRepository
from src.domain.entities import Payment


class PaymentRepository(IPaymentRepository):
    """Payment repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        """Append a ledger entry (immutable)"""
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def get_by_invoice_id(self, invoice_id: int) -> List[Payment]:
        stmt = select(Payment).where(Payment.invoice_id == invoice_id).order_by(Payment.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
