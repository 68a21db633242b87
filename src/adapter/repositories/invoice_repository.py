from datetime import UTC, date, datetime, time, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.invoice_repository import IInvoiceRepository, InvoiceFilters
from src.domain.entities import (
    Customer,
    Invoice,
    OCCUPYING_STATUSES,
    WINDOWED_OPERATIONS,
)


class InvoiceRepository(IInvoiceRepository):
    """Invoice repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        stmt = select(Invoice).where(Invoice.id == invoice_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def lock_by_id(self, invoice_id: int) -> Optional[Invoice]:
        # SQLite ignores FOR UPDATE; the in-process item lock covers it there
        stmt = (
            select(Invoice)
            .where(Invoice.id == invoice_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, invoice: Invoice) -> Invoice:
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def update(self, invoice: Invoice) -> Invoice:
        invoice.updated_at = datetime.now(UTC)
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def next_sequence(self) -> int:
        result = await self.session.execute(select(func.max(Invoice.sequence)))
        current = result.scalar()
        return (current or 0) + 1

    def _occupying(self, item_id: int):
        return (
            select(Invoice, Customer)
            .join(Customer, Customer.id == Invoice.customer_id)
            .where(
                Invoice.item_id == item_id,
                Invoice.status.in_(list(OCCUPYING_STATUSES)),
                Invoice.operation_type.in_(list(WINDOWED_OPERATIONS)),
                Invoice.collection_date.is_not(None),
                Invoice.return_date.is_not(None),
            )
        )

    async def find_overlapping(
        self,
        item_id: int,
        collection_date: date,
        return_date: date,
        exclude_invoice_id: Optional[int] = None,
    ) -> List[Tuple[Invoice, Customer]]:
        # half-open overlap: existing.c < new.r AND existing.r > new.c
        stmt = self._occupying(item_id).where(
            Invoice.collection_date < return_date,
            Invoice.return_date > collection_date,
        )
        if exclude_invoice_id is not None:
            stmt = stmt.where(Invoice.id != exclude_invoice_id)
        stmt = stmt.order_by(Invoice.collection_date, Invoice.id)
        result = await self.session.execute(stmt)
        return [tuple(row) for row in result.all()]

    async def find_booked_periods(
        self,
        item_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Tuple[Invoice, Customer]]:
        stmt = self._occupying(item_id)
        if start is not None:
            stmt = stmt.where(Invoice.return_date > start)
        if end is not None:
            stmt = stmt.where(Invoice.collection_date <= end)
        stmt = stmt.order_by(Invoice.collection_date, Invoice.id)
        result = await self.session.execute(stmt)
        return [tuple(row) for row in result.all()]

    async def search(self, filters: InvoiceFilters) -> List[Tuple[Invoice, Customer]]:
        stmt = select(Invoice, Customer).join(Customer, Customer.id == Invoice.customer_id)

        if filters.status is not None:
            stmt = stmt.where(Invoice.status == filters.status)
        if filters.operation_type is not None:
            stmt = stmt.where(Invoice.operation_type == filters.operation_type)
        if filters.item_id is not None:
            stmt = stmt.where(Invoice.item_id == filters.item_id)
        if filters.customer_phone:
            stmt = stmt.where(Customer.phone == filters.customer_phone)
        if filters.date_from is not None:
            lower = datetime.combine(filters.date_from, time.min, tzinfo=UTC)
            stmt = stmt.where(Invoice.created_at >= lower)
        if filters.date_to is not None:
            upper = datetime.combine(filters.date_to + timedelta(days=1), time.min, tzinfo=UTC)
            stmt = stmt.where(Invoice.created_at < upper)
        if not filters.include_archived:
            stmt = stmt.where(Invoice.archived_at.is_(None))

        stmt = stmt.order_by(Invoice.sequence.desc()).offset(filters.offset).limit(filters.limit)
        result = await self.session.execute(stmt)
        return [tuple(row) for row in result.all()]
