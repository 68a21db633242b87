from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.customer_repository import CustomerRepository
from src.adapter.repositories.invoice_repository import InvoiceRepository
from src.adapter.repositories.item_repository import ItemRepository
from src.adapter.repositories.payment_repository import PaymentRepository
from src.adapter.repositories.status_history_repository import StatusHistoryRepository
from src.adapter.repositories.tenant_repository import TenantRepository
from src.app.services.unit_of_work import PlatformUnitOfWork, StoreUnitOfWork


class _SessionMixin:
    session: AsyncSession

    async def __aexit__(self, *args):
        # Anything not explicitly committed is discarded
        await self.rollback()
        await self.session.close()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()


class SqlAlchemyPlatformUnitOfWork(_SessionMixin, PlatformUnitOfWork):
    """SQLAlchemy implementation of the platform UnitOfWork"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        self.tenants = TenantRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self


class SqlAlchemyStoreUnitOfWork(_SessionMixin, StoreUnitOfWork):
    """SQLAlchemy implementation of a tenant store UnitOfWork"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        self.items = ItemRepository(self.session)
        self.customers = CustomerRepository(self.session)
        self.invoices = InvoiceRepository(self.session)
        self.payments = PaymentRepository(self.session)
        self.status_history = StatusHistoryRepository(self.session)
        return self
