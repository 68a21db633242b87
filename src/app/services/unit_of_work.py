from abc import ABC, abstractmethod

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.customer_repository import ICustomerRepository
from src.app.repositories.invoice_repository import IInvoiceRepository
from src.app.repositories.item_repository import IItemRepository
from src.app.repositories.payment_repository import IPaymentRepository
from src.app.repositories.status_history_repository import IStatusHistoryRepository
from src.app.repositories.tenant_repository import ITenantRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - transaction management shared by both stores"""

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass


class PlatformUnitOfWork(UnitOfWork):
    """Repositories of the shared platform database"""

    tenants: ITenantRepository
    audit_events: IAuditEventRepository


class StoreUnitOfWork(UnitOfWork):
    """Repositories of one tenant's isolated database"""

    items: IItemRepository
    customers: ICustomerRepository
    invoices: IInvoiceRepository
    payments: IPaymentRepository
    status_history: IStatusHistoryRepository
