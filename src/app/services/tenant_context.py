"""
Tenant context passed explicitly to every store operation.

Nothing below the API layer reads the tenant from ambient state; a request is
resolved once to a TenantHandle and the handle is threaded through.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional
from uuid import UUID

from src.app.services.unit_of_work import StoreUnitOfWork
from src.domain.entities import Tenant

# Store roles allowed to cancel and close invoices
MANAGER_ROLES = frozenset({"owner", "manager"})


@dataclass(frozen=True)
class TenantHandle:
    tenant_id: UUID
    tenant_name: str
    uow_factory: Callable[[], StoreUnitOfWork]
    actor_id: Optional[str] = None
    role: Optional[str] = None
    impersonated_by: Optional[str] = None

    def unit_of_work(self) -> StoreUnitOfWork:
        """A fresh unit of work bound to this tenant's store"""
        return self.uow_factory()

    @property
    def actor(self) -> Optional[str]:
        """Actor recorded in history rows; impersonated sessions name the admin"""
        if self.impersonated_by:
            return f"platform_admin:{self.impersonated_by}"
        return self.actor_id

    @property
    def is_manager(self) -> bool:
        return self.role in MANAGER_ROLES


class ITenantStoreRegistry(ABC):
    """Maps tenants to their isolated data stores"""

    @abstractmethod
    def unit_of_work_factory(self, tenant: Tenant) -> Callable[[], StoreUnitOfWork]:
        """Factory producing units of work on the tenant's own store"""
        pass

    @abstractmethod
    async def provision(self, tenant: Tenant) -> None:
        """Create the store schema for a new tenant"""
        pass

    @abstractmethod
    async def drop(self, tenant: Tenant) -> None:
        """Irreversibly destroy the tenant's store"""
        pass

    @abstractmethod
    async def dispose(self, tenant_id: UUID) -> None:
        """Release pooled connections held for a tenant"""
        pass
