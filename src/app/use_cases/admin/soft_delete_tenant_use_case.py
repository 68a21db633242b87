"""
Use Case: Soft Delete Tenant

Marks a store deleted while keeping its data. Requires the store's name as
confirmation.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.tenant_context import ITenantStoreRegistry
from src.app.services.unit_of_work import PlatformUnitOfWork
from src.app.use_cases.admin.dtos import TenantView
from src.domain.entities import AuditEvent, TenantStatus

logger = logging.getLogger(__name__)


class SoftDeleteTenantUseCase:
    """
    Business Logic:
    1. Load the tenant (TENANT_NOT_FOUND)
    2. Compare the confirmation with the store name (INVALID_CONFIRMATION)
    3. Reject an already deleted store (ALREADY_DELETED)
    4. Set status deleted and deleted_at, record tenant_soft_deleted, commit
    """

    def __init__(self, uow: PlatformUnitOfWork, stores: ITenantStoreRegistry):
        self.uow = uow
        self.stores = stores

    async def execute(self, admin: dict, tenant_id: UUID, confirmation: str) -> Result[TenantView]:
        async with self.uow:
            # 1. Tenant
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if not tenant:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            # 2. Confirmation
            if (confirmation or "").strip() != tenant.name:
                return Return.err(
                    Error(
                        "INVALID_CONFIRMATION",
                        "Confirmation must match the store name exactly",
                        reason=f"Expected '{tenant.name}'",
                    )
                )

            # 3. State
            if tenant.status == TenantStatus.deleted:
                return Return.err(Error("ALREADY_DELETED", "Store is already deleted"))

            # 4. Delete
            previous = tenant.status
            now = datetime.now(UTC)
            tenant.status = TenantStatus.deleted
            tenant.deleted_at = now
            tenant.updated_at = now
            tenant = await self.uow.tenants.update(tenant)

            await self.uow.audit_events.create(
                AuditEvent(
                    actor_id=admin.get("admin_id"),
                    actor_name=admin.get("admin_name"),
                    tenant_id=tenant.id,
                    action="tenant_soft_deleted",
                    event_metadata={
                        "tenant_name": tenant.name,
                        "previous_status": previous.value,
                        "deleted_at": now.isoformat(),
                    },
                )
            )
            await self.uow.commit()

        await self.stores.dispose(tenant_id)
        logger.warning(f"Soft deleted tenant {tenant_id}")
        return Return.ok(TenantView.from_entity(tenant))
