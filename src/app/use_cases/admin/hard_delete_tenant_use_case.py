"""
Use Case: Hard Delete Tenant

Irreversibly removes a store: its database and its platform record. Audit
events about the store are retained.
"""

import logging
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.tenant_context import ITenantStoreRegistry
from src.app.services.unit_of_work import PlatformUnitOfWork
from src.app.use_cases.admin.dtos import HardDeleteTenantResponse
from src.domain.entities import AuditEvent

logger = logging.getLogger(__name__)


class HardDeleteTenantUseCase:
    """
    Business Logic:
    1. Require drop_database to be explicitly true (VALIDATION_ERROR)
    2. Load the tenant (TENANT_NOT_FOUND)
    3. Compare the confirmation with the store name (INVALID_CONFIRMATION)
    4. Drop the store database
    5. Record tenant_hard_deleted, delete the tenant record, commit

    The store is dropped before the record goes, so a failure in between leaves
    a record that can be hard deleted again.
    """

    def __init__(self, uow: PlatformUnitOfWork, stores: ITenantStoreRegistry):
        self.uow = uow
        self.stores = stores

    async def execute(
        self,
        admin: dict,
        tenant_id: UUID,
        confirmation: str,
        drop_database: bool = False,
    ) -> Result[HardDeleteTenantResponse]:
        # 1. Explicit intent
        if drop_database is not True:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    "Hard delete requires drop_database to be confirmed",
                )
            )

        async with self.uow:
            # 2. Tenant
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if not tenant:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            # 3. Confirmation
            if (confirmation or "").strip() != tenant.name:
                return Return.err(
                    Error(
                        "INVALID_CONFIRMATION",
                        "Confirmation must match the store name exactly",
                        reason=f"Expected '{tenant.name}'",
                    )
                )

            tenant_name = tenant.name
            previous_status = tenant.status

            # 4. Store database
            await self.stores.drop(tenant)

            # 5. Audit and record
            await self.uow.audit_events.create(
                AuditEvent(
                    actor_id=admin.get("admin_id"),
                    actor_name=admin.get("admin_name"),
                    tenant_id=tenant_id,
                    action="tenant_hard_deleted",
                    event_metadata={
                        "tenant_name": tenant_name,
                        "previous_status": previous_status.value,
                        "database_dropped": True,
                    },
                )
            )
            await self.uow.tenants.delete(tenant)
            await self.uow.commit()

        logger.warning(f"Hard deleted tenant {tenant_id} ({tenant_name})")
        return Return.ok(
            HardDeleteTenantResponse(
                tenant_id=str(tenant_id),
                tenant_name=tenant_name,
                status="deleted",
                database_dropped=True,
            )
        )
