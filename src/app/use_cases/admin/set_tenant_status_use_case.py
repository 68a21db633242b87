"""
Use Case: Set Tenant Status

Suspends, reactivates or marks a store deleted.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.tenant_context import ITenantStoreRegistry
from src.app.services.unit_of_work import PlatformUnitOfWork
from src.app.use_cases.admin.dtos import TenantStatusResponse, TenantView
from src.domain.entities import AuditEvent, TenantStatus

logger = logging.getLogger(__name__)


class SetTenantStatusUseCase:
    """
    Business Logic:
    1. Validate the requested status
    2. Load the tenant (TENANT_NOT_FOUND)
    3. Write the status; deleted stamps deleted_at, active clears it
    4. Record tenant_status_changed and commit
    5. Release the store's pooled connections when it is no longer active

    Idempotent: setting the current status changes nothing and records nothing.
    """

    def __init__(self, uow: PlatformUnitOfWork, stores: ITenantStoreRegistry):
        self.uow = uow
        self.stores = stores

    async def execute(
        self, admin: dict, tenant_id: UUID, status: str
    ) -> Result[TenantStatusResponse]:
        # 1. Status value
        try:
            new_status = TenantStatus(status)
        except ValueError:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    "Unknown tenant status",
                    reason=f"got {status!r}",
                    details={"allowed": [s.value for s in TenantStatus]},
                )
            )

        async with self.uow:
            # 2. Tenant
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if not tenant:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            previous = tenant.status
            if previous == new_status:
                return Return.ok(
                    TenantStatusResponse(
                        tenant=TenantView.from_entity(tenant),
                        previous_status=previous.value,
                        changed=False,
                    )
                )

            # 3. Status
            now = datetime.now(UTC)
            tenant.status = new_status
            tenant.updated_at = now
            if new_status == TenantStatus.deleted:
                tenant.deleted_at = now
            elif new_status == TenantStatus.active:
                tenant.deleted_at = None
            tenant = await self.uow.tenants.update(tenant)

            # 4. Audit
            await self.uow.audit_events.create(
                AuditEvent(
                    actor_id=admin.get("admin_id"),
                    actor_name=admin.get("admin_name"),
                    tenant_id=tenant.id,
                    action="tenant_status_changed",
                    event_metadata={
                        "previous_status": previous.value,
                        "new_status": new_status.value,
                    },
                )
            )
            await self.uow.commit()

        # 5. Connections
        if new_status != TenantStatus.active:
            await self.stores.dispose(tenant_id)

        logger.info(f"Tenant {tenant_id}: {previous.value} -> {new_status.value}")
        return Return.ok(
            TenantStatusResponse(
                tenant=TenantView.from_entity(tenant),
                previous_status=previous.value,
                changed=True,
            )
        )
