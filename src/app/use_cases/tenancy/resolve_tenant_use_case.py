"""
Use Case: Resolve Tenant

Turns an authenticated session into a handle on the caller's store. Runs at
the start of every store request; it only reads.
"""

import logging
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.tenant_context import ITenantStoreRegistry, TenantHandle
from src.app.services.unit_of_work import PlatformUnitOfWork
from src.domain.entities import TenantStatus

logger = logging.getLogger(__name__)


class ResolveTenantUseCase:
    """
    Business Logic:
    1. Require a session that names a tenant (UNAUTHENTICATED otherwise)
    2. Look the tenant up in the platform database (TENANT_NOT_FOUND)
    3. Refuse suspended tenants (TENANT_SUSPENDED) and deleted ones
       (TENANT_NOT_FOUND)
    4. Bind the tenant's store and the session's actor into a TenantHandle
    """

    def __init__(self, uow: PlatformUnitOfWork, stores: ITenantStoreRegistry):
        self.uow = uow
        self.stores = stores

    async def execute(self, session: Optional[dict]) -> Result[TenantHandle]:
        # 1. Session
        if not session or not session.get("tenant_id"):
            return Return.err(
                Error("UNAUTHENTICATED", "Session does not belong to a store")
            )
        try:
            tenant_id = UUID(str(session["tenant_id"]))
        except ValueError:
            return Return.err(Error("UNAUTHENTICATED", "Session carries a malformed tenant id"))

        async with self.uow:
            # 2. Lookup
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None or tenant.status == TenantStatus.deleted:
                return Return.err(Error("TENANT_NOT_FOUND", "Store not found"))

            # 3. Status
            if tenant.status == TenantStatus.suspended:
                logger.info(f"Refused request for suspended tenant {tenant.id}")
                return Return.err(Error("TENANT_SUSPENDED", "Store is suspended"))

            # 4. Handle
            return Return.ok(
                TenantHandle(
                    tenant_id=tenant.id,
                    tenant_name=tenant.name,
                    uow_factory=self.stores.unit_of_work_factory(tenant),
                    actor_id=session.get("user_id"),
                    role=session.get("role"),
                    impersonated_by=session.get("impersonated_by"),
                )
            )
