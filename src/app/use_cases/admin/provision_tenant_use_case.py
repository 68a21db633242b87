"""
Use Case: Provision Tenant

Registers a new store on the platform and creates its isolated database.
"""

import logging
from typing import Optional
from uuid import uuid4

from src.libs.result import Error, Result, Return
from src.app.services.tenant_context import ITenantStoreRegistry
from src.app.services.unit_of_work import PlatformUnitOfWork
from src.app.use_cases.admin.dtos import TenantView
from src.domain.entities import AuditEvent, Tenant

logger = logging.getLogger(__name__)


class ProvisionTenantUseCase:
    """
    Business Logic:
    1. Validate the store name and make sure it is unused
    2. Insert the tenant with a store locator derived from its id
    3. Create the store schema
    4. Record the tenant_provisioned audit event and commit
    """

    def __init__(
        self,
        uow: PlatformUnitOfWork,
        stores: ITenantStoreRegistry,
        db_uri_template: str,
    ):
        self.uow = uow
        self.stores = stores
        self.db_uri_template = db_uri_template

    async def execute(
        self, admin: dict, name: str, owner_email: Optional[str] = None
    ) -> Result[TenantView]:
        name = (name or "").strip()
        if not name:
            return Return.err(Error("VALIDATION_ERROR", "Store name is required"))

        async with self.uow:
            # 1. Uniqueness
            if await self.uow.tenants.get_by_name(name):
                return Return.err(
                    Error("TENANT_NAME_TAKEN", f"A store named {name} already exists")
                )

            # 2. Tenant record
            tenant_id = uuid4()
            tenant = await self.uow.tenants.create(
                Tenant(
                    id=tenant_id,
                    name=name,
                    owner_email=owner_email,
                    db_uri=self.db_uri_template.format(tenant_id=tenant_id.hex),
                )
            )

            # 3. Store schema
            await self.stores.provision(tenant)

            # 4. Audit
            await self.uow.audit_events.create(
                AuditEvent(
                    actor_id=admin.get("admin_id"),
                    actor_name=admin.get("admin_name"),
                    tenant_id=tenant.id,
                    action="tenant_provisioned",
                    event_metadata={"tenant_name": name, "owner_email": owner_email},
                )
            )
            await self.uow.commit()

            logger.info(f"Provisioned tenant {tenant.id} ({name})")
            return Return.ok(TenantView.from_entity(tenant))
