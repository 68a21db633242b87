"""
Use Case: Impersonate Tenant

Lets a platform admin act inside one store for support purposes. The admin
never reads store data with their platform token; they receive a short-lived
tenant session marked with impersonated_by.
"""

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.api.utils.jwt import PLATFORM_ADMIN_ROLE, PLATFORM_SCOPE, generate_jwt
from src.app.services.unit_of_work import PlatformUnitOfWork
from src.app.use_cases.admin.dtos import ImpersonationResponse, TenantInfo
from src.domain.entities import AuditEvent, TenantStatus

logger = logging.getLogger(__name__)

IMPERSONATION_ROLE = "owner"


class ImpersonateTenantUseCase:
    """
    Business Logic:
    1. Require a platform admin session (FORBIDDEN otherwise)
    2. Load the target store; deleted stores cannot be entered
       (TENANT_NOT_FOUND) nor can suspended ones (TENANT_SUSPENDED)
    3. Record impersonation_started with the admin and the expiry
    4. Issue the tenant session
    """

    def __init__(self, uow: PlatformUnitOfWork, token_minutes: int = 30):
        self.uow = uow
        self.token_minutes = token_minutes

    async def execute(self, admin: dict, tenant_id: UUID) -> Result[ImpersonationResponse]:
        # 1. Authorization
        if (
            not admin
            or admin.get("scope") != PLATFORM_SCOPE
            or admin.get("role") != PLATFORM_ADMIN_ROLE
            or not admin.get("admin_id")
        ):
            return Return.err(Error("FORBIDDEN", "Platform admin privileges required"))
        admin_id = str(admin["admin_id"])

        async with self.uow:
            # 2. Target store
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None or tenant.status == TenantStatus.deleted:
                return Return.err(Error("TENANT_NOT_FOUND", "Store not found"))
            if tenant.status == TenantStatus.suspended:
                return Return.err(
                    Error(
                        "TENANT_SUSPENDED",
                        "Store is suspended; reactivate it before impersonating",
                    )
                )

            # 3. Audit
            expires_delta = timedelta(minutes=self.token_minutes)
            expires_at = datetime.now(UTC) + expires_delta
            await self.uow.audit_events.create(
                AuditEvent(
                    actor_id=admin_id,
                    actor_name=admin.get("admin_name"),
                    tenant_id=tenant.id,
                    action="impersonation_started",
                    event_metadata={
                        "tenant_name": tenant.name,
                        "expires_at": expires_at.isoformat(),
                    },
                )
            )
            await self.uow.commit()

            # 4. Session
            token = generate_jwt(
                user_id=f"platform_admin:{admin_id}",
                tenant_id=str(tenant.id),
                role=IMPERSONATION_ROLE,
                expires_delta=expires_delta,
                impersonated_by=admin_id,
            )
            logger.warning(f"Admin {admin_id} started impersonating tenant {tenant.id}")

            return Return.ok(
                ImpersonationResponse(
                    access_token=token,
                    expires_at=expires_at,
                    impersonated_by=admin_id,
                    tenant=TenantInfo(id=str(tenant.id), name=tenant.name),
                )
            )
