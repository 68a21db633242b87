"""
Admin API Routes - Platform Administration Endpoints

Authentication is via platform-admin JWTs, not store sessions.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import raise_for_error
from src.api.responses import SuccessEnvelope, success
from src.api.utils.admin_auth import verify_platform_admin
from src.app.services.unit_of_work import PlatformUnitOfWork
from src.app.use_cases.admin import (
    HardDeleteTenantResponse,
    HardDeleteTenantUseCase,
    ImpersonateTenantUseCase,
    ImpersonationResponse,
    ProvisionTenantUseCase,
    SetTenantStatusUseCase,
    SoftDeleteTenantUseCase,
    TenantStatusResponse,
    TenantView,
)
from src.depends import get_store_registry, get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


class ProvisionTenantRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    owner_email: Optional[str] = Field(None, max_length=255)


class SetTenantStatusRequest(BaseModel):
    status: str


class SoftDeleteRequest(BaseModel):
    confirmation_name: str


class HardDeleteRequest(BaseModel):
    confirmation_name: str
    drop_database: bool = False


@router.post(
    "/tenants",
    status_code=status.HTTP_201_CREATED,
    response_model=SuccessEnvelope[TenantView],
)
async def provision_tenant(
    request: ProvisionTenantRequest,
    admin: dict = Depends(verify_platform_admin),
    uow: PlatformUnitOfWork = Depends(get_unit_of_work),
    stores=Depends(get_store_registry),
):
    """
    Provision Tenant

    Creates the store record and its isolated database.

    Raises:
        - 403 Forbidden: FORBIDDEN
        - 409 Conflict: TENANT_NAME_TAKEN
    """
    use_case = ProvisionTenantUseCase(uow, stores, ApplicationConfig.STORE_DB_URI_TEMPLATE)
    result = await use_case.execute(admin, request.name, request.owner_email)
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value, "Store provisioned")


@router.post(
    "/tenants/{tenant_id}/impersonate",
    response_model=SuccessEnvelope[ImpersonationResponse],
)
async def impersonate_tenant(
    tenant_id: UUID,
    admin: dict = Depends(verify_platform_admin),
    uow: PlatformUnitOfWork = Depends(get_unit_of_work),
):
    """
    Impersonate Tenant

    Issues a short-lived store session marked impersonated_by; the grant is
    recorded as an impersonation_started audit event.

    Raises:
        - 403 Forbidden: FORBIDDEN, TENANT_SUSPENDED
        - 404 Not Found: TENANT_NOT_FOUND (missing or deleted)
    """
    use_case = ImpersonateTenantUseCase(uow, ApplicationConfig.IMPERSONATION_TOKEN_MINUTES)
    result = await use_case.execute(admin, tenant_id)
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value, "Impersonation session issued")


@router.put(
    "/tenants/{tenant_id}/status",
    response_model=SuccessEnvelope[TenantStatusResponse],
)
async def set_tenant_status(
    tenant_id: UUID,
    request: SetTenantStatusRequest,
    admin: dict = Depends(verify_platform_admin),
    uow: PlatformUnitOfWork = Depends(get_unit_of_work),
    stores=Depends(get_store_registry),
):
    result = await SetTenantStatusUseCase(uow, stores).execute(admin, tenant_id, request.status)
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value, f"Store status is {result.value.tenant.status}")


@router.post(
    "/tenants/{tenant_id}/soft-delete",
    response_model=SuccessEnvelope[TenantView],
)
async def soft_delete_tenant(
    tenant_id: UUID,
    request: SoftDeleteRequest,
    admin: dict = Depends(verify_platform_admin),
    uow: PlatformUnitOfWork = Depends(get_unit_of_work),
    stores=Depends(get_store_registry),
):
    """
    Soft Delete Tenant

    Raises:
        - 400 Bad Request: INVALID_CONFIRMATION
        - 404 Not Found: TENANT_NOT_FOUND
        - 409 Conflict: ALREADY_DELETED
    """
    result = await SoftDeleteTenantUseCase(uow, stores).execute(
        admin, tenant_id, request.confirmation_name
    )
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value, "Store deleted")


@router.post(
    "/tenants/{tenant_id}/hard-delete",
    response_model=SuccessEnvelope[HardDeleteTenantResponse],
)
async def hard_delete_tenant(
    tenant_id: UUID,
    request: HardDeleteRequest,
    admin: dict = Depends(verify_platform_admin),
    uow: PlatformUnitOfWork = Depends(get_unit_of_work),
    stores=Depends(get_store_registry),
):
    """
    Hard Delete Tenant

    Irreversible. Requires the store name and drop_database=true.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR, INVALID_CONFIRMATION
        - 404 Not Found: TENANT_NOT_FOUND
    """
    result = await HardDeleteTenantUseCase(uow, stores).execute(
        admin, tenant_id, request.confirmation_name, request.drop_database
    )
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value, "Store permanently deleted")
