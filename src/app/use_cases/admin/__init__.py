"""Admin use cases for platform administration operations."""

from .dtos import (
    HardDeleteTenantResponse,
    ImpersonationResponse,
    TenantStatusResponse,
    TenantView,
)
from .hard_delete_tenant_use_case import HardDeleteTenantUseCase
from .impersonate_tenant_use_case import ImpersonateTenantUseCase
from .provision_tenant_use_case import ProvisionTenantUseCase
from .set_tenant_status_use_case import SetTenantStatusUseCase
from .soft_delete_tenant_use_case import SoftDeleteTenantUseCase

__all__ = [
    "ProvisionTenantUseCase",
    "ImpersonateTenantUseCase",
    "SetTenantStatusUseCase",
    "SoftDeleteTenantUseCase",
    "HardDeleteTenantUseCase",
    "TenantView",
    "TenantStatusResponse",
    "ImpersonationResponse",
    "HardDeleteTenantResponse",
]
