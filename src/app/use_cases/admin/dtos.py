"""
Platform Admin Use Case DTOs
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.domain.entities import Tenant


class TenantView(BaseModel):
    id: str
    name: str
    status: str
    owner_email: Optional[str] = None
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, tenant: Tenant) -> "TenantView":
        return cls(
            id=str(tenant.id),
            name=tenant.name,
            status=tenant.status.value,
            owner_email=tenant.owner_email,
            deleted_at=tenant.deleted_at,
            created_at=tenant.created_at,
            updated_at=tenant.updated_at,
        )


class TenantInfo(BaseModel):
    """Tenant information in session grants"""

    id: str
    name: str


class ImpersonationResponse(BaseModel):
    """Short-lived tenant session issued to a platform admin"""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    impersonated_by: str
    tenant: TenantInfo


class TenantStatusResponse(BaseModel):
    tenant: TenantView
    previous_status: str
    changed: bool


class HardDeleteTenantResponse(BaseModel):
    tenant_id: str
    tenant_name: str
    status: str
    database_dropped: bool
