"""
Tenant Entity

Represents one isolated store on the platform.
"""

from datetime import UTC, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import TenantStatus


class Tenant(SQLModel, table=True):
    """
    Tenant entity - one store with its own isolated database.

    Business Rules:
    - Each tenant owns a separate data store located by db_uri
    - Suspended and deleted tenants cannot be resolved for requests
    - Soft delete: status=deleted and deleted_at set, data kept
    - Hard delete removes the record and optionally drops the store database
    """

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255, unique=True)

    status: TenantStatus = Field(default=TenantStatus.active)

    # Data-store locator, e.g. sqlite+aiosqlite:///./stores/store_<id>.db
    db_uri: str = Field(max_length=1024)

    owner_email: Optional[str] = Field(default=None, max_length=255)

    # Soft delete support
    deleted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), sa_column=Column(DateTime(timezone=True))
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), sa_column=Column(DateTime(timezone=True))
    )

    __table_args__ = (
        Index("idx_tenant_status", "status"),
        Index("idx_tenant_deleted_at", "deleted_at"),
    )
