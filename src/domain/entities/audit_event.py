"""
AuditEvent Entity

Immutable platform-wide log of administrative actions.
"""

from datetime import UTC, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of platform-admin actions.

    Business Rules:
    - Immutable (never updated or deleted)
    - Survives hard deletion of the tenant it refers to
    - tenant_id nullable for platform-level events
    - Metadata stores additional context (confirmation, previous status, etc.)
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    actor_id: Optional[str] = Field(default=None, max_length=100, index=True)
    actor_name: Optional[str] = Field(default=None, max_length=255)
    tenant_id: Optional[UUID] = Field(default=None, index=True)

    action: str = Field(max_length=100)  # e.g., "impersonation_started"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), sa_column=Column(DateTime(timezone=True))
    )

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_tenant_action", "tenant_id", "action"),
    )
