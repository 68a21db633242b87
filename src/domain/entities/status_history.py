"""
InvoiceStatusHistory Entity

Append-only audit trail of invoice transitions and payment events.
"""

from datetime import UTC, datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, SQLModel

from .enums import InvoiceStatus, PaymentStatus


class InvoiceStatusHistory(SQLModel, table=True):
    """
    One row per transition, payment posting or effective edit.

    status_from/status_to are null for payment-only events.
    """

    __tablename__ = "invoice_status_history"

    id: Optional[int] = Field(default=None, primary_key=True)
    invoice_id: int = Field(foreign_key="invoices.id", nullable=False, index=True)

    status_from: Optional[InvoiceStatus] = Field(default=None)
    status_to: Optional[InvoiceStatus] = Field(default=None)
    payment_status_from: Optional[PaymentStatus] = Field(default=None)
    payment_status_to: Optional[PaymentStatus] = Field(default=None)

    actor: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = Field(default=None, max_length=2000)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), sa_column=Column(DateTime(timezone=True))
    )
