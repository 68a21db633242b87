"""
Payment Entity

Append-only money movement against an invoice.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Numeric
from sqlmodel import Column, DateTime, Field, SQLModel

from .enums import PaymentMethod, PaymentType


class Payment(SQLModel, table=True):
    """
    Payment entity - ledger entry (payment, refund or penalty).

    Business Rules:
    - Immutable once written (never updated or deleted)
    - amount is always positive; type carries the direction
    - is_deposit marks the entry recorded from the creation-time deposit
    """

    __tablename__ = "payments"
    __table_args__ = (CheckConstraint("amount > 0", name="payment_amount_positive"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    invoice_id: int = Field(foreign_key="invoices.id", nullable=False, index=True)

    type: PaymentType = Field(nullable=False)
    amount: Decimal = Field(sa_column=Column(Numeric(12, 2), nullable=False))
    method: PaymentMethod = Field(default=PaymentMethod.cash)
    is_deposit: bool = Field(default=False)
    notes: Optional[str] = Field(default=None, max_length=2000)
    created_by: Optional[str] = Field(default=None, max_length=100)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), sa_column=Column(DateTime(timezone=True))
    )
