"""
Invoice Entity

The transaction header for a sale, rental or design order.
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Optional, Tuple

from sqlalchemy import Numeric
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import (
    InvoiceStatus,
    OCCUPYING_STATUSES,
    OperationType,
    PaymentStatus,
    ReturnCondition,
    TERMINAL_STATUSES,
    WINDOWED_OPERATIONS,
)


class Invoice(SQLModel, table=True):
    """
    Invoice entity - lives in the tenant store.

    Business Rules:
    - status is written only by the invoice state machine
    - remaining_balance and payment_status are written only by the payment ledger
    - collection_date/return_date are null unless the operation is a rental
    - An invoice in reserved/out_with_customer occupies its item for
      [collection_date, return_date)
    - Never hard-deleted; canceled invoices may be archived
    """

    __tablename__ = "invoices"

    id: Optional[int] = Field(default=None, primary_key=True)
    sequence: int = Field(unique=True)
    invoice_number: str = Field(max_length=32, unique=True, index=True)

    operation_type: OperationType = Field(nullable=False)
    status: InvoiceStatus = Field(default=InvoiceStatus.draft)
    payment_status: PaymentStatus = Field(default=PaymentStatus.unpaid)

    total_price: Decimal = Field(
        default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False)
    )
    deposit_amount: Decimal = Field(
        default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False)
    )
    remaining_balance: Decimal = Field(
        default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False)
    )

    # Reservation window (half-open)
    collection_date: Optional[date] = Field(default=None)
    return_date: Optional[date] = Field(default=None)

    item_id: int = Field(foreign_key="items.id", nullable=False, index=True)
    customer_id: int = Field(foreign_key="customers.id", nullable=False, index=True)

    notes: Optional[str] = Field(default=None, max_length=2000)
    return_condition: Optional[ReturnCondition] = Field(default=None)
    return_notes: Optional[str] = Field(default=None, max_length=2000)
    cancel_reason: Optional[str] = Field(default=None, max_length=2000)
    created_by: Optional[str] = Field(default=None, max_length=100)

    # Transition timestamps
    delivered_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    returned_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    closed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    canceled_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    archived_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), sa_column=Column(DateTime(timezone=True))
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), sa_column=Column(DateTime(timezone=True))
    )

    __table_args__ = (
        Index("idx_invoice_item_status", "item_id", "status"),
        Index("idx_invoice_window", "collection_date", "return_date"),
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def window(self) -> Optional[Tuple[date, date]]:
        if self.collection_date is None or self.return_date is None:
            return None
        return self.collection_date, self.return_date

    @property
    def occupies_item(self) -> bool:
        return (
            self.status in OCCUPYING_STATUSES
            and self.operation_type in WINDOWED_OPERATIONS
            and self.window is not None
        )
