"""
Item Entity

A physical garment a store rents out or sells.
"""

from datetime import UTC, datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, SQLModel

from .enums import ItemOperationMode, OperationType, SALE_OPERATIONS, WINDOWED_OPERATIONS


class Item(SQLModel, table=True):
    """
    Item entity - lives in the tenant store.

    Business Rules:
    - code is unique within a store
    - operation_mode restricts which invoices may reference the item
    """

    __tablename__ = "items"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(max_length=64, unique=True, index=True)
    name: str = Field(max_length=255)
    category: Optional[str] = Field(default=None, max_length=100)
    operation_mode: ItemOperationMode = Field(default=ItemOperationMode.both)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), sa_column=Column(DateTime(timezone=True))
    )

    def supports(self, operation_type: OperationType) -> bool:
        if self.operation_mode == ItemOperationMode.both:
            return True
        if operation_type in WINDOWED_OPERATIONS:
            return self.operation_mode == ItemOperationMode.rent
        if operation_type in SALE_OPERATIONS:
            return self.operation_mode == ItemOperationMode.sale
        # design work is not tied to a stock mode
        return True
