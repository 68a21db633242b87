"""
Customer Entity
"""

from datetime import UTC, datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, SQLModel


class Customer(SQLModel, table=True):
    """
    Customer entity - found or created by phone when an invoice is saved.
    """

    __tablename__ = "customers"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    phone: str = Field(max_length=32, unique=True, index=True)
    phone_alt: Optional[str] = Field(default=None, max_length=32)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), sa_column=Column(DateTime(timezone=True))
    )
