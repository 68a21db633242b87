"""
Item Use Case DTOs
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.domain.entities import Item


class ItemView(BaseModel):
    """Item as exposed by the API"""

    id: int
    code: str
    name: str
    category: Optional[str] = None
    operation_mode: str
    created_at: datetime

    @classmethod
    def from_entity(cls, item: Item) -> "ItemView":
        return cls(
            id=item.id,
            code=item.code,
            name=item.name,
            category=item.category,
            operation_mode=item.operation_mode.value,
            created_at=item.created_at,
        )


class ItemListResponse(BaseModel):
    items: List[ItemView]
