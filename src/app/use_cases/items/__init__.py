"""Item catalogue use cases."""

from .create_item_use_case import CreateItemUseCase
from .dtos import ItemListResponse, ItemView
from .list_items_use_case import ListItemsUseCase

__all__ = [
    "CreateItemUseCase",
    "ListItemsUseCase",
    "ItemView",
    "ItemListResponse",
]
