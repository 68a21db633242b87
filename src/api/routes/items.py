from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.api.responses import SuccessEnvelope, success
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.items import CreateItemUseCase, ItemListResponse, ItemView, ListItemsUseCase
from src.depends import get_tenant_handle
from src.domain.entities import ItemOperationMode

router = APIRouter(prefix="/items", tags=["Items"])


class CreateItemRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    category: Optional[str] = Field(None, max_length=100)
    operation_mode: ItemOperationMode = ItemOperationMode.both


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=SuccessEnvelope[ItemView],
)
async def create_item(
    request: CreateItemRequest,
    tenant: TenantHandle = Depends(get_tenant_handle),
):
    """
    Create Item

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 409 Conflict: ITEM_CODE_TAKEN
    """
    result = await CreateItemUseCase(tenant).execute(
        request.code, request.name, request.category, request.operation_mode
    )
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value, "Item created")


@router.get("", response_model=SuccessEnvelope[ItemListResponse])
async def list_items(
    category: Optional[str] = None,
    tenant: TenantHandle = Depends(get_tenant_handle),
):
    result = await ListItemsUseCase(tenant).execute(category)
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value)
