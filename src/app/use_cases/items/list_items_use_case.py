from typing import Optional

from src.libs.result import Result, Return
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.items.dtos import ItemListResponse, ItemView


class ListItemsUseCase:
    """List a store's items ordered by code, optionally within one category"""

    def __init__(self, tenant: TenantHandle):
        self.tenant = tenant

    async def execute(self, category: Optional[str] = None) -> Result[ItemListResponse]:
        uow = self.tenant.unit_of_work()
        async with uow:
            items = await uow.items.list_all(category)
            return Return.ok(
                ItemListResponse(items=[ItemView.from_entity(item) for item in items])
            )
