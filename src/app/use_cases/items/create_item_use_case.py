"""
Use Case: Create Item

Adds a garment to a store's catalogue so invoices can reference it.
"""

from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.items.dtos import ItemView
from src.domain.entities import Item, ItemOperationMode


class CreateItemUseCase:
    """
    Business Logic:
    1. Validate code and name
    2. Reject a code already used in this store
    3. Insert and commit
    """

    def __init__(self, tenant: TenantHandle):
        self.tenant = tenant

    async def execute(
        self,
        code: str,
        name: str,
        category: Optional[str] = None,
        operation_mode: ItemOperationMode = ItemOperationMode.both,
    ) -> Result[ItemView]:
        code = (code or "").strip()
        name = (name or "").strip()
        if not code or not name:
            return Return.err(Error("VALIDATION_ERROR", "Item code and name are required"))

        uow = self.tenant.unit_of_work()
        async with uow:
            if await uow.items.get_by_code(code):
                return Return.err(
                    Error("ITEM_CODE_TAKEN", f"Item code {code} is already in use")
                )

            item = await uow.items.create(
                Item(
                    code=code,
                    name=name,
                    category=(category or "").strip() or None,
                    operation_mode=operation_mode,
                )
            )
            await uow.commit()

            return Return.ok(ItemView.from_entity(item))
