from src.libs.result import Error, Result, Return
from src.app.repositories.invoice_repository import InvoiceFilters
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.invoices.dtos import InvoiceListEntry, InvoiceListResponse, InvoiceView

MAX_PAGE_SIZE = 200


class ListInvoicesUseCase:
    """
    List a store's invoices, newest first.

    Filters: status, operation type, item, customer phone and a created_at
    date range. Archived invoices are left out unless asked for.
    """

    def __init__(self, tenant: TenantHandle):
        self.tenant = tenant

    async def execute(self, filters: InvoiceFilters) -> Result[InvoiceListResponse]:
        if filters.limit < 1 or filters.limit > MAX_PAGE_SIZE or filters.offset < 0:
            return Return.err(
                Error("VALIDATION_ERROR", f"limit must be 1..{MAX_PAGE_SIZE} and offset >= 0")
            )
        if filters.date_from and filters.date_to and filters.date_from > filters.date_to:
            return Return.err(Error("VALIDATION_ERROR", "date_from must not be after date_to"))

        uow = self.tenant.unit_of_work()
        async with uow:
            rows = await uow.invoices.search(filters)
            entries = [
                InvoiceListEntry(
                    **InvoiceView.fields_of(invoice),
                    customer_name=customer.name,
                    customer_phone=customer.phone,
                )
                for invoice, customer in rows
            ]
            return Return.ok(
                InvoiceListResponse(
                    invoices=entries,
                    count=len(entries),
                    limit=filters.limit,
                    offset=filters.offset,
                )
            )
