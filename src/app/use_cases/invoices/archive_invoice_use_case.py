from datetime import UTC, datetime

from src.libs.result import Error, Result, Return
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.invoices.dtos import ArchiveInvoiceResponse
from src.domain.entities import InvoiceStatus


class ArchiveInvoiceUseCase:
    """
    Hide a canceled invoice from default listings.

    Archiving is not a status change; the invoice stays canceled and keeps its
    history. Archiving an archived invoice returns the original timestamp.
    """

    def __init__(self, tenant: TenantHandle):
        self.tenant = tenant

    async def execute(self, invoice_id: int) -> Result[ArchiveInvoiceResponse]:
        uow = self.tenant.unit_of_work()
        async with uow:
            invoice = await uow.invoices.get_by_id(invoice_id)
            if not invoice:
                return Return.err(Error("NOT_FOUND", "Invoice not found"))

            if invoice.status != InvoiceStatus.canceled:
                return Return.err(
                    Error(
                        "ILLEGAL_TRANSITION",
                        f"Only canceled invoices can be archived, this one is {invoice.status.value}",
                    )
                )

            if invoice.archived_at is None:
                invoice.archived_at = datetime.now(UTC)
                invoice = await uow.invoices.update(invoice)
                await uow.commit()

            return Return.ok(
                ArchiveInvoiceResponse(
                    invoice_id=invoice.id,
                    invoice_number=invoice.invoice_number,
                    archived_at=invoice.archived_at,
                )
            )
