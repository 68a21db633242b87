"""
Use Case: Update Invoice
"""

from decimal import Decimal

from src.libs.result import Result, Return
from src.app.services.item_locks import ItemLockRegistry
from src.app.services.reservation_orchestrator import InvoiceDraft, ReservationOrchestrator
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.invoices.dtos import UpdateInvoiceResponse
from src.domain.balance import DEFAULT_TOLERANCE


class UpdateInvoiceUseCase:
    """
    Edit the fields of a non-terminal invoice.

    Business Logic:
    1. Reject closed/canceled invoices (INVOICE_TERMINAL)
    2. Compare the payload with the stored invoice; an identical payload
       writes nothing and adds no history
    3. Re-check availability (ignoring this invoice) when the invoice holds
       its item
    4. Write the changes with one history row naming the changed fields

    Idempotent: re-sending the same payload is a no-op.
    """

    def __init__(
        self,
        tenant: TenantHandle,
        locks: ItemLockRegistry,
        tolerance: Decimal = DEFAULT_TOLERANCE,
    ):
        self.orchestrator = ReservationOrchestrator(tenant, locks, tolerance)

    async def execute(self, invoice_id: int, draft: InvoiceDraft) -> Result[UpdateInvoiceResponse]:
        result = await self.orchestrator.update(invoice_id, draft)
        if result.is_err():
            return result

        outcome = result.value
        return Return.ok(
            UpdateInvoiceResponse(
                invoice_id=outcome.invoice.id,
                invoice_number=outcome.invoice.invoice_number,
                status=outcome.invoice.status.value,
                updated=bool(outcome.changed_fields),
                changed_fields=outcome.changed_fields,
            )
        )
