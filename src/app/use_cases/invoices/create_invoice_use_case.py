"""
Use Case: Create Invoice

Records a sale, rental or design order for one item and one customer.
"""

from decimal import Decimal

from src.libs.result import Result, Return
from src.app.services.item_locks import ItemLockRegistry
from src.app.services.reservation_orchestrator import InvoiceDraft, ReservationOrchestrator
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.invoices.dtos import CreateInvoiceResponse
from src.domain.balance import DEFAULT_TOLERANCE


class CreateInvoiceUseCase:
    """
    Business Logic:
    1. Validate prices, customer and (for rentals) the reservation window
    2. Serialize on the item and the store's invoice numbering
    3. Re-check availability inside the transaction; overlap is a CONFLICT
       carrying the conflicting invoices
    4. Insert the invoice in draft, record the deposit as a ledger entry,
       then confirm to reserved unless as_draft is set
    5. Commit and return the assigned invoice number

    Nothing is persisted when any step fails.
    """

    def __init__(
        self,
        tenant: TenantHandle,
        locks: ItemLockRegistry,
        tolerance: Decimal = DEFAULT_TOLERANCE,
    ):
        self.orchestrator = ReservationOrchestrator(tenant, locks, tolerance)

    async def execute(self, draft: InvoiceDraft) -> Result[CreateInvoiceResponse]:
        result = await self.orchestrator.create(draft)
        if result.is_err():
            return result

        invoice = result.value
        return Return.ok(
            CreateInvoiceResponse(
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
                status=invoice.status.value,
                payment_status=invoice.payment_status.value,
                remaining_balance=invoice.remaining_balance,
            )
        )
