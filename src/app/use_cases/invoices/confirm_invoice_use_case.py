from typing import Optional

from src.libs.result import Result, Return
from src.app.services.item_locks import ItemLockRegistry
from src.app.services.reservation_orchestrator import ReservationOrchestrator
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.invoices.dtos import TransitionResponse
from src.domain.entities import InvoiceStatus


class ConfirmInvoiceUseCase:
    """Promote a draft to reserved; rentals must still be free for their window"""

    def __init__(self, tenant: TenantHandle, locks: ItemLockRegistry):
        self.orchestrator = ReservationOrchestrator(tenant, locks)

    async def execute(self, invoice_id: int, notes: Optional[str] = None) -> Result[TransitionResponse]:
        result = await self.orchestrator.confirm(invoice_id, notes)
        if result.is_err():
            return result

        invoice = result.value
        return Return.ok(
            TransitionResponse(
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
                status_from=InvoiceStatus.draft.value,
                status_to=invoice.status.value,
            )
        )
