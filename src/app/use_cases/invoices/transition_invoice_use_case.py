"""
Use Case: Transition Invoice

deliver, return, close and cancel. Each is one state machine event applied in
its own transaction, under the invoice's item lock.
"""

import logging
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.invoice_state_machine import InvoiceStateMachine
from src.app.services.item_locks import ItemLockRegistry, item_key
from src.app.services.reservation_orchestrator import current_item_id
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.invoices.dtos import TransitionResponse
from src.domain.invoice_lifecycle import InvoiceEvent

logger = logging.getLogger(__name__)

MANAGER_EVENTS = frozenset({InvoiceEvent.cancel, InvoiceEvent.close})


class TransitionInvoiceUseCase:
    """
    Business Logic:
    1. Cancel and close need a manager role (FORBIDDEN otherwise)
    2. Take the item lock, then re-read the invoice row for update
       (NOT_FOUND when missing)
    3. Apply the event through the state machine, which validates the
       transition against the status just read, stamps the timestamp and
       writes the history row
    4. Commit before releasing the lock

    A return in damaged or missing_items condition flags that a penalty
    should be posted; the penalty itself is a separate payment.
    """

    def __init__(self, tenant: TenantHandle, locks: ItemLockRegistry):
        self.tenant = tenant
        self.locks = locks

    async def execute(
        self,
        invoice_id: int,
        event: InvoiceEvent,
        notes: Optional[str] = None,
        return_condition: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Result[TransitionResponse]:
        # 1. Role
        if event in MANAGER_EVENTS and not self.tenant.is_manager:
            logger.info(
                f"Refused {event.value} on invoice {invoice_id} for role {self.tenant.role}"
            )
            return Return.err(
                Error("FORBIDDEN", f"Only managers can {event.value} invoices")
            )

        # 2. Lock
        item_id = await current_item_id(self.tenant, invoice_id)
        if item_id is None:
            return Return.err(Error("NOT_FOUND", "Invoice not found"))

        async with self.locks.hold(self.tenant.tenant_id, [item_key(item_id)]):
            uow = self.tenant.unit_of_work()
            async with uow:
                invoice = await uow.invoices.lock_by_id(invoice_id)
                if not invoice:
                    return Return.err(Error("NOT_FOUND", "Invoice not found"))
                if invoice.item_id != item_id:
                    return Return.err(
                        Error("CONFLICT", "Invoice was modified concurrently, retry")
                    )

                # 3. Apply
                result = await InvoiceStateMachine(uow).apply(
                    invoice,
                    event,
                    self.tenant.actor,
                    notes=notes,
                    return_condition=return_condition,
                    reason=reason,
                )
                if result.is_err():
                    logger.info(
                        f"Rejected {event.value} on invoice {invoice_id}: {result.error.code}"
                    )
                    return result

                # 4. Commit
                await uow.commit()

                outcome = result.value
                return Return.ok(
                    TransitionResponse(
                        invoice_id=outcome.invoice.id,
                        invoice_number=outcome.invoice.invoice_number,
                        status_from=outcome.status_from.value,
                        status_to=outcome.status_to.value,
                        penalty_recommended=outcome.penalty_recommended,
                    )
                )
