"""
Invoice state machine.

The only code that writes Invoice.status. Every applied transition stamps the
matching timestamp and appends one InvoiceStatusHistory row in the caller's
unit of work; nothing here commits.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Iterable, Optional

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import StoreUnitOfWork
from src.domain.entities import (
    Invoice,
    InvoiceStatus,
    InvoiceStatusHistory,
    PENALTY_CONDITIONS,
    ReturnCondition,
)
from src.domain.invoice_lifecycle import (
    INITIAL_STATUS,
    InvoiceEvent,
    allowed_events,
    next_status,
)

logger = logging.getLogger(__name__)

_TIMESTAMP_BY_EVENT = {
    InvoiceEvent.deliver: "delivered_at",
    InvoiceEvent.return_item: "returned_at",
    InvoiceEvent.close: "closed_at",
    InvoiceEvent.cancel: "canceled_at",
}


@dataclass
class TransitionOutcome:
    invoice: Invoice
    status_from: InvoiceStatus
    status_to: InvoiceStatus
    penalty_recommended: bool = False


def parse_return_condition(value) -> Optional[ReturnCondition]:
    if isinstance(value, ReturnCondition):
        return value
    try:
        return ReturnCondition(value)
    except ValueError:
        return None


class InvoiceStateMachine:
    def __init__(self, uow: StoreUnitOfWork):
        self.uow = uow

    async def record_creation(
        self, invoice: Invoice, actor: Optional[str], notes: Optional[str] = None
    ) -> InvoiceStatusHistory:
        """History row for a freshly inserted invoice (no previous status)"""
        invoice.status = INITIAL_STATUS
        return await self._append(
            invoice,
            actor=actor,
            status_from=None,
            status_to=INITIAL_STATUS,
            notes=notes or "Invoice created",
        )

    async def record_edit(
        self, invoice: Invoice, actor: Optional[str], changed_fields: Iterable[str]
    ) -> InvoiceStatusHistory:
        """History row for an effective edit; status is unchanged"""
        return await self._append(
            invoice,
            actor=actor,
            status_from=invoice.status,
            status_to=invoice.status,
            notes="Updated: " + ", ".join(changed_fields),
        )

    async def apply(
        self,
        invoice: Invoice,
        event: InvoiceEvent,
        actor: Optional[str],
        notes: Optional[str] = None,
        return_condition=None,
        reason: Optional[str] = None,
    ) -> Result[TransitionOutcome]:
        """
        Apply event to invoice.

        Business Logic:
        1. Validate event inputs (return needs a condition, cancel needs a reason)
        2. Look the (status, event) pair up in the lifecycle table
        3. Write the new status and the event's timestamp
        4. Append a history row in the same transaction
        """
        # 1. Guards on event payload
        condition = None
        if event == InvoiceEvent.return_item:
            condition = parse_return_condition(return_condition)
            if condition is None:
                return Return.err(
                    Error(
                        "VALIDATION_ERROR",
                        "A valid return condition is required",
                        reason=f"got {return_condition!r}",
                        details={"allowed": [c.value for c in ReturnCondition]},
                    )
                )
        if event == InvoiceEvent.cancel and not (reason and reason.strip()):
            return Return.err(Error("VALIDATION_ERROR", "A cancellation reason is required"))

        # 2. Legality
        current = invoice.status
        target = next_status(current, event, invoice.operation_type)
        if target is None:
            return Return.err(
                Error(
                    "ILLEGAL_TRANSITION",
                    f"Cannot {event.value} an invoice in status {current.value}",
                    details={
                        "status": current.value,
                        "event": event.value,
                        "allowed_events": [
                            e.value for e in allowed_events(current, invoice.operation_type)
                        ],
                    },
                )
            )

        # 3. Status and side effects
        now = datetime.now(UTC)
        invoice.status = target
        timestamp_field = _TIMESTAMP_BY_EVENT.get(event)
        if timestamp_field:
            setattr(invoice, timestamp_field, now)

        penalty_recommended = False
        if event == InvoiceEvent.return_item:
            invoice.return_condition = condition
            invoice.return_notes = notes
            penalty_recommended = condition in PENALTY_CONDITIONS
        elif event == InvoiceEvent.cancel:
            invoice.cancel_reason = reason.strip()

        invoice = await self.uow.invoices.update(invoice)

        # 4. History
        history_notes = notes
        if event == InvoiceEvent.return_item:
            history_notes = f"Returned in condition {condition.value}" + (
                f": {notes}" if notes else ""
            )
        elif event == InvoiceEvent.cancel:
            history_notes = f"Canceled: {invoice.cancel_reason}"
        await self._append(
            invoice,
            actor=actor,
            status_from=current,
            status_to=target,
            notes=history_notes,
        )

        logger.info(
            f"Invoice {invoice.invoice_number}: {current.value} -> {target.value} by {actor}"
        )
        return Return.ok(
            TransitionOutcome(
                invoice=invoice,
                status_from=current,
                status_to=target,
                penalty_recommended=penalty_recommended,
            )
        )

    async def _append(
        self,
        invoice: Invoice,
        actor: Optional[str],
        status_from: Optional[InvoiceStatus],
        status_to: Optional[InvoiceStatus],
        notes: Optional[str],
    ) -> InvoiceStatusHistory:
        entry = InvoiceStatusHistory(
            invoice_id=invoice.id,
            status_from=status_from,
            status_to=status_to,
            payment_status_from=invoice.payment_status,
            payment_status_to=invoice.payment_status,
            actor=actor,
            notes=notes,
        )
        return await self.uow.status_history.create(entry)
