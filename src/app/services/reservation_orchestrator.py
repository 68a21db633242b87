"""
Reservation orchestrator.

Composes the availability checker, state machine and payment ledger into the
multi-step invoice operations. Every operation that can make an invoice occupy
an item holds the (tenant, item) lock and re-checks availability inside the
same transaction that writes the invoice.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Set

from src.libs.result import Error, Result, Return
from src.app.services.availability_checker import AvailabilityChecker, conflict_error
from src.app.services.invoice_state_machine import InvoiceStateMachine
from src.app.services.item_locks import INVOICE_NUMBER_KEY, ItemLockRegistry, item_key
from src.app.services.payment_ledger import PaymentLedger
from src.app.services.tenant_context import TenantHandle
from src.app.services.unit_of_work import StoreUnitOfWork
from src.domain.balance import DEFAULT_TOLERANCE, to_money
from src.domain.entities import (
    Customer,
    Invoice,
    InvoiceStatus,
    OCCUPYING_STATUSES,
    OperationType,
    PaymentMethod,
    PaymentType,
    WINDOWED_OPERATIONS,
)
from src.domain.invoice_lifecycle import InvoiceEvent, initial_status_for
from src.domain.reservation_window import ReservationWindow

logger = logging.getLogger(__name__)

# Item and operation type are fixed once the garment has left the store
EDITABLE_ITEM_STATUSES = frozenset({InvoiceStatus.draft, InvoiceStatus.reserved})


def format_invoice_number(sequence: int) -> str:
    return f"INV-{sequence:04d}"


async def current_item_id(tenant: TenantHandle, invoice_id: int) -> Optional[int]:
    """
    Item an invoice currently points at, read outside any lock.

    Callers take the item lock for this id, then re-read the invoice with
    lock_by_id and treat a different item_id as a concurrent edit.
    """
    uow = tenant.unit_of_work()
    async with uow:
        invoice = await uow.invoices.get_by_id(invoice_id)
        return invoice.item_id if invoice else None


@dataclass
class InvoiceDraft:
    """Caller-supplied invoice fields for create and update"""

    operation_type: OperationType
    item_id: int
    customer_name: str
    customer_phone: str
    total_price: Decimal
    customer_phone_alt: Optional[str] = None
    deposit_amount: Optional[Decimal] = None
    payment_method: PaymentMethod = PaymentMethod.cash
    collection_date: Optional[date] = None
    return_date: Optional[date] = None
    notes: Optional[str] = None
    as_draft: bool = False


@dataclass
class NormalizedDraft:
    draft: InvoiceDraft
    total_price: Decimal
    deposit_amount: Decimal
    window: Optional[ReservationWindow]
    customer_name: str
    customer_phone: str
    customer_phone_alt: Optional[str]
    notes: Optional[str]


@dataclass
class UpdateOutcome:
    invoice: Invoice
    changed_fields: List[str] = field(default_factory=list)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_draft(draft: InvoiceDraft) -> Result[NormalizedDraft]:
    """
    Validate and normalize caller input.

    Non-rental operations never carry a reservation window; any dates sent
    with them are dropped.
    """
    try:
        total = to_money(draft.total_price)
        deposit = to_money(draft.deposit_amount or 0)
    except (InvalidOperation, TypeError, ValueError):
        return Return.err(Error("VALIDATION_ERROR", "Prices must be numbers"))

    if total < 0:
        return Return.err(Error("VALIDATION_ERROR", "Total price cannot be negative"))
    if deposit < 0:
        return Return.err(Error("VALIDATION_ERROR", "Deposit cannot be negative"))
    if deposit > total:
        return Return.err(
            Error("VALIDATION_ERROR", "Deposit cannot exceed the total price")
        )

    name = _clean(draft.customer_name)
    phone = _clean(draft.customer_phone)
    if not name or not phone:
        return Return.err(
            Error("VALIDATION_ERROR", "Customer name and phone are required")
        )

    window = None
    if draft.operation_type in WINDOWED_OPERATIONS:
        if draft.collection_date is None or draft.return_date is None:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    "Rentals require both a collection date and a return date",
                )
            )
        window = ReservationWindow(draft.collection_date, draft.return_date)
        if not window.is_valid:
            return Return.err(
                Error("INVALID_WINDOW", "Return date must be after collection date")
            )

    return Return.ok(
        NormalizedDraft(
            draft=draft,
            total_price=total,
            deposit_amount=deposit,
            window=window,
            customer_name=name,
            customer_phone=phone,
            customer_phone_alt=_clean(draft.customer_phone_alt),
            notes=_clean(draft.notes),
        )
    )


class ReservationOrchestrator:
    def __init__(
        self,
        tenant: TenantHandle,
        locks: ItemLockRegistry,
        tolerance: Decimal = DEFAULT_TOLERANCE,
    ):
        self.tenant = tenant
        self.locks = locks
        self.tolerance = tolerance

    async def create(self, draft: InvoiceDraft) -> Result[Invoice]:
        """
        Create an invoice.

        Business Logic:
        1. Validate input and normalize the window
        2. Under the item and invoice-number locks, in one transaction:
           lock the item row, re-check availability, find or create the
           customer, insert the invoice in draft with a creation history row,
           record the deposit, confirm to reserved unless saving a draft
        3. Commit; any failure rolls everything back
        """
        # 1. Validate
        normalized = normalize_draft(draft)
        if normalized.is_err():
            return normalized
        data = normalized.value

        keys = [item_key(draft.item_id), INVOICE_NUMBER_KEY]
        async with self.locks.hold(self.tenant.tenant_id, keys):
            uow = self.tenant.unit_of_work()
            async with uow:
                # 2a. Item
                item = await uow.items.lock_by_id(draft.item_id)
                if not item:
                    return Return.err(Error("NOT_FOUND", "Item not found"))
                if not item.supports(draft.operation_type):
                    return Return.err(
                        Error(
                            "VALIDATION_ERROR",
                            f"Item {item.code} is not available for {draft.operation_type.value}",
                        )
                    )

                # 2b. Availability
                if data.window is not None and not draft.as_draft:
                    check = await AvailabilityChecker(uow).check(draft.item_id, data.window)
                    if check.is_err():
                        return check
                    if not check.value.available:
                        return Return.err(conflict_error(check.value))

                # 2c. Customer
                customer = await self._find_or_create_customer(uow, data)

                # 2d. Invoice in draft
                sequence = await uow.invoices.next_sequence()
                invoice = Invoice(
                    sequence=sequence,
                    invoice_number=format_invoice_number(sequence),
                    operation_type=draft.operation_type,
                    status=InvoiceStatus.draft,
                    total_price=data.total_price,
                    deposit_amount=Decimal("0"),
                    remaining_balance=data.total_price,
                    collection_date=data.window.collection_date if data.window else None,
                    return_date=data.window.return_date if data.window else None,
                    item_id=item.id,
                    customer_id=customer.id,
                    notes=data.notes,
                    created_by=self.tenant.actor,
                )
                invoice = await uow.invoices.create(invoice)

                state_machine = InvoiceStateMachine(uow)
                await state_machine.record_creation(invoice, self.tenant.actor)

                # 2e. Deposit
                ledger = PaymentLedger(uow, self.tolerance)
                if data.deposit_amount > 0:
                    posted = await ledger.post(
                        invoice,
                        PaymentType.payment,
                        data.deposit_amount,
                        actor=self.tenant.actor,
                        method=draft.payment_method,
                        is_deposit=True,
                    )
                    if posted.is_err():
                        return posted
                else:
                    await ledger.refresh(invoice)

                # 2f. Confirm
                if initial_status_for(draft.as_draft) == InvoiceStatus.reserved:
                    confirmed = await state_machine.apply(
                        invoice, InvoiceEvent.confirm, self.tenant.actor
                    )
                    if confirmed.is_err():
                        return confirmed

                # 3. Commit
                await uow.commit()
                logger.info(
                    f"Tenant {self.tenant.tenant_id}: created {invoice.invoice_number} "
                    f"({invoice.status.value})"
                )
                return Return.ok(invoice)

    async def update(self, invoice_id: int, draft: InvoiceDraft) -> Result[UpdateOutcome]:
        """
        Edit an existing invoice.

        Business Logic:
        1. Validate input
        2. Lock both the current and the requested item
        3. Reject terminal invoices and edits the status does not allow
        4. Diff against the stored invoice; no difference means no writes
        5. Re-check availability when the invoice occupies its item
        6. Apply, refresh the balance, append one history row, commit
        """
        # 1. Validate
        normalized = normalize_draft(draft)
        if normalized.is_err():
            return normalized
        data = normalized.value

        # 2. Locks
        locked_item_id = await current_item_id(self.tenant, invoice_id)
        if locked_item_id is None:
            return Return.err(Error("NOT_FOUND", "Invoice not found"))
        keys = {item_key(locked_item_id), item_key(draft.item_id)}

        async with self.locks.hold(self.tenant.tenant_id, keys):
            uow = self.tenant.unit_of_work()
            async with uow:
                invoice = await uow.invoices.lock_by_id(invoice_id)
                if not invoice:
                    return Return.err(Error("NOT_FOUND", "Invoice not found"))
                if invoice.item_id not in (locked_item_id, draft.item_id):
                    return Return.err(
                        Error("CONFLICT", "Invoice was modified concurrently, retry")
                    )

                # 3. Status rules
                if invoice.is_terminal:
                    return Return.err(
                        Error(
                            "INVOICE_TERMINAL",
                            f"Invoice {invoice.invoice_number} is {invoice.status.value}",
                        )
                    )

                # 4. Diff
                customer = await uow.customers.get_by_id(invoice.customer_id)
                changes = self._diff(invoice, customer, data)
                if not changes:
                    return Return.ok(UpdateOutcome(invoice=invoice, changed_fields=[]))

                if "deposit_amount" in changes:
                    return Return.err(
                        Error(
                            "VALIDATION_ERROR",
                            "The deposit is recorded at creation; post a payment instead",
                        )
                    )
                if invoice.status not in EDITABLE_ITEM_STATUSES and (
                    "item_id" in changes or "operation_type" in changes
                ):
                    return Return.err(
                        Error(
                            "VALIDATION_ERROR",
                            f"Item and operation type cannot change once the invoice is "
                            f"{invoice.status.value}",
                        )
                    )

                item = await uow.items.lock_by_id(draft.item_id)
                if not item:
                    return Return.err(Error("NOT_FOUND", "Item not found"))
                if not item.supports(draft.operation_type):
                    return Return.err(
                        Error(
                            "VALIDATION_ERROR",
                            f"Item {item.code} is not available for {draft.operation_type.value}",
                        )
                    )

                # 5. Availability
                if data.window is not None and invoice.status in OCCUPYING_STATUSES:
                    check = await AvailabilityChecker(uow).check(
                        draft.item_id, data.window, exclude_invoice_id=invoice.id
                    )
                    if check.is_err():
                        return check
                    if not check.value.available:
                        return Return.err(conflict_error(check.value))

                # 6. Apply
                if {"customer_name", "customer_phone", "customer_phone_alt"} & set(changes):
                    customer = await self._find_or_create_customer(uow, data)
                    invoice.customer_id = customer.id
                invoice.operation_type = draft.operation_type
                invoice.item_id = draft.item_id
                invoice.total_price = data.total_price
                invoice.collection_date = data.window.collection_date if data.window else None
                invoice.return_date = data.window.return_date if data.window else None
                invoice.notes = data.notes
                invoice = await uow.invoices.update(invoice)

                if "total_price" in changes:
                    await PaymentLedger(uow, self.tolerance).refresh(invoice)

                await InvoiceStateMachine(uow).record_edit(invoice, self.tenant.actor, changes)
                await uow.commit()
                logger.info(
                    f"Tenant {self.tenant.tenant_id}: updated {invoice.invoice_number} "
                    f"({', '.join(changes)})"
                )
                return Return.ok(UpdateOutcome(invoice=invoice, changed_fields=changes))

    async def confirm(self, invoice_id: int, notes: Optional[str] = None) -> Result[Invoice]:
        """Move a draft to reserved, re-checking availability under the item lock"""
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
                await uow.items.lock_by_id(invoice.item_id)

                window = invoice.window
                if invoice.operation_type in WINDOWED_OPERATIONS and window is not None:
                    check = await AvailabilityChecker(uow).check(
                        invoice.item_id,
                        ReservationWindow(*window),
                        exclude_invoice_id=invoice.id,
                    )
                    if check.is_err():
                        return check
                    if not check.value.available:
                        return Return.err(conflict_error(check.value))

                outcome = await InvoiceStateMachine(uow).apply(
                    invoice, InvoiceEvent.confirm, self.tenant.actor, notes=notes
                )
                if outcome.is_err():
                    return outcome

                await uow.commit()
                return Return.ok(outcome.value.invoice)

    async def _find_or_create_customer(
        self, uow: StoreUnitOfWork, data: NormalizedDraft
    ) -> Customer:
        customer = await uow.customers.get_by_phone(data.customer_phone)
        if customer is None:
            return await uow.customers.create(
                Customer(
                    name=data.customer_name,
                    phone=data.customer_phone,
                    phone_alt=data.customer_phone_alt,
                )
            )

        if customer.name != data.customer_name or (
            data.customer_phone_alt and customer.phone_alt != data.customer_phone_alt
        ):
            customer.name = data.customer_name
            if data.customer_phone_alt:
                customer.phone_alt = data.customer_phone_alt
            customer = await uow.customers.update(customer)
        return customer

    def _diff(
        self, invoice: Invoice, customer: Optional[Customer], data: NormalizedDraft
    ) -> List[str]:
        draft = data.draft
        current: Dict[str, object] = {
            "operation_type": invoice.operation_type,
            "item_id": invoice.item_id,
            "total_price": to_money(invoice.total_price),
            "deposit_amount": to_money(invoice.deposit_amount),
            "collection_date": invoice.collection_date,
            "return_date": invoice.return_date,
            "notes": invoice.notes,
            "customer_name": customer.name if customer else None,
            "customer_phone": customer.phone if customer else None,
            "customer_phone_alt": customer.phone_alt if customer else None,
        }
        requested: Dict[str, object] = {
            "operation_type": draft.operation_type,
            "item_id": draft.item_id,
            "total_price": data.total_price,
            "deposit_amount": data.deposit_amount,
            "collection_date": data.window.collection_date if data.window else None,
            "return_date": data.window.return_date if data.window else None,
            "notes": data.notes,
            "customer_name": data.customer_name,
            "customer_phone": data.customer_phone,
            "customer_phone_alt": data.customer_phone_alt,
        }
        changed: Set[str] = {key for key in current if current[key] != requested[key]}
        # an omitted alternate phone keeps the stored one
        if data.customer_phone_alt is None:
            changed.discard("customer_phone_alt")
        # an omitted deposit is not a request to change it
        if draft.deposit_amount is None:
            changed.discard("deposit_amount")
        return sorted(changed)
