"""
Payment ledger.

Appends payments, refunds and penalties to an invoice and keeps the cached
remaining_balance and payment_status in step with the ledger. Entries are
never edited or deleted.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import StoreUnitOfWork
from src.domain.balance import BalanceSnapshot, DEFAULT_TOLERANCE, compute_balance, to_money
from src.domain.entities import (
    Invoice,
    InvoiceStatusHistory,
    Payment,
    PaymentMethod,
    PaymentType,
)

logger = logging.getLogger(__name__)


def parse_amount(value) -> Optional[Decimal]:
    """Positive money amount rounded to cents, or None when unusable"""
    try:
        amount = to_money(value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


class PaymentLedger:
    def __init__(self, uow: StoreUnitOfWork, tolerance: Decimal = DEFAULT_TOLERANCE):
        self.uow = uow
        self.tolerance = tolerance

    async def summary(self, invoice: Invoice) -> BalanceSnapshot:
        entries = await self.uow.payments.get_by_invoice_id(invoice.id)
        return compute_balance(
            invoice.total_price, invoice.deposit_amount, entries, self.tolerance
        )

    async def refresh(self, invoice: Invoice) -> BalanceSnapshot:
        """Recompute the cached balance fields from the ledger and store them"""
        snapshot = await self.summary(invoice)
        invoice.remaining_balance = snapshot.remaining_balance
        invoice.payment_status = snapshot.payment_status
        await self.uow.invoices.update(invoice)
        return snapshot

    async def post(
        self,
        invoice: Invoice,
        payment_type: PaymentType,
        amount,
        actor: Optional[str],
        method: PaymentMethod = PaymentMethod.cash,
        notes: Optional[str] = None,
        is_deposit: bool = False,
    ) -> Result[BalanceSnapshot]:
        """
        Append one ledger entry.

        Business Logic:
        1. Reject terminal invoices and non-positive amounts
        2. Reject payments above what is owed and refunds above what was paid
        3. Insert the entry and recompute the cached balance
        4. Append a payment-only history row (status columns left null)

        A deposit entry also becomes the invoice's deposit_amount, so the
        deposit is counted once, through the ledger.
        """
        # 1. Preconditions
        if invoice.is_terminal:
            return Return.err(
                Error(
                    "INVOICE_TERMINAL",
                    f"Invoice {invoice.invoice_number} is {invoice.status.value}",
                )
            )
        value = parse_amount(amount)
        if value is None:
            return Return.err(
                Error("INVALID_AMOUNT", "Amount must be a positive number", reason=f"{amount!r}")
            )

        # 2. Bounds against the current ledger
        before = await self.summary(invoice)
        if payment_type == PaymentType.payment and value > before.remaining_balance + self.tolerance:
            return Return.err(
                Error(
                    "INVALID_AMOUNT",
                    "Payment exceeds the remaining balance",
                    details={"remaining_balance": str(before.remaining_balance)},
                )
            )
        if payment_type == PaymentType.refund and value > before.net_paid:
            return Return.err(
                Error(
                    "INVALID_AMOUNT",
                    "Refund exceeds the amount paid",
                    details={"net_paid": str(before.net_paid)},
                )
            )

        # 3. Entry and cached balance
        entry = Payment(
            invoice_id=invoice.id,
            type=payment_type,
            amount=value,
            method=method,
            is_deposit=is_deposit,
            notes=notes,
            created_by=actor,
        )
        await self.uow.payments.create(entry)
        if is_deposit:
            invoice.deposit_amount = value

        previous_status = invoice.payment_status
        after = await self.refresh(invoice)

        # 4. History
        label = "Deposit" if is_deposit else payment_type.value.capitalize()
        await self.uow.status_history.create(
            InvoiceStatusHistory(
                invoice_id=invoice.id,
                payment_status_from=previous_status,
                payment_status_to=after.payment_status,
                actor=actor,
                notes=f"{label} of {value} via {method.value}" + (f": {notes}" if notes else ""),
            )
        )

        logger.info(
            f"Invoice {invoice.invoice_number}: {payment_type.value} {value}, "
            f"remaining {after.remaining_balance}"
        )
        return Return.ok(after)
