"""
Invoice balance arithmetic.

remaining = total_price + penalties - (payments - refunds)

A creation-time deposit is normally recorded as an explicit ledger entry
flagged is_deposit. Invoices that carry deposit_amount without such an entry
(imported or legacy rows) count the deposit as one implicit payment.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from src.domain.entities.enums import PaymentStatus, PaymentType

CENTS = Decimal("0.01")
DEFAULT_TOLERANCE = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class BalanceSnapshot:
    total_price: Decimal
    total_payments: Decimal
    total_refunds: Decimal
    total_penalties: Decimal
    net_paid: Decimal
    remaining_balance: Decimal
    payment_status: PaymentStatus
    payments_count: int
    refunds_count: int
    penalties_count: int
    has_implicit_deposit: bool


def compute_balance(
    total_price,
    deposit_amount,
    entries: Iterable,
    tolerance: Decimal = DEFAULT_TOLERANCE,
) -> BalanceSnapshot:
    payments = refunds = penalties = Decimal("0")
    counts = {PaymentType.payment: 0, PaymentType.refund: 0, PaymentType.penalty: 0}
    has_deposit_entry = False

    for entry in entries:
        amount = to_money(entry.amount)
        counts[entry.type] += 1
        if entry.type == PaymentType.payment:
            payments += amount
            has_deposit_entry = has_deposit_entry or bool(entry.is_deposit)
        elif entry.type == PaymentType.refund:
            refunds += amount
        elif entry.type == PaymentType.penalty:
            penalties += amount

    deposit = to_money(deposit_amount or 0)
    implicit_deposit = deposit > 0 and not has_deposit_entry
    if implicit_deposit:
        payments += deposit
        counts[PaymentType.payment] += 1

    total = to_money(total_price)
    net_paid = payments - refunds
    remaining = total + penalties - net_paid

    if remaining <= tolerance:
        status = PaymentStatus.paid
    elif net_paid > 0:
        status = PaymentStatus.partial
    else:
        status = PaymentStatus.unpaid

    return BalanceSnapshot(
        total_price=total,
        total_payments=payments,
        total_refunds=refunds,
        total_penalties=penalties,
        net_paid=net_paid,
        remaining_balance=remaining,
        payment_status=status,
        payments_count=counts[PaymentType.payment],
        refunds_count=counts[PaymentType.refund],
        penalties_count=counts[PaymentType.penalty],
        has_implicit_deposit=implicit_deposit,
    )
