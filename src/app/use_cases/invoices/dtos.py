"""
Invoice Use Case DTOs (Data Transfer Objects)

Response classes for the invoice and payment domain. Money is carried as
Decimal and rendered as a string in JSON.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from src.app.use_cases.items.dtos import ItemView
from src.domain.balance import BalanceSnapshot
from src.domain.entities import Customer, Invoice, InvoiceStatusHistory, Payment


def _value(enum_member) -> Optional[str]:
    return enum_member.value if enum_member is not None else None


# ============================================================================
# Building blocks
# ============================================================================


class CustomerView(BaseModel):
    id: int
    name: str
    phone: str
    phone_alt: Optional[str] = None

    @classmethod
    def from_entity(cls, customer: Customer) -> "CustomerView":
        return cls(
            id=customer.id,
            name=customer.name,
            phone=customer.phone,
            phone_alt=customer.phone_alt,
        )


class PaymentView(BaseModel):
    id: int
    type: str
    amount: Decimal
    method: str
    is_deposit: bool
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentView":
        return cls(
            id=payment.id,
            type=payment.type.value,
            amount=payment.amount,
            method=payment.method.value,
            is_deposit=payment.is_deposit,
            notes=payment.notes,
            created_by=payment.created_by,
            created_at=payment.created_at,
        )


class StatusHistoryView(BaseModel):
    id: int
    status_from: Optional[str] = None
    status_to: Optional[str] = None
    payment_status_from: Optional[str] = None
    payment_status_to: Optional[str] = None
    actor: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, entry: InvoiceStatusHistory) -> "StatusHistoryView":
        return cls(
            id=entry.id,
            status_from=_value(entry.status_from),
            status_to=_value(entry.status_to),
            payment_status_from=_value(entry.payment_status_from),
            payment_status_to=_value(entry.payment_status_to),
            actor=entry.actor,
            notes=entry.notes,
            created_at=entry.created_at,
        )


class BalanceView(BaseModel):
    """Ledger totals for one invoice"""

    total_price: Decimal
    total_payments: Decimal
    total_refunds: Decimal
    total_penalties: Decimal
    net_paid: Decimal
    remaining_balance: Decimal
    payment_status: str
    payments_count: int
    refunds_count: int
    penalties_count: int

    @classmethod
    def from_snapshot(cls, snapshot: BalanceSnapshot) -> "BalanceView":
        return cls(
            total_price=snapshot.total_price,
            total_payments=snapshot.total_payments,
            total_refunds=snapshot.total_refunds,
            total_penalties=snapshot.total_penalties,
            net_paid=snapshot.net_paid,
            remaining_balance=snapshot.remaining_balance,
            payment_status=snapshot.payment_status.value,
            payments_count=snapshot.payments_count,
            refunds_count=snapshot.refunds_count,
            penalties_count=snapshot.penalties_count,
        )


class InvoiceView(BaseModel):
    id: int
    invoice_number: str
    operation_type: str
    status: str
    payment_status: str
    total_price: Decimal
    deposit_amount: Decimal
    remaining_balance: Decimal
    collection_date: Optional[date] = None
    return_date: Optional[date] = None
    item_id: int
    customer_id: int
    notes: Optional[str] = None
    return_condition: Optional[str] = None
    return_notes: Optional[str] = None
    cancel_reason: Optional[str] = None
    created_by: Optional[str] = None
    delivered_at: Optional[datetime] = None
    returned_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def fields_of(cls, invoice: Invoice) -> dict:
        return dict(
            id=invoice.id,
            invoice_number=invoice.invoice_number,
            operation_type=invoice.operation_type.value,
            status=invoice.status.value,
            payment_status=invoice.payment_status.value,
            total_price=invoice.total_price,
            deposit_amount=invoice.deposit_amount,
            remaining_balance=invoice.remaining_balance,
            collection_date=invoice.collection_date,
            return_date=invoice.return_date,
            item_id=invoice.item_id,
            customer_id=invoice.customer_id,
            notes=invoice.notes,
            return_condition=_value(invoice.return_condition),
            return_notes=invoice.return_notes,
            cancel_reason=invoice.cancel_reason,
            created_by=invoice.created_by,
            delivered_at=invoice.delivered_at,
            returned_at=invoice.returned_at,
            closed_at=invoice.closed_at,
            canceled_at=invoice.canceled_at,
            archived_at=invoice.archived_at,
            created_at=invoice.created_at,
            updated_at=invoice.updated_at,
        )

    @classmethod
    def from_entity(cls, invoice: Invoice) -> "InvoiceView":
        return cls(**cls.fields_of(invoice))


# ============================================================================
# Response DTOs
# ============================================================================


class CreateInvoiceResponse(BaseModel):
    invoice_id: int
    invoice_number: str
    status: str
    payment_status: str
    remaining_balance: Decimal


class UpdateInvoiceResponse(BaseModel):
    invoice_id: int
    invoice_number: str
    status: str
    updated: bool
    changed_fields: List[str]


class TransitionResponse(BaseModel):
    invoice_id: int
    invoice_number: str
    status_from: str
    status_to: str
    penalty_recommended: bool = False


class ArchiveInvoiceResponse(BaseModel):
    invoice_id: int
    invoice_number: str
    archived_at: datetime


class InvoiceDetailResponse(BaseModel):
    """Full snapshot of one invoice with its item, customer, ledger and history"""

    invoice: InvoiceView
    item: ItemView
    customer: CustomerView
    balance: BalanceView
    payments: List[PaymentView]
    status_history: List[StatusHistoryView]
    allowed_events: List[str]


class InvoiceListEntry(InvoiceView):
    customer_name: str
    customer_phone: str


class InvoiceListResponse(BaseModel):
    invoices: List[InvoiceListEntry]
    count: int
    limit: int
    offset: int


class PostPaymentResponse(BaseModel):
    invoice_id: int
    invoice_number: str
    payment_status: str
    remaining_balance: Decimal
    balance: BalanceView


class PaymentSummaryResponse(BaseModel):
    invoice_id: int
    invoice_number: str
    balance: BalanceView
    payments: List[PaymentView]
