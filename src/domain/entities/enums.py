"""
Store Platform Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class TenantStatus(str, Enum):
    """Tenant (store) lifecycle status"""

    active = "active"
    suspended = "suspended"
    deleted = "deleted"


class OperationType(str, Enum):
    """Kind of transaction an invoice records"""

    sale = "sale"
    rent = "rent"
    design = "design"
    design_sale = "design-sale"
    design_rent = "design-rent"


# Operation types that hold an item for a reservation window
WINDOWED_OPERATIONS = frozenset({OperationType.rent, OperationType.design_rent})

# Operation types that never carry a return date
SALE_OPERATIONS = frozenset({OperationType.sale, OperationType.design_sale})


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status"""

    draft = "draft"
    reserved = "reserved"
    out_with_customer = "out_with_customer"
    returned = "returned"
    closed = "closed"
    canceled = "canceled"


TERMINAL_STATUSES = frozenset({InvoiceStatus.closed, InvoiceStatus.canceled})

# Statuses in which an invoice occupies its item
OCCUPYING_STATUSES = frozenset({InvoiceStatus.reserved, InvoiceStatus.out_with_customer})


class PaymentStatus(str, Enum):
    """Derived settlement status of an invoice"""

    paid = "paid"
    partial = "partial"
    unpaid = "unpaid"


class PaymentType(str, Enum):
    """Ledger entry type"""

    payment = "payment"
    refund = "refund"
    penalty = "penalty"


class PaymentMethod(str, Enum):
    cash = "cash"
    card = "card"
    transfer = "transfer"
    other = "other"


class ReturnCondition(str, Enum):
    """Condition of an item when it comes back from the customer"""

    excellent = "excellent"
    good = "good"
    needs_cleaning = "needs_cleaning"
    damaged = "damaged"
    missing_items = "missing_items"


# Conditions that warrant recording a penalty
PENALTY_CONDITIONS = frozenset({ReturnCondition.damaged, ReturnCondition.missing_items})


class ItemOperationMode(str, Enum):
    """Whether an item may be rented out, sold, or both"""

    rent = "rent"
    sale = "sale"
    both = "both"
