"""
Store Platform Domain Entities

Platform entities (tenants, audit events) live in the shared platform database.
Store entities (items, customers, invoices, payments, history) live in one
database per tenant.
"""

# Export all enums
from .enums import (
    InvoiceStatus,
    ItemOperationMode,
    OCCUPYING_STATUSES,
    OperationType,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    PENALTY_CONDITIONS,
    ReturnCondition,
    SALE_OPERATIONS,
    TenantStatus,
    TERMINAL_STATUSES,
    WINDOWED_OPERATIONS,
)

# Export all entities
from .tenant import Tenant
from .audit_event import AuditEvent
from .item import Item
from .customer import Customer
from .invoice import Invoice
from .payment import Payment
from .status_history import InvoiceStatusHistory

PLATFORM_TABLES = [Tenant.__table__, AuditEvent.__table__]

STORE_TABLES = [
    Item.__table__,
    Customer.__table__,
    Invoice.__table__,
    Payment.__table__,
    InvoiceStatusHistory.__table__,
]

__all__ = [
    # Enums
    "InvoiceStatus",
    "ItemOperationMode",
    "OperationType",
    "PaymentMethod",
    "PaymentStatus",
    "PaymentType",
    "ReturnCondition",
    "TenantStatus",
    "OCCUPYING_STATUSES",
    "PENALTY_CONDITIONS",
    "SALE_OPERATIONS",
    "TERMINAL_STATUSES",
    "WINDOWED_OPERATIONS",
    # Entities
    "Tenant",
    "AuditEvent",
    "Item",
    "Customer",
    "Invoice",
    "Payment",
    "InvoiceStatusHistory",
    # Table groups
    "PLATFORM_TABLES",
    "STORE_TABLES",
]
