"""
Use Cases

Organized into domain folders:
- tenancy/: resolving a session to a store
- admin/: platform administration (provisioning, status, deletion, impersonation)
- items/: item catalogue
- availability/: read-only availability queries
- invoices/: invoice lifecycle
- payments/: payment ledger

Import from subdirectories for better organization.
"""

from .admin import (
    HardDeleteTenantUseCase,
    ImpersonateTenantUseCase,
    ProvisionTenantUseCase,
    SetTenantStatusUseCase,
    SoftDeleteTenantUseCase,
)
from .availability import (
    CheckAvailabilityBatchUseCase,
    CheckAvailabilityUseCase,
    GetAvailabilityCalendarUseCase,
    GetBookedPeriodsUseCase,
)
from .invoices import (
    ArchiveInvoiceUseCase,
    ConfirmInvoiceUseCase,
    CreateInvoiceUseCase,
    GetInvoiceUseCase,
    ListInvoicesUseCase,
    TransitionInvoiceUseCase,
    UpdateInvoiceUseCase,
)
from .items import CreateItemUseCase, ListItemsUseCase
from .payments import GetPaymentSummaryUseCase, PostPaymentUseCase
from .tenancy import ResolveTenantUseCase

__all__ = [
    # Tenancy
    "ResolveTenantUseCase",
    # Admin
    "ProvisionTenantUseCase",
    "ImpersonateTenantUseCase",
    "SetTenantStatusUseCase",
    "SoftDeleteTenantUseCase",
    "HardDeleteTenantUseCase",
    # Items
    "CreateItemUseCase",
    "ListItemsUseCase",
    # Availability
    "CheckAvailabilityUseCase",
    "CheckAvailabilityBatchUseCase",
    "GetBookedPeriodsUseCase",
    "GetAvailabilityCalendarUseCase",
    # Invoices
    "CreateInvoiceUseCase",
    "UpdateInvoiceUseCase",
    "ConfirmInvoiceUseCase",
    "TransitionInvoiceUseCase",
    "ArchiveInvoiceUseCase",
    "GetInvoiceUseCase",
    "ListInvoicesUseCase",
    # Payments
    "PostPaymentUseCase",
    "GetPaymentSummaryUseCase",
]
