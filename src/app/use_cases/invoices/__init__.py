"""Invoice lifecycle use cases."""

from .archive_invoice_use_case import ArchiveInvoiceUseCase
from .confirm_invoice_use_case import ConfirmInvoiceUseCase
from .create_invoice_use_case import CreateInvoiceUseCase
from .dtos import (
    ArchiveInvoiceResponse,
    CreateInvoiceResponse,
    InvoiceDetailResponse,
    InvoiceListResponse,
    TransitionResponse,
    UpdateInvoiceResponse,
)
from .get_invoice_use_case import GetInvoiceUseCase
from .list_invoices_use_case import ListInvoicesUseCase
from .transition_invoice_use_case import TransitionInvoiceUseCase
from .update_invoice_use_case import UpdateInvoiceUseCase

__all__ = [
    "CreateInvoiceUseCase",
    "UpdateInvoiceUseCase",
    "ConfirmInvoiceUseCase",
    "TransitionInvoiceUseCase",
    "ArchiveInvoiceUseCase",
    "GetInvoiceUseCase",
    "ListInvoicesUseCase",
    "CreateInvoiceResponse",
    "UpdateInvoiceResponse",
    "TransitionResponse",
    "ArchiveInvoiceResponse",
    "InvoiceDetailResponse",
    "InvoiceListResponse",
]
