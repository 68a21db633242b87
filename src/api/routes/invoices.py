"""
Invoice API Routes

Create, edit, read and move invoices through their lifecycle:
draft -> reserved -> out_with_customer -> returned -> closed, or canceled.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import raise_for_error
from src.api.responses import SuccessEnvelope, success
from src.app.repositories.invoice_repository import InvoiceFilters
from src.app.services.item_locks import ItemLockRegistry
from src.app.services.reservation_orchestrator import InvoiceDraft
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.invoices import (
    ArchiveInvoiceResponse,
    ArchiveInvoiceUseCase,
    ConfirmInvoiceUseCase,
    CreateInvoiceResponse,
    CreateInvoiceUseCase,
    GetInvoiceUseCase,
    InvoiceDetailResponse,
    InvoiceListResponse,
    ListInvoicesUseCase,
    TransitionInvoiceUseCase,
    TransitionResponse,
    UpdateInvoiceResponse,
    UpdateInvoiceUseCase,
)
from src.depends import get_item_locks, get_tenant_handle
from src.domain.entities import InvoiceStatus, OperationType, PaymentMethod
from src.domain.invoice_lifecycle import InvoiceEvent

router = APIRouter(prefix="/invoices", tags=["Invoices"])

PAYMENT_TOLERANCE = Decimal(str(ApplicationConfig.PAYMENT_TOLERANCE))


class InvoicePayload(BaseModel):
    """
    Invoice HTTP request payload, shared by create and update.

    Dates are ignored for anything but rent and design-rent.
    """

    operation_type: OperationType
    item_id: int
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_phone: str = Field(..., min_length=1, max_length=32)
    customer_phone_alt: Optional[str] = Field(None, max_length=32)
    total_price: Decimal = Field(..., ge=0)
    # None on update keeps the recorded deposit
    deposit_amount: Optional[Decimal] = Field(None, ge=0)
    payment_method: PaymentMethod = PaymentMethod.cash
    collection_date: Optional[date] = None
    return_date: Optional[date] = None
    notes: Optional[str] = Field(None, max_length=2000)
    as_draft: bool = False

    def to_draft(self) -> InvoiceDraft:
        return InvoiceDraft(
            operation_type=self.operation_type,
            item_id=self.item_id,
            customer_name=self.customer_name,
            customer_phone=self.customer_phone,
            customer_phone_alt=self.customer_phone_alt,
            total_price=self.total_price,
            deposit_amount=self.deposit_amount,
            payment_method=self.payment_method,
            collection_date=self.collection_date,
            return_date=self.return_date,
            notes=self.notes,
            as_draft=self.as_draft,
        )


class TransitionRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=2000)


class ReturnRequest(BaseModel):
    return_condition: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)


class CancelRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=2000)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=SuccessEnvelope[CreateInvoiceResponse],
)
async def create_invoice(
    request: InvoicePayload,
    tenant: TenantHandle = Depends(get_tenant_handle),
    locks: ItemLockRegistry = Depends(get_item_locks),
):
    """
    Create Invoice

    Rentals are checked for availability and the item is held for
    [collection_date, return_date) once the invoice is reserved.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR, INVALID_WINDOW
        - 404 Not Found: NOT_FOUND (item)
        - 409 Conflict: CONFLICT, with the conflicting invoices in data.conflicts
    """
    result = await CreateInvoiceUseCase(tenant, locks, PAYMENT_TOLERANCE).execute(
        request.to_draft()
    )
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value, f"Invoice {result.value.invoice_number} created")


@router.get("", response_model=SuccessEnvelope[InvoiceListResponse])
async def list_invoices(
    status_filter: Optional[InvoiceStatus] = Query(None, alias="status"),
    operation_type: Optional[OperationType] = None,
    item_id: Optional[int] = None,
    customer_phone: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    include_archived: bool = False,
    limit: int = 50,
    offset: int = 0,
    tenant: TenantHandle = Depends(get_tenant_handle),
):
    filters = InvoiceFilters(
        status=status_filter,
        operation_type=operation_type,
        item_id=item_id,
        customer_phone=customer_phone,
        date_from=date_from,
        date_to=date_to,
        include_archived=include_archived,
        limit=limit,
        offset=offset,
    )
    result = await ListInvoicesUseCase(tenant).execute(filters)
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value)


@router.get("/{invoice_id}", response_model=SuccessEnvelope[InvoiceDetailResponse])
async def get_invoice(
    invoice_id: int,
    tenant: TenantHandle = Depends(get_tenant_handle),
):
    result = await GetInvoiceUseCase(tenant, PAYMENT_TOLERANCE).execute(invoice_id)
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value)


@router.put("/{invoice_id}", response_model=SuccessEnvelope[UpdateInvoiceResponse])
async def update_invoice(
    invoice_id: int,
    request: InvoicePayload,
    tenant: TenantHandle = Depends(get_tenant_handle),
    locks: ItemLockRegistry = Depends(get_item_locks),
):
    """
    Update Invoice

    Re-sending an unchanged payload succeeds with updated=false and writes
    nothing.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR, INVALID_WINDOW
        - 404 Not Found: NOT_FOUND
        - 409 Conflict: CONFLICT, INVOICE_TERMINAL
    """
    result = await UpdateInvoiceUseCase(tenant, locks, PAYMENT_TOLERANCE).execute(
        invoice_id, request.to_draft()
    )
    if result.is_err():
        raise_for_error(result.error)
    message = "Invoice updated" if result.value.updated else "No changes"
    return success(result.value, message)


@router.post("/{invoice_id}/confirm", response_model=SuccessEnvelope[TransitionResponse])
async def confirm_invoice(
    invoice_id: int,
    request: Optional[TransitionRequest] = None,
    tenant: TenantHandle = Depends(get_tenant_handle),
    locks: ItemLockRegistry = Depends(get_item_locks),
):
    notes = request.notes if request else None
    result = await ConfirmInvoiceUseCase(tenant, locks).execute(invoice_id, notes)
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value, "Invoice confirmed")


async def _transition(
    tenant: TenantHandle,
    locks: ItemLockRegistry,
    invoice_id: int,
    event: InvoiceEvent,
    message: str,
    **kwargs,
):
    result = await TransitionInvoiceUseCase(tenant, locks).execute(invoice_id, event, **kwargs)
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value, message)


@router.post("/{invoice_id}/deliver", response_model=SuccessEnvelope[TransitionResponse])
async def deliver_invoice(
    invoice_id: int,
    request: Optional[TransitionRequest] = None,
    tenant: TenantHandle = Depends(get_tenant_handle),
    locks: ItemLockRegistry = Depends(get_item_locks),
):
    """Hand the item to the customer (reserved -> out_with_customer)"""
    return await _transition(
        tenant,
        locks,
        invoice_id,
        InvoiceEvent.deliver,
        "Item delivered",
        notes=request.notes if request else None,
    )


@router.post("/{invoice_id}/return", response_model=SuccessEnvelope[TransitionResponse])
async def return_invoice(
    invoice_id: int,
    request: ReturnRequest,
    tenant: TenantHandle = Depends(get_tenant_handle),
    locks: ItemLockRegistry = Depends(get_item_locks),
):
    """
    Take the item back (out_with_customer -> returned)

    penalty_recommended is true for damaged or missing_items returns.
    """
    return await _transition(
        tenant,
        locks,
        invoice_id,
        InvoiceEvent.return_item,
        "Item returned",
        notes=request.notes,
        return_condition=request.return_condition,
    )


@router.post("/{invoice_id}/close", response_model=SuccessEnvelope[TransitionResponse])
async def close_invoice(
    invoice_id: int,
    request: Optional[TransitionRequest] = None,
    tenant: TenantHandle = Depends(get_tenant_handle),
    locks: ItemLockRegistry = Depends(get_item_locks),
):
    """
    Close a returned rental, or a sale once it has been handed over

    Raises:
        - 403 Forbidden: FORBIDDEN for roles below manager
    """
    return await _transition(
        tenant,
        locks,
        invoice_id,
        InvoiceEvent.close,
        "Invoice closed",
        notes=request.notes if request else None,
    )


@router.post("/{invoice_id}/cancel", response_model=SuccessEnvelope[TransitionResponse])
async def cancel_invoice(
    invoice_id: int,
    request: CancelRequest,
    tenant: TenantHandle = Depends(get_tenant_handle),
    locks: ItemLockRegistry = Depends(get_item_locks),
):
    """
    Cancel a non-terminal invoice; frees the item immediately

    Raises:
        - 403 Forbidden: FORBIDDEN for roles below manager
    """
    return await _transition(
        tenant,
        locks,
        invoice_id,
        InvoiceEvent.cancel,
        "Invoice canceled",
        reason=request.reason,
    )


@router.post("/{invoice_id}/archive", response_model=SuccessEnvelope[ArchiveInvoiceResponse])
async def archive_invoice(
    invoice_id: int,
    tenant: TenantHandle = Depends(get_tenant_handle),
):
    result = await ArchiveInvoiceUseCase(tenant).execute(invoice_id)
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value, "Invoice archived")
