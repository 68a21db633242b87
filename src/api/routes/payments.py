from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import raise_for_error
from src.api.responses import SuccessEnvelope, success
from src.app.services.item_locks import ItemLockRegistry
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.invoices.dtos import PaymentSummaryResponse, PostPaymentResponse
from src.app.use_cases.payments import GetPaymentSummaryUseCase, PostPaymentUseCase
from src.depends import get_item_locks, get_tenant_handle
from src.domain.entities import PaymentMethod, PaymentType

router = APIRouter(prefix="/invoices", tags=["Payments"])

PAYMENT_TOLERANCE = Decimal(str(ApplicationConfig.PAYMENT_TOLERANCE))


class PostPaymentRequest(BaseModel):
    """
    Ledger entry HTTP request payload

    amount is always positive; type says which way the money moves.
    """

    type: PaymentType = PaymentType.payment
    amount: Decimal
    method: PaymentMethod = PaymentMethod.cash
    notes: Optional[str] = Field(None, max_length=2000)


@router.post(
    "/{invoice_id}/payments",
    status_code=status.HTTP_201_CREATED,
    response_model=SuccessEnvelope[PostPaymentResponse],
)
async def post_payment(
    invoice_id: int,
    request: PostPaymentRequest,
    tenant: TenantHandle = Depends(get_tenant_handle),
    locks: ItemLockRegistry = Depends(get_item_locks),
):
    """
    Post Payment, Refund or Penalty

    Raises:
        - 400 Bad Request: INVALID_AMOUNT
        - 404 Not Found: NOT_FOUND
        - 409 Conflict: INVOICE_TERMINAL
    """
    result = await PostPaymentUseCase(tenant, locks, PAYMENT_TOLERANCE).execute(
        invoice_id, request.type, request.amount, request.method, request.notes
    )
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value, f"{request.type.value.capitalize()} recorded")


@router.get(
    "/{invoice_id}/payments/summary",
    response_model=SuccessEnvelope[PaymentSummaryResponse],
)
async def get_payment_summary(
    invoice_id: int,
    tenant: TenantHandle = Depends(get_tenant_handle),
):
    result = await GetPaymentSummaryUseCase(tenant, PAYMENT_TOLERANCE).execute(invoice_id)
    if result.is_err():
        raise_for_error(result.error)
    return success(result.value)
