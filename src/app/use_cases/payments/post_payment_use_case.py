"""
Use Case: Post Payment

Appends a payment, refund or penalty to an invoice's ledger.
"""

from decimal import Decimal
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.item_locks import ItemLockRegistry, item_key
from src.app.services.payment_ledger import PaymentLedger
from src.app.services.reservation_orchestrator import current_item_id
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.invoices.dtos import BalanceView, PostPaymentResponse
from src.domain.balance import DEFAULT_TOLERANCE
from src.domain.entities import PaymentMethod, PaymentType


class PostPaymentUseCase:
    """
    Business Logic:
    1. Take the invoice's item lock and re-read the invoice row for update
       (NOT_FOUND when missing)
    2. Let the ledger validate and append the entry; terminal invoices are
       rejected with INVOICE_TERMINAL, bad amounts with INVALID_AMOUNT
    3. Commit the entry together with the refreshed balance and history row,
       still under the lock, so the next entry sees this balance
    """

    def __init__(
        self,
        tenant: TenantHandle,
        locks: ItemLockRegistry,
        tolerance: Decimal = DEFAULT_TOLERANCE,
    ):
        self.tenant = tenant
        self.locks = locks
        self.tolerance = tolerance

    async def execute(
        self,
        invoice_id: int,
        payment_type: PaymentType,
        amount,
        method: PaymentMethod = PaymentMethod.cash,
        notes: Optional[str] = None,
    ) -> Result[PostPaymentResponse]:
        # 1. Lock
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

                # 2. Append
                result = await PaymentLedger(uow, self.tolerance).post(
                    invoice,
                    payment_type,
                    amount,
                    actor=self.tenant.actor,
                    method=method,
                    notes=notes,
                )
                if result.is_err():
                    return result

                # 3. Commit
                await uow.commit()

                snapshot = result.value
                return Return.ok(
                    PostPaymentResponse(
                        invoice_id=invoice.id,
                        invoice_number=invoice.invoice_number,
                        payment_status=snapshot.payment_status.value,
                        remaining_balance=snapshot.remaining_balance,
                        balance=BalanceView.from_snapshot(snapshot),
                    )
                )
