"""
Use Case: Get Invoice

Read-only snapshot of an invoice. Calling it twice without an intervening
write returns identical data.
"""

from decimal import Decimal

from src.libs.result import Error, Result, Return
from src.app.services.payment_ledger import PaymentLedger
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.invoices.dtos import (
    BalanceView,
    CustomerView,
    InvoiceDetailResponse,
    InvoiceView,
    PaymentView,
    StatusHistoryView,
)
from src.app.use_cases.items.dtos import ItemView
from src.domain.balance import DEFAULT_TOLERANCE
from src.domain.invoice_lifecycle import allowed_events


class GetInvoiceUseCase:
    def __init__(self, tenant: TenantHandle, tolerance: Decimal = DEFAULT_TOLERANCE):
        self.tenant = tenant
        self.tolerance = tolerance

    async def execute(self, invoice_id: int) -> Result[InvoiceDetailResponse]:
        uow = self.tenant.unit_of_work()
        async with uow:
            invoice = await uow.invoices.get_by_id(invoice_id)
            if not invoice:
                return Return.err(Error("NOT_FOUND", "Invoice not found"))

            item = await uow.items.get_by_id(invoice.item_id)
            customer = await uow.customers.get_by_id(invoice.customer_id)
            payments = await uow.payments.get_by_invoice_id(invoice.id)
            history = await uow.status_history.get_by_invoice_id(invoice.id)
            balance = await PaymentLedger(uow, self.tolerance).summary(invoice)

            return Return.ok(
                InvoiceDetailResponse(
                    invoice=InvoiceView.from_entity(invoice),
                    item=ItemView.from_entity(item),
                    customer=CustomerView.from_entity(customer),
                    balance=BalanceView.from_snapshot(balance),
                    payments=[PaymentView.from_entity(p) for p in payments],
                    status_history=[StatusHistoryView.from_entity(h) for h in history],
                    allowed_events=[
                        e.value for e in allowed_events(invoice.status, invoice.operation_type)
                    ],
                )
            )
