from decimal import Decimal

from src.libs.result import Error, Result, Return
from src.app.services.payment_ledger import PaymentLedger
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.invoices.dtos import BalanceView, PaymentSummaryResponse, PaymentView
from src.domain.balance import DEFAULT_TOLERANCE


class GetPaymentSummaryUseCase:
    """Ledger totals and entries of one invoice, recomputed from the ledger"""

    def __init__(self, tenant: TenantHandle, tolerance: Decimal = DEFAULT_TOLERANCE):
        self.tenant = tenant
        self.tolerance = tolerance

    async def execute(self, invoice_id: int) -> Result[PaymentSummaryResponse]:
        uow = self.tenant.unit_of_work()
        async with uow:
            invoice = await uow.invoices.get_by_id(invoice_id)
            if not invoice:
                return Return.err(Error("NOT_FOUND", "Invoice not found"))

            payments = await uow.payments.get_by_invoice_id(invoice.id)
            snapshot = await PaymentLedger(uow, self.tolerance).summary(invoice)

            return Return.ok(
                PaymentSummaryResponse(
                    invoice_id=invoice.id,
                    invoice_number=invoice.invoice_number,
                    balance=BalanceView.from_snapshot(snapshot),
                    payments=[PaymentView.from_entity(p) for p in payments],
                )
            )
