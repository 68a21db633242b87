"""Payment ledger use cases."""

from .get_payment_summary_use_case import GetPaymentSummaryUseCase
from .post_payment_use_case import PostPaymentUseCase

__all__ = [
    "PostPaymentUseCase",
    "GetPaymentSummaryUseCase",
]
