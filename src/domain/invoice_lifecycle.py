"""
Invoice lifecycle table.

The single source of truth for which (status, event) pairs are legal and where
they lead. Guards and side effects that need data (return condition, cancel
reason, timestamps, history rows) are applied by the invoice state machine
service; this module only answers "where does this event go from here".
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from src.domain.entities.enums import InvoiceStatus, OperationType, SALE_OPERATIONS


class InvoiceEvent(str, Enum):
    confirm = "confirm"
    deliver = "deliver"
    return_item = "return"
    close = "close"
    cancel = "cancel"


S = InvoiceStatus
E = InvoiceEvent

TRANSITIONS: Dict[Tuple[InvoiceStatus, InvoiceEvent], InvoiceStatus] = {
    (S.draft, E.confirm): S.reserved,
    (S.reserved, E.deliver): S.out_with_customer,
    (S.out_with_customer, E.return_item): S.returned,
    (S.returned, E.close): S.closed,
    # a sold item is never returned, so a sale closes once handed over
    (S.out_with_customer, E.close): S.closed,
    (S.draft, E.cancel): S.canceled,
    (S.reserved, E.cancel): S.canceled,
    (S.out_with_customer, E.cancel): S.canceled,
    (S.returned, E.cancel): S.canceled,
}

SALE_ONLY_TRANSITIONS: FrozenSet[Tuple[InvoiceStatus, InvoiceEvent]] = frozenset(
    {(S.out_with_customer, E.close)}
)

INITIAL_STATUS = S.draft


def next_status(
    current: InvoiceStatus, event: InvoiceEvent, operation_type: OperationType
) -> Optional[InvoiceStatus]:
    """Return the target status, or None when the event is illegal from current."""
    key = (current, event)
    if key in SALE_ONLY_TRANSITIONS and operation_type not in SALE_OPERATIONS:
        return None
    return TRANSITIONS.get(key)


def allowed_events(
    current: InvoiceStatus, operation_type: OperationType
) -> Tuple[InvoiceEvent, ...]:
    return tuple(
        event
        for event in InvoiceEvent
        if next_status(current, event, operation_type) is not None
    )


def initial_status_for(as_draft: bool) -> InvoiceStatus:
    """
    Status a freshly created invoice ends up in once its creation commits.

    Every invoice row is written in draft first; unless the caller explicitly
    saves a draft, it is confirmed to reserved in the same unit of work.
    """
    return S.draft if as_draft else S.reserved
