"""
Unit tests for InvoiceStateMachine.
Tests transition rules and side effects with mocked repositories.
"""

from datetime import date
from decimal import Decimal

import pytest

from src.app.services.invoice_state_machine import InvoiceStateMachine
from src.domain.entities import Invoice, InvoiceStatus, OperationType, ReturnCondition
from src.domain.invoice_lifecycle import InvoiceEvent


def make_invoice(status=InvoiceStatus.reserved, operation_type=OperationType.rent):
    return Invoice(
        id=7,
        sequence=7,
        invoice_number="INV-0007",
        operation_type=operation_type,
        status=status,
        total_price=Decimal("1000"),
        collection_date=date(2025, 3, 10),
        return_date=date(2025, 3, 15),
        item_id=1,
        customer_id=1,
    )


@pytest.mark.asyncio
async def test_deliver_stamps_timestamp_and_history(mock_store_uow):
    invoice = make_invoice()

    result = await InvoiceStateMachine(mock_store_uow).apply(
        invoice, InvoiceEvent.deliver, "staff-1"
    )

    assert result.is_ok()
    assert invoice.status == InvoiceStatus.out_with_customer
    assert invoice.delivered_at is not None
    assert invoice.delivered_at.tzinfo is not None
    mock_store_uow.invoices.update.assert_called_once_with(invoice)

    history = mock_store_uow.status_history.create.call_args[0][0]
    assert history.status_from == InvoiceStatus.reserved
    assert history.status_to == InvoiceStatus.out_with_customer
    assert history.actor == "staff-1"
    # the state machine never commits; the caller's unit of work does
    mock_store_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_close_from_reserved_is_illegal(mock_store_uow):
    invoice = make_invoice(status=InvoiceStatus.reserved)

    result = await InvoiceStateMachine(mock_store_uow).apply(
        invoice, InvoiceEvent.close, "staff-1"
    )

    assert result.is_err()
    assert result.error.code == "ILLEGAL_TRANSITION"
    assert set(result.error.details["allowed_events"]) == {"deliver", "cancel"}
    assert invoice.status == InvoiceStatus.reserved
    mock_store_uow.invoices.update.assert_not_called()
    mock_store_uow.status_history.create.assert_not_called()


@pytest.mark.asyncio
async def test_sale_closes_from_out_with_customer(mock_store_uow):
    invoice = make_invoice(
        status=InvoiceStatus.out_with_customer, operation_type=OperationType.sale
    )

    result = await InvoiceStateMachine(mock_store_uow).apply(
        invoice, InvoiceEvent.close, "staff-1"
    )

    assert result.is_ok()
    assert invoice.status == InvoiceStatus.closed
    assert invoice.closed_at is not None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "condition, penalty",
    [
        (ReturnCondition.good, False),
        (ReturnCondition.needs_cleaning, False),
        (ReturnCondition.damaged, True),
        (ReturnCondition.missing_items, True),
    ],
)
async def test_return_flags_penalty_for_damage(mock_store_uow, condition, penalty):
    invoice = make_invoice(status=InvoiceStatus.out_with_customer)

    result = await InvoiceStateMachine(mock_store_uow).apply(
        invoice, InvoiceEvent.return_item, "staff-1", return_condition=condition.value
    )

    assert result.is_ok()
    assert result.value.penalty_recommended is penalty
    assert invoice.return_condition == condition
    assert invoice.returned_at is not None


@pytest.mark.asyncio
async def test_return_requires_known_condition(mock_store_uow):
    invoice = make_invoice(status=InvoiceStatus.out_with_customer)

    result = await InvoiceStateMachine(mock_store_uow).apply(
        invoice, InvoiceEvent.return_item, "staff-1", return_condition="torn"
    )

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"
    assert invoice.status == InvoiceStatus.out_with_customer


@pytest.mark.asyncio
async def test_cancel_requires_reason(mock_store_uow):
    invoice = make_invoice()

    result = await InvoiceStateMachine(mock_store_uow).apply(
        invoice, InvoiceEvent.cancel, "staff-1", reason="   "
    )

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_cancel_records_reason(mock_store_uow):
    invoice = make_invoice()

    result = await InvoiceStateMachine(mock_store_uow).apply(
        invoice, InvoiceEvent.cancel, "staff-1", reason=" Customer changed plans "
    )

    assert result.is_ok()
    assert invoice.status == InvoiceStatus.canceled
    assert invoice.cancel_reason == "Customer changed plans"
    assert invoice.canceled_at is not None


@pytest.mark.asyncio
async def test_terminal_invoice_rejects_every_event(mock_store_uow):
    for event in InvoiceEvent:
        invoice = make_invoice(status=InvoiceStatus.closed)
        result = await InvoiceStateMachine(mock_store_uow).apply(
            invoice, event, "staff-1", return_condition="good", reason="x"
        )
        assert result.is_err()
        assert result.error.code == "ILLEGAL_TRANSITION"


@pytest.mark.asyncio
async def test_record_creation_has_no_previous_status(mock_store_uow):
    invoice = make_invoice(status=InvoiceStatus.draft)

    entry = await InvoiceStateMachine(mock_store_uow).record_creation(invoice, "staff-1")

    assert entry.status_from is None
    assert entry.status_to == InvoiceStatus.draft
