"""
Integration tests for the payment ledger endpoints.
"""

from decimal import Decimal

import pytest
import pytest_asyncio

API = "/api"


@pytest_asyncio.fixture
async def invoice(client, store_headers, rent_payload):
    response = await client.post(f"{API}/invoices", json=rent_payload(), headers=store_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def post_entry(client, headers, invoice_id, **body):
    return await client.post(
        f"{API}/invoices/{invoice_id}/payments", json=body, headers=headers
    )


@pytest.mark.asyncio
async def test_payment_settles_the_balance(client, store_headers, invoice):
    response = await post_entry(
        client, store_headers, invoice["invoice_id"], type="payment", amount="800.00"
    )

    assert response.status_code == 201, response.text
    data = response.json()["data"]
    assert data["payment_status"] == "paid"
    assert Decimal(data["remaining_balance"]) == Decimal("0")
    assert Decimal(data["balance"]["net_paid"]) == Decimal("1000")


@pytest.mark.asyncio
async def test_partial_payment_then_refund(client, store_headers, invoice):
    invoice_id = invoice["invoice_id"]

    paid = await post_entry(client, store_headers, invoice_id, type="payment", amount="300")
    assert Decimal(paid.json()["data"]["remaining_balance"]) == Decimal("500")
    assert paid.json()["data"]["payment_status"] == "partial"

    refund = await post_entry(
        client, store_headers, invoice_id, type="refund", amount="100", method="transfer"
    )
    assert refund.status_code == 201
    data = refund.json()["data"]
    assert Decimal(data["remaining_balance"]) == Decimal("600")
    assert Decimal(data["balance"]["total_refunds"]) == Decimal("100")
    assert data["balance"]["refunds_count"] == 1


@pytest.mark.asyncio
async def test_penalty_raises_what_is_owed(client, store_headers, invoice):
    response = await post_entry(
        client,
        store_headers,
        invoice["invoice_id"],
        type="penalty",
        amount="150",
        notes="Stained sleeve",
    )

    data = response.json()["data"]
    assert Decimal(data["remaining_balance"]) == Decimal("950")
    assert Decimal(data["balance"]["total_penalties"]) == Decimal("150")


@pytest.mark.asyncio
async def test_overpayment_is_rejected(client, store_headers, invoice):
    response = await post_entry(
        client, store_headers, invoice["invoice_id"], type="payment", amount="900"
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "INVALID_AMOUNT"
    assert Decimal(body["data"]["remaining_balance"]) == Decimal("800")


@pytest.mark.asyncio
async def test_refund_above_paid_is_rejected(client, store_headers, invoice):
    response = await post_entry(
        client, store_headers, invoice["invoice_id"], type="refund", amount="250"
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_AMOUNT"


@pytest.mark.asyncio
async def test_non_positive_amount_is_rejected(client, store_headers, invoice):
    response = await post_entry(
        client, store_headers, invoice["invoice_id"], type="payment", amount="0"
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_AMOUNT"


@pytest.mark.asyncio
async def test_payment_on_canceled_invoice(client, store_headers, invoice):
    invoice_id = invoice["invoice_id"]
    await client.post(
        f"{API}/invoices/{invoice_id}/cancel",
        json={"reason": "Customer changed plans"},
        headers=store_headers,
    )

    response = await post_entry(client, store_headers, invoice_id, type="payment", amount="100")

    assert response.status_code == 409
    assert response.json()["code"] == "INVOICE_TERMINAL"


@pytest.mark.asyncio
async def test_payment_on_unknown_invoice(client, store_headers, item):
    response = await post_entry(client, store_headers, 4242, type="payment", amount="10")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_summary_lists_every_entry(client, store_headers, invoice):
    invoice_id = invoice["invoice_id"]
    await post_entry(client, store_headers, invoice_id, type="payment", amount="300")
    await post_entry(client, store_headers, invoice_id, type="penalty", amount="50")

    response = await client.get(
        f"{API}/invoices/{invoice_id}/payments/summary", headers=store_headers
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["invoice_number"] == "INV-0001"
    assert [(p["type"], p["is_deposit"]) for p in data["payments"]] == [
        ("payment", True),
        ("payment", False),
        ("penalty", False),
    ]
    balance = data["balance"]
    assert Decimal(balance["total_payments"]) == Decimal("500")
    assert Decimal(balance["remaining_balance"]) == Decimal("550")
    assert balance["payments_count"] == 2
    assert balance["penalties_count"] == 1

    detail = await client.get(f"{API}/invoices/{invoice_id}", headers=store_headers)
    payment_rows = [
        h for h in detail.json()["data"]["status_history"] if h["status_to"] is None
    ]
    assert len(payment_rows) == 3
    assert payment_rows[-1]["payment_status_to"] == "partial"
