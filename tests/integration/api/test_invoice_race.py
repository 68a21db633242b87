"""
Concurrent requests for the same item must never both reserve it, and
concurrent writes to one invoice apply one after the other.
"""

import asyncio
from decimal import Decimal

import pytest

API = "/api"


@pytest.mark.asyncio
async def test_concurrent_overlapping_creates(client, store_headers, rent_payload):
    first = rent_payload()
    second = rent_payload(
        customer_name="Le Van C",
        customer_phone="0901000003",
        collection_date="2025-03-12",
        return_date="2025-03-18",
    )

    responses = await asyncio.gather(
        client.post(f"{API}/invoices", json=first, headers=store_headers),
        client.post(f"{API}/invoices", json=second, headers=store_headers),
    )

    codes = sorted(r.status_code for r in responses)
    assert codes == [201, 409]
    loser = next(r for r in responses if r.status_code == 409)
    assert loser.json()["code"] == "CONFLICT"

    listed = await client.get(f"{API}/invoices", headers=store_headers)
    assert listed.json()["data"]["count"] == 1


@pytest.mark.asyncio
async def test_concurrent_creates_get_distinct_numbers(client, store_headers, rent_payload):
    payloads = [
        rent_payload(collection_date=f"2025-05-{day:02d}", return_date=f"2025-05-{day + 1:02d}")
        for day in (1, 3, 5, 7)
    ]

    responses = await asyncio.gather(
        *(client.post(f"{API}/invoices", json=p, headers=store_headers) for p in payloads)
    )

    assert all(r.status_code == 201 for r in responses)
    numbers = sorted(r.json()["data"]["invoice_number"] for r in responses)
    assert numbers == ["INV-0001", "INV-0002", "INV-0003", "INV-0004"]


@pytest.mark.asyncio
async def test_concurrent_confirm_of_overlapping_drafts(client, store_headers, rent_payload):
    drafts = []
    for phone in ("0901000011", "0901000012"):
        response = await client.post(
            f"{API}/invoices",
            json=rent_payload(customer_phone=phone, as_draft=True),
            headers=store_headers,
        )
        drafts.append(response.json()["data"]["invoice_id"])

    responses = await asyncio.gather(
        *(
            client.post(f"{API}/invoices/{invoice_id}/confirm", headers=store_headers)
            for invoice_id in drafts
        )
    )

    assert sorted(r.status_code for r in responses) == [200, 409]


async def history_of(client, headers, invoice_id):
    detail = await client.get(f"{API}/invoices/{invoice_id}", headers=headers)
    return detail.json()["data"]


@pytest.mark.asyncio
async def test_concurrent_confirm_and_cancel_of_a_draft(client, store_headers, rent_payload):
    created = await client.post(
        f"{API}/invoices", json=rent_payload(as_draft=True), headers=store_headers
    )
    invoice_id = created.json()["data"]["invoice_id"]

    confirm, cancel = await asyncio.gather(
        client.post(f"{API}/invoices/{invoice_id}/confirm", headers=store_headers),
        client.post(
            f"{API}/invoices/{invoice_id}/cancel",
            json={"reason": "Customer changed plans"},
            headers=store_headers,
        ),
    )

    # whichever runs second sees the first one's committed status
    assert cancel.status_code == 200, cancel.text
    assert confirm.status_code in (200, 409)
    if confirm.status_code == 409:
        assert confirm.json()["code"] == "ILLEGAL_TRANSITION"

    data = await history_of(client, store_headers, invoice_id)
    assert data["invoice"]["status"] == "canceled"
    transitions = [h for h in data["status_history"] if h["status_to"]]
    for previous, current in zip(transitions, transitions[1:]):
        assert current["status_from"] == previous["status_to"]
    assert transitions[-1]["status_to"] == "canceled"


@pytest.mark.asyncio
async def test_concurrent_payments_cannot_overpay(client, store_headers, rent_payload):
    created = await client.post(f"{API}/invoices", json=rent_payload(), headers=store_headers)
    invoice_id = created.json()["data"]["invoice_id"]

    responses = await asyncio.gather(
        *(
            client.post(
                f"{API}/invoices/{invoice_id}/payments",
                json={"type": "payment", "amount": "800"},
                headers=store_headers,
            )
            for _ in range(2)
        )
    )

    assert sorted(r.status_code for r in responses) == [201, 400]
    rejected = next(r for r in responses if r.status_code == 400)
    assert rejected.json()["code"] == "INVALID_AMOUNT"

    summary = await client.get(
        f"{API}/invoices/{invoice_id}/payments/summary", headers=store_headers
    )
    balance = summary.json()["data"]["balance"]
    assert balance["payments_count"] == 2
    assert Decimal(balance["remaining_balance"]) == Decimal("0")


@pytest.mark.asyncio
async def test_payment_racing_cancel_never_lands_after_it(client, store_headers, rent_payload):
    created = await client.post(f"{API}/invoices", json=rent_payload(), headers=store_headers)
    invoice_id = created.json()["data"]["invoice_id"]

    payment, cancel = await asyncio.gather(
        client.post(
            f"{API}/invoices/{invoice_id}/payments",
            json={"type": "payment", "amount": "300"},
            headers=store_headers,
        ),
        client.post(
            f"{API}/invoices/{invoice_id}/cancel",
            json={"reason": "Customer changed plans"},
            headers=store_headers,
        ),
    )

    assert cancel.status_code == 200
    assert payment.status_code in (201, 409)
    if payment.status_code == 409:
        assert payment.json()["code"] == "INVOICE_TERMINAL"

    history = (await history_of(client, store_headers, invoice_id))["status_history"]
    canceled_at = next(i for i, h in enumerate(history) if h["status_to"] == "canceled")
    assert all(h["status_to"] is not None for h in history[canceled_at + 1 :])
