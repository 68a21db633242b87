"""
Integration tests for the invoice lifecycle over HTTP.
"""

from decimal import Decimal

import pytest
from httpx import AsyncClient

from src.api.utils.jwt import generate_jwt
from tests.utils.json_compare import VOLATILE_KEYS, exclude_keys

API = "/api"


async def create(client, headers, payload):
    return await client.post(f"{API}/invoices", json=payload, headers=headers)


async def get_invoice(client, headers, invoice_id):
    response = await client.get(f"{API}/invoices/{invoice_id}", headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_rental_reserves_item(client: AsyncClient, store_headers, rent_payload):
    response = await create(client, store_headers, rent_payload())

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["status"] == "success"
    assert body["data"]["invoice_number"] == "INV-0001"
    assert body["data"]["status"] == "reserved"
    assert body["data"]["payment_status"] == "partial"
    assert Decimal(body["data"]["remaining_balance"]) == Decimal("800")

    detail = await get_invoice(client, store_headers, body["data"]["invoice_id"])
    history = [(h["status_from"], h["status_to"]) for h in detail["status_history"]]
    assert history == [(None, "draft"), (None, None), ("draft", "reserved")]
    assert detail["payments"][0]["is_deposit"] is True
    assert Decimal(detail["invoice"]["deposit_amount"]) == Decimal("200")
    assert Decimal(detail["balance"]["total_payments"]) == Decimal("200")


@pytest.mark.asyncio
async def test_invoice_numbers_increase(client, store_headers, rent_payload):
    first = await create(client, store_headers, rent_payload())
    second = await create(
        client,
        store_headers,
        rent_payload(collection_date="2025-04-01", return_date="2025-04-05"),
    )

    assert first.json()["data"]["invoice_number"] == "INV-0001"
    assert second.json()["data"]["invoice_number"] == "INV-0002"


@pytest.mark.asyncio
async def test_overlapping_rental_conflicts(client, store_headers, rent_payload):
    first = await create(client, store_headers, rent_payload())
    assert first.status_code == 201

    response = await create(
        client,
        store_headers,
        rent_payload(
            customer_phone="0901000009",
            collection_date="2025-03-14",
            return_date="2025-03-20",
        ),
    )

    assert response.status_code == 409
    body = response.json()
    assert body["status"] == "error"
    assert body["code"] == "CONFLICT"
    conflict = body["data"]["conflicts"][0]
    assert conflict["invoice_number"] == "INV-0001"
    assert conflict["customer_phone"] == "0901000001"
    assert conflict["collection_date"] == "2025-03-10"


@pytest.mark.asyncio
async def test_back_to_back_rentals_are_allowed(client, store_headers, rent_payload):
    first = await create(client, store_headers, rent_payload())
    second = await create(
        client,
        store_headers,
        rent_payload(collection_date="2025-03-15", return_date="2025-03-18"),
    )

    assert first.status_code == 201
    assert second.status_code == 201


@pytest.mark.asyncio
async def test_cancel_frees_the_item(client, store_headers, rent_payload):
    first = await create(client, store_headers, rent_payload())
    invoice_id = first.json()["data"]["invoice_id"]

    cancel = await client.post(
        f"{API}/invoices/{invoice_id}/cancel",
        json={"reason": "Wedding postponed"},
        headers=store_headers,
    )
    assert cancel.status_code == 200
    assert cancel.json()["data"]["status_to"] == "canceled"

    again = await create(client, store_headers, rent_payload())
    assert again.status_code == 201


@pytest.mark.asyncio
async def test_sales_never_block_rentals(client, store_headers, item, rent_payload, test_data):
    sale = await create(
        client, store_headers, test_data.get_copy("sale_invoice", item_id=item["id"])
    )
    assert sale.status_code == 201
    assert sale.json()["data"]["status"] == "reserved"

    rental = await create(client, store_headers, rent_payload())
    assert rental.status_code == 201


@pytest.mark.asyncio
async def test_sale_ignores_dates(client, store_headers, item, test_data):
    payload = test_data.get_copy(
        "sale_invoice",
        item_id=item["id"],
        collection_date="2025-03-10",
        return_date="2025-03-15",
    )
    response = await create(client, store_headers, payload)

    detail = await get_invoice(client, store_headers, response.json()["data"]["invoice_id"])
    assert detail["invoice"]["collection_date"] is None
    assert detail["invoice"]["return_date"] is None


@pytest.mark.asyncio
async def test_invalid_window_is_rejected(client, store_headers, rent_payload):
    response = await create(
        client, store_headers, rent_payload(collection_date="2025-03-15", return_date="2025-03-15")
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_WINDOW"


@pytest.mark.asyncio
async def test_unknown_item_is_not_found(client, store_headers, rent_payload):
    response = await create(client, store_headers, rent_payload(item_id=999))

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_full_rental_lifecycle(client, store_headers, rent_payload):
    created = await create(client, store_headers, rent_payload())
    invoice_id = created.json()["data"]["invoice_id"]

    deliver = await client.post(f"{API}/invoices/{invoice_id}/deliver", headers=store_headers)
    assert deliver.status_code == 200
    assert deliver.json()["data"]["status_to"] == "out_with_customer"

    returned = await client.post(
        f"{API}/invoices/{invoice_id}/return",
        json={"return_condition": "damaged", "notes": "Torn hem"},
        headers=store_headers,
    )
    assert returned.status_code == 200
    assert returned.json()["data"]["penalty_recommended"] is True

    close = await client.post(f"{API}/invoices/{invoice_id}/close", headers=store_headers)
    assert close.status_code == 200
    assert close.json()["data"]["status_to"] == "closed"

    detail = await get_invoice(client, store_headers, invoice_id)
    assert detail["invoice"]["status"] == "closed"
    assert detail["invoice"]["return_condition"] == "damaged"
    assert detail["invoice"]["delivered_at"] is not None
    assert detail["invoice"]["returned_at"] is not None
    assert detail["invoice"]["closed_at"] is not None
    assert detail["allowed_events"] == []
    transitions = [h["status_to"] for h in detail["status_history"] if h["status_to"]]
    assert transitions == ["draft", "reserved", "out_with_customer", "returned", "closed"]


@pytest.mark.asyncio
async def test_close_on_reserved_is_illegal(client, store_headers, rent_payload):
    created = await create(client, store_headers, rent_payload())
    invoice_id = created.json()["data"]["invoice_id"]

    response = await client.post(f"{API}/invoices/{invoice_id}/close", headers=store_headers)

    assert response.status_code == 409
    body = response.json()
    assert body["code"] == "ILLEGAL_TRANSITION"
    assert set(body["data"]["allowed_events"]) == {"deliver", "cancel"}

    detail = await get_invoice(client, store_headers, invoice_id)
    assert detail["invoice"]["status"] == "reserved"


@pytest.mark.asyncio
async def test_sale_closes_after_handover(client, store_headers, item, test_data):
    created = await create(
        client, store_headers, test_data.get_copy("sale_invoice", item_id=item["id"])
    )
    invoice_id = created.json()["data"]["invoice_id"]

    await client.post(f"{API}/invoices/{invoice_id}/deliver", headers=store_headers)
    close = await client.post(f"{API}/invoices/{invoice_id}/close", headers=store_headers)

    assert close.status_code == 200
    assert close.json()["data"]["status_from"] == "out_with_customer"


@pytest.mark.asyncio
async def test_cancel_without_reason_is_rejected(client, store_headers, rent_payload):
    created = await create(client, store_headers, rent_payload())
    invoice_id = created.json()["data"]["invoice_id"]

    response = await client.post(
        f"{API}/invoices/{invoice_id}/cancel", json={}, headers=store_headers
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_get_invoice_is_repeatable(client, store_headers, rent_payload):
    created = await create(client, store_headers, rent_payload())
    invoice_id = created.json()["data"]["invoice_id"]

    first = await client.get(f"{API}/invoices/{invoice_id}", headers=store_headers)
    second = await client.get(f"{API}/invoices/{invoice_id}", headers=store_headers)

    assert first.content == second.content


@pytest.mark.asyncio
async def test_unchanged_update_writes_nothing(client, store_headers, rent_payload):
    payload = rent_payload()
    created = await create(client, store_headers, payload)
    invoice_id = created.json()["data"]["invoice_id"]
    before = await get_invoice(client, store_headers, invoice_id)

    response = await client.put(
        f"{API}/invoices/{invoice_id}", json=payload, headers=store_headers
    )

    assert response.status_code == 200
    assert response.json()["data"]["updated"] is False
    after = await get_invoice(client, store_headers, invoice_id)
    assert after == before


@pytest.mark.asyncio
async def test_update_moves_window_and_records_history(client, store_headers, rent_payload):
    created = await create(client, store_headers, rent_payload())
    invoice_id = created.json()["data"]["invoice_id"]
    before = await get_invoice(client, store_headers, invoice_id)

    response = await client.put(
        f"{API}/invoices/{invoice_id}",
        json=rent_payload(return_date="2025-03-17", total_price="1200.00"),
        headers=store_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["updated"] is True
    assert data["changed_fields"] == ["return_date", "total_price"]

    after = await get_invoice(client, store_headers, invoice_id)
    assert after["invoice"]["return_date"] == "2025-03-17"
    assert Decimal(after["invoice"]["remaining_balance"]) == Decimal("1000")
    assert len(after["status_history"]) == len(before["status_history"]) + 1
    edit = after["status_history"][-1]
    assert edit["status_from"] == edit["status_to"] == "reserved"
    assert exclude_keys(after["item"], VOLATILE_KEYS) == exclude_keys(before["item"], VOLATILE_KEYS)


@pytest.mark.asyncio
async def test_update_into_a_booked_window_conflicts(client, store_headers, rent_payload):
    await create(client, store_headers, rent_payload())
    later = await create(
        client,
        store_headers,
        rent_payload(collection_date="2025-03-20", return_date="2025-03-25"),
    )
    invoice_id = later.json()["data"]["invoice_id"]

    response = await client.put(
        f"{API}/invoices/{invoice_id}",
        json=rent_payload(collection_date="2025-03-12", return_date="2025-03-25"),
        headers=store_headers,
    )

    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_update_of_terminal_invoice(client, store_headers, rent_payload):
    payload = rent_payload()
    created = await create(client, store_headers, payload)
    invoice_id = created.json()["data"]["invoice_id"]
    await client.post(
        f"{API}/invoices/{invoice_id}/cancel", json={"reason": "No show"}, headers=store_headers
    )

    response = await client.put(
        f"{API}/invoices/{invoice_id}",
        json={**payload, "notes": "changed"},
        headers=store_headers,
    )

    assert response.status_code == 409
    assert response.json()["code"] == "INVOICE_TERMINAL"


@pytest.mark.asyncio
async def test_draft_does_not_hold_item_until_confirmed(client, store_headers, rent_payload):
    draft = await create(client, store_headers, rent_payload(as_draft=True))
    assert draft.json()["data"]["status"] == "draft"
    draft_id = draft.json()["data"]["invoice_id"]

    reserved = await create(client, store_headers, rent_payload(customer_phone="0901000009"))
    assert reserved.status_code == 201

    confirm = await client.post(f"{API}/invoices/{draft_id}/confirm", headers=store_headers)
    assert confirm.status_code == 409
    assert confirm.json()["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_archive_hides_canceled_invoice(client, store_headers, rent_payload):
    created = await create(client, store_headers, rent_payload())
    invoice_id = created.json()["data"]["invoice_id"]

    early = await client.post(f"{API}/invoices/{invoice_id}/archive", headers=store_headers)
    assert early.status_code == 409

    await client.post(
        f"{API}/invoices/{invoice_id}/cancel", json={"reason": "Duplicate"}, headers=store_headers
    )
    archived = await client.post(f"{API}/invoices/{invoice_id}/archive", headers=store_headers)
    assert archived.status_code == 200

    listed = await client.get(f"{API}/invoices", headers=store_headers)
    assert listed.json()["data"]["count"] == 0

    with_archived = await client.get(
        f"{API}/invoices", params={"include_archived": "true"}, headers=store_headers
    )
    assert [i["id"] for i in with_archived.json()["data"]["invoices"]] == [invoice_id]


@pytest.mark.asyncio
async def test_list_filters(client, store_headers, item, rent_payload, test_data):
    await create(client, store_headers, rent_payload())
    await create(client, store_headers, test_data.get_copy("sale_invoice", item_id=item["id"]))

    rentals = await client.get(
        f"{API}/invoices", params={"operation_type": "rent"}, headers=store_headers
    )
    by_phone = await client.get(
        f"{API}/invoices", params={"customer_phone": "0901000002"}, headers=store_headers
    )
    newest_first = await client.get(f"{API}/invoices", headers=store_headers)

    assert [i["operation_type"] for i in rentals.json()["data"]["invoices"]] == ["rent"]
    assert [i["customer_name"] for i in by_phone.json()["data"]["invoices"]] == ["Tran Thi B"]
    assert [i["invoice_number"] for i in newest_first.json()["data"]["invoices"]] == [
        "INV-0002",
        "INV-0001",
    ]


@pytest.mark.asyncio
async def test_update_without_deposit_keeps_it(client, store_headers, rent_payload):
    created = await create(client, store_headers, rent_payload())
    invoice_id = created.json()["data"]["invoice_id"]

    payload = rent_payload(notes="Pick up after 5pm")
    del payload["deposit_amount"]
    response = await client.put(
        f"{API}/invoices/{invoice_id}", json=payload, headers=store_headers
    )

    assert response.status_code == 200, response.text
    assert response.json()["data"]["changed_fields"] == ["notes"]
    detail = await get_invoice(client, store_headers, invoice_id)
    assert Decimal(detail["invoice"]["deposit_amount"]) == Decimal("200")


@pytest.mark.asyncio
async def test_update_with_new_deposit_is_rejected(client, store_headers, rent_payload):
    created = await create(client, store_headers, rent_payload())
    invoice_id = created.json()["data"]["invoice_id"]

    response = await client.put(
        f"{API}/invoices/{invoice_id}",
        json=rent_payload(deposit_amount="300.00"),
        headers=store_headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_staff_cannot_cancel_or_close(client, tenant, store_headers, rent_payload):
    token = generate_jwt(user_id="staff-9", tenant_id=tenant["id"], role="staff")
    staff_headers = {"Authorization": f"Bearer {token}"}
    created = await create(client, staff_headers, rent_payload())
    invoice_id = created.json()["data"]["invoice_id"]

    cancel = await client.post(
        f"{API}/invoices/{invoice_id}/cancel",
        json={"reason": "Customer changed plans"},
        headers=staff_headers,
    )
    assert cancel.status_code == 403
    assert cancel.json()["code"] == "FORBIDDEN"

    deliver = await client.post(f"{API}/invoices/{invoice_id}/deliver", headers=staff_headers)
    assert deliver.status_code == 200
    await client.post(
        f"{API}/invoices/{invoice_id}/return",
        json={"return_condition": "good"},
        headers=staff_headers,
    )

    close = await client.post(f"{API}/invoices/{invoice_id}/close", headers=staff_headers)
    assert close.status_code == 403

    detail = await get_invoice(client, staff_headers, invoice_id)
    assert detail["invoice"]["status"] == "returned"

    managed = await client.post(f"{API}/invoices/{invoice_id}/close", headers=store_headers)
    assert managed.status_code == 200
