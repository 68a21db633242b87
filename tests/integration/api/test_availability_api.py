"""
Integration tests for availability queries.
"""

import pytest
import pytest_asyncio

API = "/api"


@pytest_asyncio.fixture
async def booked(client, store_headers, rent_payload):
    response = await client.post(f"{API}/invoices", json=rent_payload(), headers=store_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest_asyncio.fixture
async def second_item(client, store_headers, test_data):
    response = await client.post(
        f"{API}/items", json=test_data.get_copy("second_item"), headers=store_headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def check(client, headers, item_id, collection_date, return_date, **params):
    return await client.get(
        f"{API}/availability",
        params={
            "item_id": item_id,
            "collection_date": collection_date,
            "return_date": return_date,
            **params,
        },
        headers=headers,
    )


@pytest.mark.asyncio
async def test_free_item_is_available(client, store_headers, item):
    response = await check(client, store_headers, item["id"], "2025-03-10", "2025-03-15")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["available"] is True
    assert data["conflicts"] == []


@pytest.mark.asyncio
async def test_overlap_reports_conflicts(client, store_headers, item, booked):
    response = await check(client, store_headers, item["id"], "2025-03-12", "2025-03-13")

    data = response.json()["data"]
    assert data["available"] is False
    assert [c["invoice_number"] for c in data["conflicts"]] == [booked["invoice_number"]]


@pytest.mark.asyncio
async def test_touching_windows_do_not_overlap(client, store_headers, item, booked):
    before = await check(client, store_headers, item["id"], "2025-03-05", "2025-03-10")
    after = await check(client, store_headers, item["id"], "2025-03-15", "2025-03-20")

    assert before.json()["data"]["available"] is True
    assert after.json()["data"]["available"] is True


@pytest.mark.asyncio
async def test_excluding_own_invoice(client, store_headers, item, booked):
    response = await check(
        client,
        store_headers,
        item["id"],
        "2025-03-11",
        "2025-03-16",
        exclude_invoice_id=booked["invoice_id"],
    )

    assert response.json()["data"]["available"] is True


@pytest.mark.asyncio
async def test_inverted_window(client, store_headers, item):
    response = await check(client, store_headers, item["id"], "2025-03-15", "2025-03-10")

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_WINDOW"


@pytest.mark.asyncio
async def test_unknown_item(client, store_headers, item):
    response = await check(client, store_headers, 999, "2025-03-10", "2025-03-15")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_batch_check(client, store_headers, item, second_item, booked):
    response = await client.post(
        f"{API}/availability/batch",
        json={
            "item_ids": [item["id"], second_item["id"], item["id"]],
            "collection_date": "2025-03-12",
            "return_date": "2025-03-14",
        },
        headers=store_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["all_available"] is False
    assert {(i["item_id"], i["available"]) for i in data["items"]} == {
        (item["id"], False),
        (second_item["id"], True),
    }
    assert len(data["items"]) == 2


@pytest.mark.asyncio
async def test_booked_periods(client, store_headers, item, booked):
    response = await client.get(
        f"{API}/items/{item['id']}/booked-periods", headers=store_headers
    )

    assert response.status_code == 200
    periods = response.json()["data"]["periods"]
    assert len(periods) == 1
    assert periods[0]["collection_date"] == "2025-03-10"
    assert periods[0]["return_date"] == "2025-03-15"
    assert periods[0]["status"] == "reserved"


@pytest.mark.asyncio
async def test_booked_periods_skip_canceled(client, store_headers, item, booked):
    await client.post(
        f"{API}/invoices/{booked['invoice_id']}/cancel",
        json={"reason": "Refunded"},
        headers=store_headers,
    )

    response = await client.get(
        f"{API}/items/{item['id']}/booked-periods", headers=store_headers
    )

    assert response.json()["data"]["periods"] == []


@pytest.mark.asyncio
async def test_calendar_marks_occupied_days(client, store_headers, item, booked):
    response = await client.get(
        f"{API}/items/{item['id']}/calendar",
        params={"year": 2025, "month": 3},
        headers=store_headers,
    )

    assert response.status_code == 200
    days = response.json()["data"]["days"]
    assert len(days) == 31
    booked_days = [d["day"] for d in days if d["booked"]]
    assert booked_days == [f"2025-03-{n:02d}" for n in range(10, 15)]
    assert days[9]["invoice_numbers"] == [booked["invoice_number"]]


@pytest.mark.asyncio
async def test_calendar_rejects_bad_month(client, store_headers, item):
    response = await client.get(
        f"{API}/items/{item['id']}/calendar",
        params={"year": 2025, "month": 13},
        headers=store_headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
