"""
Integration tests for the parcel tracking API.

Tests registration, lookups, the delivery workflow and the
registered-only restrictions over HTTP.
"""

import logging

import pytest


async def register(client, client_id=1000, address="123 Test St"):
    response = await client.post("/v1/parcels", json={"client": client_id, "address": address})
    assert response.status_code == 201
    return response.json()


# TEST 1: Register Parcel
@pytest.mark.asyncio
async def test_register_parcel(client):
    data = await register(client, client_id=77, address="Lenina 1")

    assert data["number"] > 0
    assert data["client"] == 77
    assert data["address"] == "Lenina 1"
    assert data["status"] == "registered"
    assert data["created_at"].endswith("Z")


# TEST 2: Register validation
@pytest.mark.asyncio
async def test_register_parcel_requires_address(client):
    response = await client.post("/v1/parcels", json={"client": 1, "address": ""})

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


# TEST 3: Get Parcel
@pytest.mark.asyncio
async def test_get_parcel(client):
    created = await register(client)

    response = await client.get(f"/v1/parcels/{created['number']}")

    assert response.status_code == 200
    assert response.json() == created


# TEST 4: Get missing Parcel
@pytest.mark.asyncio
async def test_get_missing_parcel(client):
    response = await client.get("/v1/parcels/424242")

    assert response.status_code == 404
    body = response.json()
    assert body["error_code"] == "ERR_NOT_FOUND_001"
    assert body["details"] == {"resource": "Parcel", "id": 424242}


# TEST 5: List client parcels
@pytest.mark.asyncio
async def test_list_client_parcels(client, random_client_id):
    numbers = set()
    for i in range(3):
        created = await register(client, client_id=random_client_id, address=f"address {i}")
        numbers.add(created["number"])

    response = await client.get(f"/v1/clients/{random_client_id}/parcels")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert {p["number"] for p in data["parcels"]} == numbers


# TEST 6: List for unknown client
@pytest.mark.asyncio
async def test_list_client_parcels_empty(client):
    response = await client.get("/v1/clients/5/parcels")

    assert response.status_code == 200
    assert response.json() == {"parcels": [], "total": 0}


# TEST 7: Change address
@pytest.mark.asyncio
async def test_change_address(client):
    created = await register(client)

    response = await client.patch(
        f"/v1/parcels/{created['number']}/address",
        json={"address": "new address"}
    )

    assert response.status_code == 200
    assert response.json()["address"] == "new address"


# TEST 8: Change address after sending
@pytest.mark.asyncio
async def test_change_address_after_sending(client):
    created = await register(client)
    await client.post(f"/v1/parcels/{created['number']}/advance")

    response = await client.patch(
        f"/v1/parcels/{created['number']}/address",
        json={"address": "blocked"}
    )

    assert response.status_code == 409
    assert response.json()["error_code"] == "ERR_PARCEL_001"

    stored = await client.get(f"/v1/parcels/{created['number']}")
    assert stored.json()["address"] == created["address"]


# TEST 9: Advance status
@pytest.mark.asyncio
async def test_advance_status(client):
    created = await register(client)

    first = await client.post(f"/v1/parcels/{created['number']}/advance")
    second = await client.post(f"/v1/parcels/{created['number']}/advance")
    third = await client.post(f"/v1/parcels/{created['number']}/advance")

    assert first.json()["status"] == "sent"
    assert second.json()["status"] == "delivered"
    assert third.json()["status"] == "delivered"


# TEST 10: Set status
@pytest.mark.asyncio
async def test_set_status(client):
    created = await register(client)

    response = await client.patch(
        f"/v1/parcels/{created['number']}/status",
        json={"status": "customs"}
    )

    assert response.status_code == 200
    assert response.json()["status"] == "customs"


# TEST 11: Set status of missing parcel
@pytest.mark.asyncio
async def test_set_status_missing_parcel(client):
    response = await client.patch("/v1/parcels/424242/status", json={"status": "sent"})

    assert response.status_code == 404


# TEST 12: Delete
@pytest.mark.asyncio
async def test_delete_parcel(client):
    created = await register(client)

    response = await client.delete(f"/v1/parcels/{created['number']}")
    assert response.status_code == 204

    missing = await client.get(f"/v1/parcels/{created['number']}")
    assert missing.status_code == 404


# TEST 13: Delete after sending
@pytest.mark.asyncio
async def test_delete_after_sending(client):
    created = await register(client)
    await client.patch(f"/v1/parcels/{created['number']}/status", json={"status": "sent"})

    response = await client.delete(f"/v1/parcels/{created['number']}")

    assert response.status_code == 409
    assert response.json()["details"]["status"] == "sent"


# TEST 14: Delete missing parcel
@pytest.mark.asyncio
async def test_delete_missing_parcel(client):
    response = await client.delete("/v1/parcels/424242")

    assert response.status_code == 404


# TEST 15: Health and correlation headers
@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "abc-123"})

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert "X-Process-Time" in response.headers


# TEST 16: Request log record
@pytest.mark.asyncio
async def test_request_is_logged(client, caplog):
    caplog.set_level(logging.INFO, logger="parcel_tracker.http")

    response = await client.get("/v1/parcels/424242")

    records = [r for r in caplog.records if r.name == "parcel_tracker.http"]
    assert len(records) == 1
    assert records[0].levelno == logging.WARNING
    assert records[0].status_code == 404
    assert records[0].correlation_id == response.headers["X-Correlation-ID"]
    assert float(response.headers["X-Process-Time"]) >= 0
