"""
Tests for room catalog endpoints: listing, admin edits, availability and quotes.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_rooms(client: AsyncClient, test_room, closed_room):
    response = await client.get("/api/v1/rooms/")
    assert response.status_code == 200
    names = {r["name"] for r in response.json()}
    assert names == {"Harbour View Double", "Garden Suite"}


@pytest.mark.asyncio
async def test_list_rooms_filters(client: AsyncClient, test_room, closed_room):
    available = await client.get("/api/v1/rooms/?available_only=true")
    assert [r["id"] for r in available.json()] == [test_room.id]

    large = await client.get("/api/v1/rooms/?min_capacity=3")
    assert [r["id"] for r in large.json()] == [closed_room.id]

    doubles = await client.get("/api/v1/rooms/?room_type=double")
    assert [r["id"] for r in doubles.json()] == [test_room.id]


@pytest.mark.asyncio
async def test_get_room(client: AsyncClient, test_room):
    response = await client.get(f"/api/v1/rooms/{test_room.id}")
    assert response.status_code == 200
    data = response.json()
    assert data["capacity"] == 2
    assert float(data["price"]) == 100.0
    assert data["amenities"] == ["wifi", "balcony"]


@pytest.mark.asyncio
async def test_get_room_not_found(client: AsyncClient):
    response = await client.get("/api/v1/rooms/99999")
    assert response.status_code == 404
    assert response.json()["code"] == "room_not_found"


@pytest.mark.asyncio
async def test_create_room_admin(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/rooms/",
        json={
            "name": "Attic Single",
            "room_type": "single",
            "price": "65.50",
            "capacity": 1,
            "amenities": ["wifi"],
        },
        headers=admin_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["is_available"] is True
    assert float(data["price"]) == 65.5

    listing = await client.get("/api/v1/rooms/")
    assert data["id"] in [r["id"] for r in listing.json()]


@pytest.mark.asyncio
async def test_create_room_requires_admin(client: AsyncClient, auth_headers):
    response = await client.post(
        "/api/v1/rooms/",
        json={"name": "Nope", "room_type": "single", "price": "10", "capacity": 1},
        headers=auth_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_room_invalid_capacity(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/rooms/",
        json={"name": "Broom cupboard", "room_type": "single", "price": "10", "capacity": 0},
        headers=admin_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_withdraw_room(client: AsyncClient, admin_headers, auth_headers, test_room):
    """An admin can take a room off sale; new bookings are then refused."""
    response = await client.patch(
        f"/api/v1/rooms/{test_room.id}", json={"is_available": False}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["is_available"] is False
    assert response.json()["name"] == "Harbour View Double"

    booking = await client.post(
        "/api/v1/bookings/",
        json={"room_id": test_room.id, "check_in": "2025-07-01", "check_out": "2025-07-02"},
        headers=auth_headers,
    )
    assert booking.status_code == 409
    assert booking.json()["code"] == "room_unavailable"


@pytest.mark.asyncio
async def test_price_change_keeps_existing_totals(client: AsyncClient, admin_headers, confirmed_booking):
    await client.patch(
        f"/api/v1/rooms/{confirmed_booking.room_id}", json={"price": "180.00"}, headers=admin_headers
    )
    response = await client.get(f"/api/v1/bookings/{confirmed_booking.id}", headers=admin_headers)
    assert float(response.json()["total_price"]) == 500.0


@pytest.mark.asyncio
async def test_update_room_requires_admin(client: AsyncClient, auth_headers, test_room):
    response = await client.patch(
        f"/api/v1/rooms/{test_room.id}", json={"price": "1.00"}, headers=auth_headers
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_availability(client: AsyncClient, confirmed_booking):
    url = f"/api/v1/rooms/{confirmed_booking.room_id}/availability"

    busy = await client.get(url, params={"check_in": "2025-06-12", "check_out": "2025-06-20"})
    assert busy.status_code == 200
    data = busy.json()
    assert data["available"] is False
    assert data["conflicts"] == [{"check_in": "2025-06-10", "check_out": "2025-06-15"}]

    free = await client.get(url, params={"check_in": "2025-06-15", "check_out": "2025-06-20"})
    assert free.json()["available"] is True
    assert free.json()["conflicts"] == []


@pytest.mark.asyncio
async def test_availability_invalid_range(client: AsyncClient, test_room):
    response = await client.get(
        f"/api/v1/rooms/{test_room.id}/availability",
        params={"check_in": "2025-06-20", "check_out": "2025-06-20"},
    )
    assert response.status_code == 422
    assert response.json()["code"] == "invalid_range"


@pytest.mark.asyncio
async def test_quote(client: AsyncClient, test_room):
    response = await client.get(
        f"/api/v1/rooms/{test_room.id}/quote",
        params={"check_in": "2025-07-10", "check_out": "2025-07-13"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["nights"] == 3
    assert float(data["room_total"]) == 300.0
    assert float(data["fees"]) == 36.0
    assert float(data["taxes"]) == 24.0
    assert float(data["total"]) == 360.0


@pytest.mark.asyncio
async def test_quote_unknown_room(client: AsyncClient):
    response = await client.get(
        "/api/v1/rooms/99999/quote", params={"check_in": "2025-07-10", "check_out": "2025-07-13"}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_room_bookings_admin_only(client: AsyncClient, auth_headers, admin_headers, confirmed_booking):
    url = f"/api/v1/rooms/{confirmed_booking.room_id}/bookings"
    assert (await client.get(url, headers=auth_headers)).status_code == 403

    response = await client.get(url, headers=admin_headers)
    assert response.status_code == 200
    assert [b["id"] for b in response.json()] == [confirmed_booking.id]


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["cache"] == {"status": "disabled"}


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/api/v1/rooms/", headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"
    assert response.headers["X-Response-Time"].endswith("ms")


@pytest.mark.asyncio
async def test_metrics_exposed(client: AsyncClient):
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "booking_attempts_total" in response.text
