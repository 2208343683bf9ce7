"""
Tests for authentication endpoints: registration, login and the current user.
"""

import pytest
from httpx import AsyncClient

NEW_GUEST = {
    "email": "new@example.com",
    "first_name": "Ada",
    "last_name": "Guest",
    "password": "securepassword123",
}


@pytest.mark.asyncio
async def test_register_user(client: AsyncClient):
    """Successful registration returns user data."""
    response = await client.post("/api/v1/auth/register", json=NEW_GUEST)
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "new@example.com"
    assert data["first_name"] == "Ada"
    assert data["role"] == "user"
    assert "hashed_password" not in data  # Never expose password hash


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user):
    """Duplicate email returns 409."""
    response = await client.post(
        "/api/v1/auth/register", json={**NEW_GUEST, "email": test_user.email}
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_register_weak_password(client: AsyncClient):
    """Password under 8 chars returns 422."""
    response = await client.post("/api/v1/auth/register", json={**NEW_GUEST, "password": "short"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_register_invalid_email(client: AsyncClient):
    response = await client.post("/api/v1/auth/register", json={**NEW_GUEST, "email": "not-an-email"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_register_cannot_choose_role(client: AsyncClient):
    response = await client.post("/api/v1/auth/register", json={**NEW_GUEST, "role": "admin"})
    assert response.status_code == 201
    assert response.json()["role"] == "user"


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_room):
    """Valid credentials return a JWT token that can book rooms."""
    await client.post("/api/v1/auth/register", json=NEW_GUEST)

    response = await client.post("/api/v1/auth/login", json={
        "email": NEW_GUEST["email"],
        "password": NEW_GUEST["password"],
    })
    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"

    booking = await client.post(
        "/api/v1/bookings/",
        json={"room_id": test_room.id, "check_in": "2025-07-01", "check_out": "2025-07-02"},
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
    assert booking.status_code == 201


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient):
    """Wrong password returns 401."""
    await client.post("/api/v1/auth/register", json=NEW_GUEST)

    response = await client.post("/api/v1/auth/login", json={
        "email": NEW_GUEST["email"],
        "password": "wrongpassword",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_nonexistent_email(client: AsyncClient):
    """Non-existent email returns 401."""
    response = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com",
        "password": "anypassword123",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_current_user(client: AsyncClient, admin_user, admin_headers):
    response = await client.get("/api/v1/auth/me", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == admin_user.id
    assert data["email"] == "admin@example.com"
    assert data["role"] == "admin"
    assert "hashed_password" not in data


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
