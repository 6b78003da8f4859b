"""
User API tests - registration, login, error body and authorization.
"""

import pytest
from httpx import AsyncClient

from eventhub.core.security import create_access_token
from eventhub.db.models import User

TEST_PASSWORD = "password123"
MISSING_ID = "00000000-0000-0000-0000-000000000000"

REGISTER_BODY = {
    "username": "skater",
    "email": "skater@example.com",
    "password": "password123",
    "birthDateString": "1995-07-14",
    "location": "Lisbon",
    "role": "admin",
    "bio": "should be ignored",
}


@pytest.mark.asyncio
async def test_register_returns_camel_case_projection(client: AsyncClient):
    response = await client.post("/api/v1/users/register", json=REGISTER_BODY)
    assert response.status_code == 201
    data = response.json()
    assert data["username"] == "skater"
    assert data["birthDate"] == "1995-07-14"
    assert data["role"] == "user"
    assert data["bio"] == ""
    assert data["createdEvents"] == []
    assert "password" not in data


@pytest.mark.asyncio
async def test_register_duplicate_returns_409(client: AsyncClient, test_user):
    body = {**REGISTER_BODY, "username": test_user.username}
    response = await client.post("/api/v1/users/register", json=body)
    assert response.status_code == 409
    assert response.json()["status"] == "409 Conflict"


@pytest.mark.asyncio
async def test_register_rejects_bad_birth_date(client: AsyncClient):
    body = {**REGISTER_BODY, "birthDateString": "not a date"}
    response = await client.post("/api/v1/users/register", json=body)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_users(client: AsyncClient, test_user, other_user):
    response = await client.get("/api/v1/users")
    assert response.status_code == 200
    assert {u["username"] for u in response.json()} == {"runner", "cyclist"}


@pytest.mark.asyncio
async def test_get_missing_user_returns_error_body(client: AsyncClient):
    response = await client.get(f"/api/v1/users/{MISSING_ID}")
    assert response.status_code == 404
    assert response.json() == {
        "status": "404 Not Found",
        "message": f"User {MISSING_ID} not found",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("field, value", [("email", "runner@example.com"), ("username", "runner")])
async def test_login_returns_token(client: AsyncClient, test_user, field, value):
    response = await client.post(
        "/api/v1/users/login", json={field: value, "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["tokenType"] == "bearer"
    assert data["token"]
    assert data["user"]["id"] == test_user.id
    assert "password" not in data["user"]


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client: AsyncClient, test_user):
    wrong_password = await client.post(
        "/api/v1/users/login", json={"email": "runner@example.com", "password": "nope"}
    )
    unknown_user = await client.post(
        "/api/v1/users/login", json={"email": "ghost@example.com", "password": TEST_PASSWORD}
    )
    assert wrong_password.status_code == unknown_user.status_code == 404
    assert wrong_password.json() == unknown_user.json()
    assert wrong_password.json()["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_update_requires_auth(client: AsyncClient, test_user):
    response = await client.patch(f"/api/v1/users/{test_user.id}", json={"bio": "hello"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_own_profile(client: AsyncClient, test_user, auth_headers: dict):
    response = await client.patch(
        f"/api/v1/users/{test_user.id}", headers=auth_headers, json={"bio": "hello"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["bio"] == "hello"
    assert data["username"] == test_user.username


@pytest.mark.asyncio
async def test_update_password_is_hashed(client: AsyncClient, test_user, auth_headers: dict):
    response = await client.patch(
        f"/api/v1/users/{test_user.id}", headers=auth_headers, json={"password": "newpass456"}
    )
    assert response.status_code == 200
    login = await client.post(
        "/api/v1/users/login", json={"username": "runner", "password": "newpass456"}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_cannot_delete_someone_else(client: AsyncClient, other_user, auth_headers: dict):
    response = await client.delete(f"/api/v1/users/{other_user.id}", headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_can_delete_other_user(client: AsyncClient, session, test_user, other_user):
    # Role is never client-settable; promote in the store
    admin = await session.get(User, test_user.id)
    admin.role = "admin"
    await session.flush()
    headers = {"Authorization": f"Bearer {create_access_token(test_user.id)}"}

    response = await client.delete(f"/api/v1/users/{other_user.id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["username"] == "cyclist"
    assert (await client.get(f"/api/v1/users/{other_user.id}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_self(client: AsyncClient, test_user, auth_headers: dict):
    response = await client.delete(f"/api/v1/users/{test_user.id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["id"] == test_user.id


@pytest.mark.asyncio
async def test_update_to_taken_email_returns_409(
    client: AsyncClient, test_user, other_user, auth_headers: dict
):
    response = await client.patch(
        f"/api/v1/users/{test_user.id}",
        headers=auth_headers,
        json={"email": other_user.email},
    )
    assert response.status_code == 409
    assert response.json() == {
        "status": "409 Conflict",
        "message": "Username or email already registered",
    }


@pytest.mark.asyncio
async def test_update_can_clear_avatar(client: AsyncClient, test_user, auth_headers: dict):
    await client.patch(
        f"/api/v1/users/{test_user.id}", headers=auth_headers, json={"avatar": "me.png"}
    )
    response = await client.patch(
        f"/api/v1/users/{test_user.id}", headers=auth_headers, json={"avatar": None}
    )
    assert response.status_code == 200
    assert response.json()["avatar"] is None


@pytest.mark.asyncio
async def test_update_rejects_null_username(client: AsyncClient, test_user, auth_headers: dict):
    response = await client.patch(
        f"/api/v1/users/{test_user.id}", headers=auth_headers, json={"username": None}
    )
    assert response.status_code == 422
