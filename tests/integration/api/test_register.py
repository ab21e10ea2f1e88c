import asyncio

import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.domain.entities import SessionLog, User


@pytest.mark.asyncio
async def test_successful_register(client: AsyncClient, user_payload, db_session):
    """Register stores the user and returns profile and tokens

    Given no user exists with the email or user name
    When I register
    Then I receive 201 with my public profile
    And I receive an access and a refresh token
    And the password is stored hashed
    And no session record is opened
    """
    response = await client.post("/api/auth/register", json=user_payload)

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "User registered successfully"
    assert data["user"]["email"] == "jane@example.com"
    assert data["user"]["user_name"] == "jane_doe"
    assert data["user"]["gender"] == "female"
    assert "password" not in data["user"]
    assert "password_hash" not in data["user"]
    assert data["access_token"]
    assert data["refresh_token"]

    user = (await db_session.exec(select(User))).one()
    assert user.password_hash != user_payload["password"]
    assert user.password_hash.startswith("$2")

    sessions = (await db_session.exec(select(SessionLog))).all()
    assert sessions == []


@pytest.mark.asyncio
async def test_register_lowercases_email(client: AsyncClient, user_payload):
    user_payload["email"] = "Jane.Doe@Example.COM"

    response = await client.post("/api/auth/register", json=user_payload)

    assert response.status_code == 201
    assert response.json()["user"]["email"] == "jane.doe@example.com"


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, user_payload):
    """Duplicate email or user name is rejected with 409"""
    first = await client.post("/api/auth/register", json=user_payload)
    assert first.status_code == 201

    user_payload["user_name"] = "someone_else"
    response = await client.post("/api/auth/register", json=user_payload)

    assert response.status_code == 409
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "USER_ALREADY_EXISTS"
    assert data["message"] == "User with this email or username already exists"


@pytest.mark.asyncio
async def test_register_duplicate_user_name(client: AsyncClient, user_payload):
    await client.post("/api/auth/register", json=user_payload)

    user_payload["email"] = "other@example.com"
    response = await client.post("/api/auth/register", json=user_payload)

    assert response.status_code == 409
    assert response.json()["code"] == "USER_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_register_weak_password(client: AsyncClient, user_payload):
    user_payload["password"] = "alllowercase"

    response = await client.post("/api/auth/register", json=user_payload)

    assert response.status_code == 422
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "VALIDATION_FAILED"
    assert any(err["field"] == "password" for err in data["errors"])


@pytest.mark.asyncio
async def test_register_invalid_user_name(client: AsyncClient, user_payload):
    user_payload["user_name"] = "jane doe!"

    response = await client.post("/api/auth/register", json=user_payload)

    assert response.status_code == 422
    assert any(err["field"] == "user_name" for err in response.json()["errors"])


@pytest.mark.asyncio
async def test_register_too_young(client: AsyncClient, user_payload):
    user_payload["dob"] = "2024-01-01"

    response = await client.post("/api/auth/register", json=user_payload)

    assert response.status_code == 422
    assert any(err["field"] == "dob" for err in response.json()["errors"])


@pytest.mark.asyncio
async def test_register_missing_fields(client: AsyncClient):
    response = await client.post("/api/auth/register", json={"email": "a@example.com"})

    assert response.status_code == 422
    fields = {err["field"] for err in response.json()["errors"]}
    assert {"first_name", "last_name", "user_name", "password"} <= fields


@pytest.mark.asyncio
async def test_concurrent_duplicate_registration(
    isolated_client: AsyncClient, user_payload, session_factory
):
    """Concurrent duplicate registration

    Given two identical registrations sent at the same time
    When both pass the duplicate pre-check
    Then exactly one succeeds with 201
    And the other is rejected with 409, never 500
    """
    responses = await asyncio.gather(
        isolated_client.post("/api/auth/register", json=user_payload),
        isolated_client.post("/api/auth/register", json=user_payload),
    )

    assert sorted(r.status_code for r in responses) == [201, 409]
    conflict = next(r for r in responses if r.status_code == 409).json()
    assert conflict["code"] == "USER_ALREADY_EXISTS"
    assert conflict["message"] == "User with this email or username already exists"

    async with session_factory() as session:
        users = (await session.exec(select(User))).all()
    assert len(users) == 1
