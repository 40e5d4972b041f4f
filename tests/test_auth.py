from datetime import timedelta

import pytest

from civicpulse.core.errors import AuthenticationError
from civicpulse.core.security import create_access_token, decode_access_token
from civicpulse.models import UserRole

pytestmark = pytest.mark.anyio


def test_token_round_trip_carries_id_and_role():
    token = create_access_token(subject=42, role="CITIZEN")
    payload = decode_access_token(token)

    assert payload.sub == 42
    assert payload.role == "CITIZEN"


def test_expired_or_tampered_tokens_are_rejected():
    expired = create_access_token(subject=1, role="CITIZEN", expires_delta=timedelta(seconds=-5))
    with pytest.raises(AuthenticationError):
        decode_access_token(expired)

    with pytest.raises(AuthenticationError):
        decode_access_token(create_access_token(subject=1, role="CITIZEN") + "x")


async def test_register_login_and_me(client_for):
    async with client_for() as client:
        resp = await client.post(
            "/auth/register",
            json={"email": "erin@example.com", "password": "Secret123", "full_name": "Erin"},
        )
        assert resp.status_code == 201
        assert resp.json()["role"] == "CITIZEN"

        duplicate = await client.post(
            "/auth/register",
            json={"email": "erin@example.com", "password": "Secret123"},
        )
        assert duplicate.status_code == 409

        bad_login = await client.post(
            "/auth/login", data={"username": "erin@example.com", "password": "wrong"}
        )
        assert bad_login.status_code == 401

        login = await client.post(
            "/auth/login", data={"username": "erin@example.com", "password": "Secret123"}
        )
        assert login.status_code == 200
        token = login.json()["access_token"]

        me = await client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "erin@example.com"


async def test_weak_password_is_rejected(client_for):
    async with client_for() as client:
        resp = await client.post(
            "/auth/register", json={"email": "weak@example.com", "password": "password"}
        )

    assert resp.status_code == 422


async def test_invalid_token_is_401(client_for):
    async with client_for() as client:
        resp = await client.get("/users/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert resp.status_code == 401


async def test_inactive_user_is_401(client_for, make_user):
    ghost = make_user("ghost@example.com", is_active=False)

    async with client_for(ghost) as client:
        resp = await client.get("/civic-report")

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Inactive user"


async def test_token_for_deleted_user_is_401(client_for):
    token = create_access_token(subject=9999, role=UserRole.CITIZEN.value)

    async with client_for() as client:
        resp = await client.get("/civic-report", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401
