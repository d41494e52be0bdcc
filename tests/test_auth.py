from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app.core.config import settings
from app.core.security import ALGORITHM, create_access_token
from app.models.user import UserRole
from app.services.auth_service import create_user

SIGNUP = {
    "full_name": "Asha Kumari",
    "email": "Asha@Example.com",
    "password": "secret123",
    "confirm_password": "secret123",
}


@pytest.mark.asyncio
async def test_signup_returns_token_and_unverified_profile(client):
    res = await client.post("/api/auth/signup", json=SIGNUP)
    assert res.status_code == 201, res.text

    data = res.json()
    assert data["access_token"]
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "asha@example.com"
    assert data["user"]["role"] == "Candidate"
    assert data["profile"]["full_name"] == "Asha Kumari"
    assert data["profile"]["phone_verified"] is False


@pytest.mark.asyncio
async def test_signup_duplicate_email(client):
    res = await client.post("/api/auth/signup", json=SIGNUP)
    assert res.status_code == 201

    res = await client.post("/api/auth/signup", json={**SIGNUP, "email": "asha@example.com"})
    assert res.status_code == 400
    assert "already exists" in res.json()["detail"]


@pytest.mark.asyncio
async def test_signup_password_mismatch(client):
    res = await client.post("/api/auth/signup", json={**SIGNUP, "confirm_password": "different"})
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_signup_short_password(client):
    res = await client.post(
        "/api/auth/signup", json={**SIGNUP, "password": "abc", "confirm_password": "abc"}
    )
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_candidate_login_and_me(client):
    await client.post("/api/auth/signup", json=SIGNUP)

    res = await client.post("/api/auth/login", json={"email": "asha@example.com", "password": "secret123"})
    assert res.status_code == 200, res.text
    token = res.json()["access_token"]

    res = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 200
    assert res.json()["user"]["name"] == "Asha Kumari"


@pytest.mark.asyncio
async def test_login_wrong_password(client):
    await client.post("/api/auth/signup", json=SIGNUP)
    res = await client.post("/api/auth/login", json={"email": "asha@example.com", "password": "nope123"})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_me_rejects_bad_token(client):
    res = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_admin_login(client, db_session):
    await create_user(db_session, "Portal Admin", "admin@example.com", "adminpass", UserRole.Admin)

    res = await client.post("/api/admin/login", json={"email": "admin@example.com", "password": "adminpass"})
    assert res.status_code == 200, res.text
    assert res.json()["user"]["role"] == "Admin"

    # admins are turned away from the candidate login
    res = await client.post("/api/auth/login", json={"email": "admin@example.com", "password": "adminpass"})
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_candidate_cannot_use_admin_login(client, candidate):
    email = candidate["user"].email
    res = await client.post("/api/admin/login", json={"email": email, "password": "secret123"})
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_admin_is_kept_out_of_candidate_routes(client, db_session):
    admin = await create_user(db_session, "Portal Admin", "admin@example.com", "adminpass", UserRole.Admin)
    token = create_access_token(subject=str(admin.id), data={"role": "admin"})

    res = await client.get("/api/registration/state", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_token_with_foreign_issuer_is_rejected(client, candidate):
    claims = {
        "sub": str(candidate["user"].id),
        "iss": "another-service",
        "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
    }
    token = jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)
    res = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_token_subject_must_be_a_user_id(client, db):
    token = create_access_token(subject="not-a-uuid", data={"role": "candidate"})
    res = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid token payload"
