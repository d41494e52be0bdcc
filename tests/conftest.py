import os
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ------------------------------------------------------------------
# FORCE TESTING MODE
# Must run BEFORE importing app.main: settings, the engine and the
# rate limiter are all built at import time.
# ------------------------------------------------------------------
os.environ["TESTING"] = "true"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_portal.db"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SMTP_HOST"] = ""
os.environ["SMS_API_URL"] = ""
os.environ["SUPABASE_URL"] = ""
os.environ["REDIS_URL"] = ""
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"

from sqlmodel import SQLModel

import app.models  # noqa: F401  (registers every table)

from app.main import app
from app.core.database import engine, AsyncSessionLocal
from app.core.security import create_access_token
from app.models.post import Post, CategoryPayment
from app.services.auth_service import register_candidate


# ------------------------------------------------------------------
# DATABASE
# ------------------------------------------------------------------
@pytest_asyncio.fixture
async def db():
    """Fresh tables for every test (ASGITransport does not run startup events)."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session(db):
    async with AsyncSessionLocal() as session:
        yield session


@pytest_asyncio.fixture
async def client(db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


# ------------------------------------------------------------------
# FACTORIES
# ------------------------------------------------------------------
@pytest_asyncio.fixture
async def make_candidate(db_session):
    """
    Returns an async factory: await make_candidate(email, verified=True)
    -> {"user": User, "headers": {...}}
    """
    counter = {"n": 0}

    async def _make(email: str | None = None, verified: bool = True, mobile: str = "9876543210"):
        counter["n"] += 1
        email = email or f"candidate{counter['n']}@example.com"
        user, profile = await register_candidate(
            db_session, full_name=f"Candidate {counter['n']}", email=email, password="secret123"
        )
        if verified:
            profile.phone_verified = True
            profile.mobile_number = mobile
            db_session.add(profile)
            await db_session.commit()

        token = create_access_token(subject=str(user.id), data={"role": "candidate"})
        return {"user": user, "headers": {"Authorization": f"Bearer {token}"}}

    return _make


@pytest_asyncio.fixture
async def candidate(make_candidate):
    return await make_candidate()


@pytest_asyncio.fixture
async def post(db_session):
    row = Post(post_name="Junior Clerk", post_code="JRC")
    db_session.add(row)
    await db_session.commit()
    await db_session.refresh(row)
    return row


@pytest_asyncio.fixture
async def fees(db_session):
    for category, amount in {"general": 500, "obc": 300, "ews": 300, "sc": 0, "st": 0}.items():
        db_session.add(CategoryPayment(category=category, amount=Decimal(amount)))
    await db_session.commit()


@pytest.fixture
def personal_info_payload(post):
    def _payload(category: str = "general", **overrides):
        data = {
            "post_id": str(post.id),
            "first_name": "Asha",
            "last_name": "Kumari",
            "father_name": "Ramesh Kumar",
            "mother_name": "Sita Devi",
            "date_of_birth": date(1998, 4, 12).isoformat(),
            "gender": "female",
            "category": category,
            "aadhar_number": "123412341234",
            "address": "12 Main Road",
            "district": "Ranchi",
            "pincode": "834001",
        }
        data.update(overrides)
        return data

    return _payload


EDUCATION_PAYLOAD = {
    "qualification_type": "Graduation",
    "board_university": "Ranchi University",
    "passing_year": 2019,
    "percentage": 72.5,
}

EXPERIENCE_PAYLOAD = {
    "company_name": "District Office",
    "designation": "Data Entry Operator",
    "from_date": "2020-01-01",
    "to_date": "2022-06-30",
}


@pytest.fixture
def fill_steps(client, personal_info_payload):
    """
    Drives the wizard through the data steps over HTTP.
    await fill_steps(headers, upto=5, category="general")
    """
    async def _fill(headers, upto: int = 5, category: str = "general"):
        res = await client.put(
            "/api/registration/personal-info", json=personal_info_payload(category), headers=headers
        )
        assert res.status_code == 200, res.text
        if upto >= 2:
            res = await client.put(
                "/api/registration/other-details", json={"nationality": "Indian"}, headers=headers
            )
            assert res.status_code == 200, res.text
        if upto >= 3:
            res = await client.post("/api/registration/education", json=EDUCATION_PAYLOAD, headers=headers)
            assert res.status_code == 201, res.text
        if upto >= 4:
            res = await client.post("/api/registration/experience", json=EXPERIENCE_PAYLOAD, headers=headers)
            assert res.status_code == 201, res.text
        if upto >= 5:
            from unittest.mock import patch

            with patch(
                "app.services.registration_service.upload_document",
                return_value="https://storage.example.com/photos/photo.jpg",
            ):
                res = await client.post(
                    "/api/registration/documents",
                    data={"document_type": "photo"},
                    files={"file": ("photo.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
                    headers=headers,
                )
            assert res.status_code == 201, res.text

    return _fill
