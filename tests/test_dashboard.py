from types import SimpleNamespace

import pytest

from app.core.security import create_access_token
from app.models.enums import ApplicationStatus
from app.models.user import UserRole
from app.services.auth_service import create_user
from app.services.dashboard_service import completion_percentage

CHECKOUT = {"razorpay_order_id": "order_1", "razorpay_payment_id": "pay_1", "razorpay_signature": "sig"}


@pytest.fixture
def admin_headers(db_session):
    async def _make():
        admin = await create_user(db_session, "Portal Admin", "admin@example.com", "adminpass", UserRole.Admin)
        token = create_access_token(subject=str(admin.id), data={"role": "admin"})
        return {"Authorization": f"Bearer {token}"}

    return _make


# ------------------------------------------------------------------
# COMPLETION PERCENTAGE
# ------------------------------------------------------------------
def test_completion_counts_quarters():
    assert completion_percentage([], False, False, False) == 0
    assert completion_percentage([], True, False, False) == 25
    draft = [SimpleNamespace(status=ApplicationStatus.Draft)]
    assert completion_percentage(draft, True, True, False) == 75


def test_completion_full_once_paid_or_submitted():
    paid = [SimpleNamespace(status=ApplicationStatus.PaymentCompleted)]
    submitted = [SimpleNamespace(status="submitted")]
    assert completion_percentage(paid, False, False, False) == 100
    assert completion_percentage(submitted, False, False, False) == 100


# ------------------------------------------------------------------
# CANDIDATE DASHBOARD
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_dashboard_for_unverified_candidate(client, make_candidate):
    unverified = await make_candidate(verified=False)
    res = await client.get("/api/dashboard", headers=unverified["headers"])
    assert res.status_code == 200, res.text
    data = res.json()
    assert data["mobile_verified"] is False
    assert data["applications"] == []
    assert data["completion_percentage"] == 0


@pytest.mark.asyncio
async def test_dashboard_tracks_progress(client, candidate, fill_steps):
    await fill_steps(candidate["headers"], upto=5)

    data = (await client.get("/api/dashboard", headers=candidate["headers"])).json()
    assert data["mobile_verified"] is True
    assert len(data["applications"]) == 1
    assert data["applications"][0]["post"]["post_code"] == "JRC"
    assert data["applications"][0]["status"] == "payment_pending"
    assert len(data["documents"]) == 1
    assert data["has_submitted_application"] is False
    assert data["completion_percentage"] == 75


# ------------------------------------------------------------------
# ADMIN
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_admin_routes_require_admin(client, candidate):
    res = await client.get("/api/admin/dashboard/stats", headers=candidate["headers"])
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_admin_stats_and_listing(client, make_candidate, fees, fill_steps, admin_headers):
    paid = await make_candidate()
    drafting = await make_candidate()
    await fill_steps(paid["headers"], upto=5)
    await client.post("/api/payments/checkout-success", json=CHECKOUT, headers=paid["headers"])
    await client.post("/api/registration/submit", headers=paid["headers"])
    await fill_steps(drafting["headers"], upto=1)

    headers = await admin_headers()

    stats = (await client.get("/api/admin/dashboard/stats", headers=headers)).json()
    assert stats["total_applications"] == 2
    assert stats["total_candidates"] == 2
    assert stats["by_status"]["submitted"] == 1
    assert stats["by_status"]["draft"] == 1
    assert stats["by_status"]["payment_pending"] == 0
    assert stats["total_fee_collected"] == 500

    listing = (await client.get("/api/admin/applications", headers=headers)).json()
    assert listing["total"] == 2
    assert {item["candidate_email"] for item in listing["items"]} == {
        paid["user"].email, drafting["user"].email
    }

    filtered = (await client.get("/api/admin/applications?status=submitted", headers=headers)).json()
    assert filtered["total"] == 1
    item = filtered["items"][0]
    assert item["post_name"] == "Junior Clerk"
    assert item["application_number"].startswith("REG")

    detail = await client.get(f"/api/admin/applications/{item['id']}", headers=headers)
    assert detail.status_code == 200, detail.text
    detail = detail.json()
    assert detail["completed_steps"] == [1, 2, 3, 4, 5, 6]
    assert detail["personal_info"]["first_name"] == "Asha"
    assert len(detail["payments"]) == 1
    assert [entry["action"] for entry in detail["audit_trail"]] == [
        "PAYMENT_COMPLETED", "APPLICATION_SUBMITTED"
    ]


@pytest.mark.asyncio
async def test_admin_application_detail_not_found(client, db, admin_headers):
    import uuid

    headers = await admin_headers()
    res = await client.get(f"/api/admin/applications/{uuid.uuid4()}", headers=headers)
    assert res.status_code == 404
