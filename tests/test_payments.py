import pytest
from sqlmodel import select

from app.models.payment import Payment

CHECKOUT = {
    "razorpay_order_id": "order_Nx12",
    "razorpay_payment_id": "pay_Nx12",
    "razorpay_signature": "sig_abc",
}


async def _payments(db_session):
    db_session.expire_all()
    return (await db_session.execute(select(Payment))).scalars().all()


@pytest.mark.asyncio
async def test_summary_for_fee_paying_category(client, candidate, fees, fill_steps):
    headers = candidate["headers"]
    await fill_steps(headers, upto=5)

    res = await client.get("/api/payments/summary", headers=headers)
    assert res.status_code == 200, res.text
    data = res.json()
    assert data["category"] == "general"
    assert data["fee_category"] == "general"
    assert float(data["amount"]) == 500
    assert data["is_exempted"] is False
    assert data["payment_status"] == "pending"
    assert data["payment"] is None
    assert data["checkout_key"] == "rzp_test_key"
    assert data["prefill"]["email"] == candidate["user"].email
    assert data["prefill"]["contact"] == "9876543210"


@pytest.mark.asyncio
async def test_summary_locked_before_documents(client, candidate, fees, fill_steps):
    await fill_steps(candidate["headers"], upto=3)
    res = await client.get("/api/payments/summary", headers=candidate["headers"])
    assert res.status_code == 409


@pytest.mark.asyncio
async def test_next_from_payment_requires_payment(client, candidate, fees, fill_steps):
    headers = candidate["headers"]
    await fill_steps(headers, upto=5)

    res = await client.post("/api/registration/next", json={"current_step": 6}, headers=headers)
    assert res.status_code == 409
    assert res.json()["detail"]["title"] == "Payment Required"

    res = await client.post("/api/registration/goto", json={"step": 7}, headers=headers)
    assert res.status_code == 409


@pytest.mark.asyncio
async def test_checkout_success_moves_wizard_to_review(client, db_session, candidate, fees, fill_steps):
    headers = candidate["headers"]
    await fill_steps(headers, upto=5)

    res = await client.post("/api/payments/checkout-success", json=CHECKOUT, headers=headers)
    assert res.status_code == 200, res.text
    data = res.json()
    assert data["payment"]["payment_status"] == "completed"
    assert data["payment"]["transaction_id"] == "pay_Nx12"
    assert data["payment"]["razorpay_order_id"] == "order_Nx12"
    assert float(data["payment"]["amount"]) == 500
    assert data["wizard"]["current_step"] == 7
    assert data["wizard"]["payment_completed"] is True
    assert data["wizard"]["application_status"] == "payment_completed"

    state = (await client.get("/api/registration/state", headers=headers)).json()
    assert state["current_step"] == 7
    assert 6 in state["completed_steps"]

    payments = await _payments(db_session)
    assert len(payments) == 1
    assert payments[0].razorpay_signature == "sig_abc"


@pytest.mark.asyncio
async def test_checkout_success_leaves_no_subscribers(client, candidate, fees, fill_steps):
    from app.core.events import payment_events

    await fill_steps(candidate["headers"], upto=5)
    before = payment_events.listener_count
    await client.post("/api/payments/checkout-success", json=CHECKOUT, headers=candidate["headers"])
    assert payment_events.listener_count == before


@pytest.mark.asyncio
async def test_exempt_category_records_single_waiver(client, db_session, candidate, fees, fill_steps):
    headers = candidate["headers"]
    await fill_steps(headers, upto=5, category="st")

    first = await client.get("/api/payments/summary", headers=headers)
    second = await client.get("/api/payments/summary", headers=headers)
    assert first.status_code == 200, first.text
    assert second.status_code == 200

    data = second.json()
    assert data["is_exempted"] is True
    assert float(data["amount"]) == 0
    assert data["payment_status"] == "completed"
    assert data["payment"]["payment_method"] == "exempted"

    payments = await _payments(db_session)
    assert len(payments) == 1
    assert payments[0].amount == 0

    state = (await client.get("/api/registration/state", headers=headers)).json()
    assert state["current_step"] == 7
    assert state["application_status"] == "payment_completed"


@pytest.mark.asyncio
async def test_exempt_candidate_can_advance_without_checkout(client, candidate, fees, fill_steps):
    headers = candidate["headers"]
    await fill_steps(headers, upto=5, category="sc")

    res = await client.post("/api/registration/next", json={"current_step": 6}, headers=headers)
    assert res.status_code == 200, res.text
    assert res.json()["current_step"] == 7


@pytest.mark.asyncio
async def test_checkout_dismissed(client, db_session, candidate, fees, fill_steps):
    await fill_steps(candidate["headers"], upto=5)

    res = await client.post(
        "/api/payments/checkout-failure", json={"dismissed": True}, headers=candidate["headers"]
    )
    assert res.status_code == 402
    assert res.json()["detail"]["title"] == "Payment Cancelled"
    assert await _payments(db_session) == []


@pytest.mark.asyncio
async def test_checkout_failure_shows_gateway_message(client, candidate, fees, fill_steps):
    await fill_steps(candidate["headers"], upto=5)

    res = await client.post(
        "/api/payments/checkout-failure",
        json={"code": "BAD_REQUEST_ERROR", "description": "Card declined"},
        headers=candidate["headers"],
    )
    assert res.status_code == 402
    assert res.json()["detail"] == {"title": "Payment Failed", "description": "Card declined"}
