import pytest
from starlette.requests import Request

from app.core.rate_limiter import candidate_key, limiter


@pytest.fixture
def live_limiter():
    limiter.reset()
    limiter.enabled = True
    yield limiter
    limiter.enabled = False
    limiter.reset()


def _request(headers=None, client=("203.0.113.7", 4000)):
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request({"type": "http", "method": "POST", "path": "/", "headers": raw, "client": client})


def test_candidate_key_uses_bearer_token():
    first = candidate_key(_request({"Authorization": "Bearer token-one"}))
    second = candidate_key(_request({"Authorization": "Bearer token-two"}))
    assert first.startswith("candidate:")
    assert first != second
    assert "token-one" not in first


def test_candidate_key_falls_back_to_client_address():
    assert candidate_key(_request()) == "ip:203.0.113.7"
    assert candidate_key(_request({"X-Forwarded-For": "198.51.100.2, 10.0.0.1"})) == "ip:198.51.100.2"


@pytest.mark.asyncio
async def test_otp_sends_are_throttled_per_candidate(client, make_candidate, live_limiter):
    first = await make_candidate(verified=False)
    second = await make_candidate(verified=False)

    for _ in range(3):
        res = await client.post("/api/phone/send-otp", json={"mobile": "9123456780"}, headers=first["headers"])
        assert res.status_code == 200, res.text

    res = await client.post("/api/phone/send-otp", json={"mobile": "9123456780"}, headers=first["headers"])
    assert res.status_code == 429

    res = await client.post("/api/phone/send-otp", json={"mobile": "9123456781"}, headers=second["headers"])
    assert res.status_code == 200, res.text
