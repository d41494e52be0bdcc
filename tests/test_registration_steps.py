import uuid

import pytest

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


async def _state(client, headers):
    res = await client.get("/api/registration/state", headers=headers)
    assert res.status_code == 200, res.text
    return res.json()


# ------------------------------------------------------------------
# GATING
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_fresh_candidate_state(client, candidate):
    state = await _state(client, candidate["headers"])
    assert state["application_id"] is None
    assert state["current_step"] == 1
    assert state["completed_steps"] == []
    assert state["max_allowed_step"] == 2
    assert len(state["steps"]) == 7


@pytest.mark.asyncio
async def test_education_before_personal_info_is_rejected(client, candidate):
    res = await client.post("/api/registration/education", json=EDUCATION_PAYLOAD, headers=candidate["headers"])
    assert res.status_code == 409
    assert res.json()["detail"]["title"] == "Complete Previous Steps"


@pytest.mark.asyncio
async def test_goto_locked_step_is_rejected(client, candidate, fill_steps):
    await fill_steps(candidate["headers"], upto=1)

    res = await client.post("/api/registration/goto", json={"step": 4}, headers=candidate["headers"])
    assert res.status_code == 409

    res = await client.post("/api/registration/goto", json={"step": 2}, headers=candidate["headers"])
    assert res.status_code == 200
    assert res.json()["current_step"] == 2


@pytest.mark.asyncio
async def test_previous_stops_at_first_step(client, candidate):
    res = await client.post("/api/registration/previous", json={"current_step": 1}, headers=candidate["headers"])
    assert res.status_code == 200
    assert res.json()["current_step"] == 1


@pytest.mark.asyncio
async def test_previous_moves_back_one_step(client, candidate, fill_steps):
    await fill_steps(candidate["headers"], upto=3)
    res = await client.post("/api/registration/previous", json={"current_step": 4}, headers=candidate["headers"])
    assert res.status_code == 200
    assert res.json()["current_step"] == 3


# ------------------------------------------------------------------
# STEP 1
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_personal_info_creates_draft_application(client, candidate, personal_info_payload):
    res = await client.put(
        "/api/registration/personal-info", json=personal_info_payload(), headers=candidate["headers"]
    )
    assert res.status_code == 200, res.text
    assert res.json()["category"] == "general"
    assert res.json()["application_id"]

    state = await _state(client, candidate["headers"])
    assert state["application_status"] == "draft"
    assert state["completed_steps"] == [1]
    assert state["current_step"] == 2


@pytest.mark.asyncio
async def test_personal_info_update_keeps_single_application(client, candidate, personal_info_payload):
    first = await client.put(
        "/api/registration/personal-info", json=personal_info_payload(), headers=candidate["headers"]
    )
    second = await client.put(
        "/api/registration/personal-info",
        json=personal_info_payload(category="obc", first_name="Asha Rani"),
        headers=candidate["headers"],
    )
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["application_id"] == first.json()["application_id"]
    assert second.json()["category"] == "obc"


@pytest.mark.asyncio
async def test_personal_info_unknown_post(client, candidate, personal_info_payload):
    res = await client.put(
        "/api/registration/personal-info",
        json=personal_info_payload(post_id=str(uuid.uuid4())),
        headers=candidate["headers"],
    )
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_personal_info_validation(client, candidate, personal_info_payload):
    res = await client.put(
        "/api/registration/personal-info",
        json=personal_info_payload(aadhar_number="1234"),
        headers=candidate["headers"],
    )
    assert res.status_code == 422


# ------------------------------------------------------------------
# STEP 2 (saved on next)
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_next_from_other_details_requires_nationality(client, candidate, fill_steps):
    await fill_steps(candidate["headers"], upto=1)

    res = await client.post("/api/registration/next", json={"current_step": 2}, headers=candidate["headers"])
    assert res.status_code == 400
    assert res.json()["detail"]["description"] == "Please enter nationality"

    state = await _state(client, candidate["headers"])
    assert 2 not in state["completed_steps"]


@pytest.mark.asyncio
async def test_next_from_other_details_saves_and_advances(client, candidate, fill_steps):
    await fill_steps(candidate["headers"], upto=1)

    res = await client.post(
        "/api/registration/next",
        json={"current_step": 2, "other_details": {"nationality": "Indian", "religion": "Hindu"}},
        headers=candidate["headers"],
    )
    assert res.status_code == 200, res.text
    assert res.json()["current_step"] == 3
    assert res.json()["completed_steps"] == [1, 2]

    res = await client.get("/api/registration/other-details", headers=candidate["headers"])
    assert res.json()["nationality"] == "Indian"
    assert res.json()["religion"] == "Hindu"


@pytest.mark.asyncio
async def test_other_details_upsert(client, candidate, fill_steps):
    await fill_steps(candidate["headers"], upto=2)

    res = await client.put(
        "/api/registration/other-details", json={"nationality": "Nepali"}, headers=candidate["headers"]
    )
    assert res.status_code == 200
    res = await client.get("/api/registration/other-details", headers=candidate["headers"])
    assert res.json()["nationality"] == "Nepali"


# ------------------------------------------------------------------
# STEPS 3-4 AND STATUS PROGRESSION
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_status_moves_forward_with_steps(client, candidate, fill_steps):
    headers = candidate["headers"]

    await fill_steps(headers, upto=2)
    assert (await _state(client, headers))["application_status"] == "draft"

    await fill_steps(headers, upto=3)
    assert (await _state(client, headers))["application_status"] == "document_pending"

    await fill_steps(headers, upto=5)
    state = await _state(client, headers)
    assert state["application_status"] == "payment_pending"
    assert state["completed_steps"] == [1, 2, 3, 4, 5]
    assert state["current_step"] == 6


@pytest.mark.asyncio
async def test_education_update_and_delete(client, candidate, fill_steps):
    headers = candidate["headers"]
    await fill_steps(headers, upto=3)

    rows = (await client.get("/api/registration/education", headers=headers)).json()
    assert len(rows) == 1
    row_id = rows[0]["id"]

    res = await client.put(
        f"/api/registration/education/{row_id}", json={**EDUCATION_PAYLOAD, "percentage": 80}, headers=headers
    )
    assert res.status_code == 200
    assert res.json()["percentage"] == 80

    res = await client.delete(f"/api/registration/education/{row_id}", headers=headers)
    assert res.status_code == 204
    assert (await client.get("/api/registration/education", headers=headers)).json() == []


@pytest.mark.asyncio
async def test_cannot_touch_another_candidates_rows(client, make_candidate, fill_steps):
    owner = await make_candidate()
    other = await make_candidate()
    await fill_steps(owner["headers"], upto=3)
    row_id = (await client.get("/api/registration/education", headers=owner["headers"])).json()[0]["id"]

    res = await client.delete(f"/api/registration/education/{row_id}", headers=other["headers"])
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_experience_dates_validated(client, candidate, fill_steps):
    headers = candidate["headers"]
    await fill_steps(headers, upto=3)

    res = await client.post(
        "/api/registration/experience",
        json={**EXPERIENCE_PAYLOAD, "from_date": "2023-01-01", "to_date": "2022-01-01"},
        headers=headers,
    )
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_current_job_has_no_end_date(client, candidate, fill_steps):
    headers = candidate["headers"]
    await fill_steps(headers, upto=3)

    res = await client.post(
        "/api/registration/experience",
        json={**EXPERIENCE_PAYLOAD, "is_current": True},
        headers=headers,
    )
    assert res.status_code == 201
    assert res.json()["to_date"] is None
