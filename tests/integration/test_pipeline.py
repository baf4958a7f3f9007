"""End-to-end questionnaire flow through the REST API.

Role -> language -> five typed answers with confirmation -> Complete,
then exactly one spreadsheet append with the canonical answers.
"""

from src.core.exceptions import PersistenceFailedError
from src.core.models import Role

JOB_SEEKER_ANSWERS = [
    ("name", "rahul SHARMA", "Rahul Sharma"),
    ("education", "ITI diploma", "ITI diploma"),
    ("age", "32 years", "32"),
    ("location", "kolkata", "Kolkata"),
    ("pastJobs", "  electrician for 5 years ", "electrician for 5 years"),
]


async def _intent(client, **body):
    resp = await client.post("/api/v1/session/intents", json=body)
    assert resp.status_code == 200, resp.text
    return resp.json()


async def test_full_job_seeker_flow(async_client, live_controller, mock_sink):
    await _intent(async_client, type="select_role", role="jobseeker")
    state = await _intent(async_client, type="select_language", language_code="bn-IN")
    assert state["total_questions"] == 5

    for index, (key, typed, _canonical) in enumerate(JOB_SEEKER_ANSWERS):
        state = await _intent(async_client, type="submit_text", text=typed)
        assert state["pending"]["field_key"] == key
        state = await _intent(async_client, type="confirm", field_key=key)
        assert key in state["answers"]
        if index < len(JOB_SEEKER_ANSWERS) - 1:
            assert state["phase"] == "awaiting_input"

    assert state["phase"] == "complete"
    assert state["current_question"] is None
    await live_controller.wait_for_persistence()

    expected = {key: canonical for key, _typed, canonical in JOB_SEEKER_ANSWERS}
    assert state["answers"] == expected
    mock_sink.append_answers.assert_awaited_once_with(Role.job_seeker, expected)


async def test_reject_then_retry(async_client):
    await _intent(async_client, type="select_role", role="employer")
    await _intent(async_client, type="select_language", language_code="hi-IN")

    await _intent(async_client, type="submit_text", text="wrong company")
    state = await _intent(async_client, type="reject")
    assert state["phase"] == "awaiting_input"
    assert state["current_question"]["key"] == "companyName"
    assert state["answers"] == {}

    await _intent(async_client, type="submit_text", text="Acme Traders")
    state = await _intent(async_client, type="confirm")
    assert state["answers"] == {"companyName": "Acme Traders"}


async def test_completion_survives_sink_failure(async_client, live_controller, mock_sink):
    mock_sink.append_answers.side_effect = PersistenceFailedError()
    await _intent(async_client, type="select_role", role="jobseeker")
    await _intent(async_client, type="select_language", language_code="en-IN")
    for _key, typed, _canonical in JOB_SEEKER_ANSWERS:
        await _intent(async_client, type="submit_text", text=typed)
        state = await _intent(async_client, type="confirm")

    await live_controller.wait_for_persistence()
    assert state["phase"] == "complete"
    resp = await async_client.get("/api/v1/session")
    assert resp.json()["phase"] == "complete"


async def test_reset_returns_to_role_selection(async_client):
    await _intent(async_client, type="select_role", role="jobseeker")
    await _intent(async_client, type="select_language", language_code="hi-IN")
    await _intent(async_client, type="submit_text", text="john")
    await _intent(async_client, type="confirm")

    state = await _intent(async_client, type="reset")
    assert state["phase"] == "role_selection"
    assert state["answers"] == {}
