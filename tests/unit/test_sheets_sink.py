"""Tests for the Google Sheets answer sink (mocked Sheets service)."""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from googleapiclient.errors import HttpError

from src.core.config import Settings
from src.core.exceptions import PersistenceFailedError
from src.core.models import Role
from src.services.sink import create_sink
from src.services.sink.sheets import GoogleSheetsSink, build_row

JOB_SEEKER_ANSWERS = {
    "name": "John Smith",
    "education": "graduate",
    "age": "32",
    "location": "New Delhi",
    "pastJobs": "electrician",
}


@pytest.fixture
def service():
    service = MagicMock()
    append = service.spreadsheets.return_value.values.return_value.append
    append.return_value.execute.return_value = {"updates": {"updatedRows": 1}}
    return service


@pytest.fixture
def settings():
    return Settings(google_sheets_spreadsheet_id="sheet-123")


@pytest.fixture
def sink(service, settings):
    return GoogleSheetsSink(service=service, settings=settings)


def _append_kwargs(service):
    return service.spreadsheets.return_value.values.return_value.append.call_args.kwargs


class TestBuildRow:
    def test_timestamp_then_fields_in_question_order(self):
        stamp = datetime(2024, 5, 1, 10, 30, tzinfo=UTC)
        row = build_row(Role.job_seeker, JOB_SEEKER_ANSWERS, timestamp=stamp)
        assert row == [
            "2024-05-01T10:30:00+00:00",
            "John Smith",
            "graduate",
            "32",
            "New Delhi",
            "electrician",
        ]

    def test_missing_fields_are_blank(self):
        row = build_row(Role.employer, {"companyName": "Acme", "location": "Pune"})
        assert row[1:] == ["Acme", "", "", "", "Pune"]


class TestAppendAnswers:
    async def test_appends_to_role_range(self, sink, service):
        await sink.append_answers(Role.job_seeker, JOB_SEEKER_ANSWERS)

        kwargs = _append_kwargs(service)
        assert kwargs["spreadsheetId"] == "sheet-123"
        assert kwargs["range"] == "JobSeekers!A:F"
        assert kwargs["valueInputOption"] == "RAW"
        (row,) = kwargs["body"]["values"]
        assert row[1:] == list(JOB_SEEKER_ANSWERS.values())

    async def test_employer_range(self, sink, service):
        await sink.append_answers(Role.employer, {"companyName": "Acme"})
        assert _append_kwargs(service)["range"] == "Employers!A:F"

    async def test_missing_spreadsheet_id(self, service):
        sink = GoogleSheetsSink(service=service, settings=Settings(google_sheets_spreadsheet_id=""))
        with pytest.raises(PersistenceFailedError, match="Spreadsheet ID not configured"):
            await sink.append_answers(Role.job_seeker, JOB_SEEKER_ANSWERS)
        service.spreadsheets.assert_not_called()

    async def test_http_error(self, sink, service):
        append = service.spreadsheets.return_value.values.return_value.append
        append.return_value.execute.side_effect = HttpError(
            SimpleNamespace(status=403, reason="Forbidden"), b"{}"
        )
        with pytest.raises(PersistenceFailedError, match="Google Sheets API error"):
            await sink.append_answers(Role.job_seeker, JOB_SEEKER_ANSWERS)

    async def test_network_error(self, sink, service):
        append = service.spreadsheets.return_value.values.return_value.append
        append.return_value.execute.side_effect = TimeoutError("timed out")
        with pytest.raises(PersistenceFailedError):
            await sink.append_answers(Role.job_seeker, JOB_SEEKER_ANSWERS)


def test_create_sink_unknown_provider():
    with pytest.raises(ValueError):
        create_sink("airtable")
