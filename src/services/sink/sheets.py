"""Google Sheets answer sink.

Appends one row per completed session to the role's worksheet: an ISO-8601
timestamp followed by the role's fields in question order.
"""

import asyncio
import logging
from collections.abc import Mapping
from datetime import UTC, datetime

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from src.core.config import get_settings
from src.core.exceptions import PersistenceFailedError
from src.core.models import Role
from src.core.questions import questions_for
from src.services.google_auth import load_credentials
from src.services.sink.base import BaseAnswerSink

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def build_row(
    role: Role, answers: Mapping[str, str], timestamp: datetime | None = None
) -> list[str]:
    """Lay out a sheet row: timestamp, then every field of the role's question set."""
    stamp = (timestamp or datetime.now(UTC)).isoformat()
    return [stamp] + [answers.get(question.key, "") for question in questions_for(role)]


class GoogleSheetsSink(BaseAnswerSink):
    """Answer sink backed by the Google Sheets v4 ``values.append`` API."""

    def __init__(self, service=None, settings=None) -> None:
        self._settings = settings or get_settings()
        self._service = service

    def _get_service(self):
        if self._service is None:
            credentials = load_credentials(scopes=SCOPES, settings=self._settings)
            self._service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        return self._service

    def _range_for(self, role: Role) -> str:
        if role == Role.employer:
            return self._settings.employer_sheet_range
        return self._settings.jobseeker_sheet_range

    def _run_append(self, role: Role, row: list[str]) -> dict:
        return (
            self._get_service()
            .spreadsheets()
            .values()
            .append(
                spreadsheetId=self._settings.google_sheets_spreadsheet_id,
                range=self._range_for(role),
                valueInputOption="RAW",
                body={"values": [row]},
            )
            .execute()
        )

    async def append_answers(self, role: Role, answers: Mapping[str, str]) -> None:
        if not self._settings.google_sheets_spreadsheet_id:
            raise PersistenceFailedError(detail="Spreadsheet ID not configured")

        row = build_row(role, answers)
        try:
            response = await asyncio.to_thread(self._run_append, role, row)
        except HttpError as exc:
            raise PersistenceFailedError(detail=f"Google Sheets API error: {exc}") from exc
        except Exception as exc:
            raise PersistenceFailedError(detail=f"Failed to update spreadsheet: {exc}") from exc

        updated = response.get("updates", {}).get("updatedRows")
        logger.info(
            "Appended %s answers to %s (rows=%s)", role.value, self._range_for(role), updated
        )
