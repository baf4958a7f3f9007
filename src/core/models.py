"""
Pydantic v2 models shared by the intake pipeline and the API layer.

Session data (Question, Clip, PendingAnswer), the flow policy, the intent
commands accepted by the controller, and the read-only state snapshot.
"""

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, RootModel

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class Role(StrEnum):
    """Who is filling in the form. Values are the sheet role tags."""

    job_seeker = "jobseeker"
    employer = "employer"


class SessionPhase(StrEnum):
    """Authoritative phase of the question flow state machine."""

    role_selection = "role_selection"
    language_selection = "language_selection"
    awaiting_input = "awaiting_input"
    recording = "recording"
    processing = "processing"
    awaiting_confirmation = "awaiting_confirmation"
    complete = "complete"


class Language(BaseModel):
    """A supported UI language."""

    code: str
    name: str
    label: str


class Question(BaseModel):
    """One field of a question set."""

    key: str
    label: str
    translated_label: str = ""

    @property
    def display_label(self) -> str:
        """Label in the UI language, falling back to English."""
        return self.translated_label or self.label


class Clip(BaseModel):
    """One recording cycle's audio, as produced by the browser."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str = "audio/webm"


class PendingAnswer(BaseModel):
    """An unconfirmed answer held between processing and confirmation."""

    model_config = ConfigDict(frozen=True)

    field_key: str
    raw_transcript: str
    canonical_text: str
    ui_text: str


class FlowPolicy(BaseModel):
    """Switches that select between the questionnaire variants."""

    confirmation_required: bool = True
    batch_translate_questions: bool = True
    translate_proper_nouns: bool = True


# ---------------------------------------------------------------------------
# Intents (POST /session/intents)
# ---------------------------------------------------------------------------


class SelectRoleIntent(BaseModel):
    type: Literal["select_role"] = "select_role"
    role: Role


class SelectLanguageIntent(BaseModel):
    type: Literal["select_language"] = "select_language"
    language_code: str


class StartRecordingIntent(BaseModel):
    type: Literal["start_recording"] = "start_recording"


class StopRecordingIntent(BaseModel):
    type: Literal["stop_recording"] = "stop_recording"


class SubmitTextIntent(BaseModel):
    """Typed (non-voice) answer for the current field."""

    type: Literal["submit_text"] = "submit_text"
    text: str = ""


class ConfirmIntent(BaseModel):
    """Accept the pending answer. ``field_key`` guards against stale clicks."""

    type: Literal["confirm"] = "confirm"
    field_key: str | None = None


class RejectIntent(BaseModel):
    type: Literal["reject"] = "reject"


class ResetIntent(BaseModel):
    type: Literal["reset"] = "reset"


Intent = Annotated[
    SelectRoleIntent
    | SelectLanguageIntent
    | StartRecordingIntent
    | StopRecordingIntent
    | SubmitTextIntent
    | ConfirmIntent
    | RejectIntent
    | ResetIntent,
    Field(discriminator="type"),
]


class IntentRequest(RootModel[Intent]):
    """Request body wrapper for a single intent."""


# ---------------------------------------------------------------------------
# Read-only state snapshot
# ---------------------------------------------------------------------------


class QuestionView(BaseModel):
    """The active question as shown to the user."""

    key: str
    label: str
    display_label: str


class PendingAnswerView(BaseModel):
    """What the user is asked to confirm: the literal utterance."""

    field_key: str
    ui_text: str


class SessionState(BaseModel):
    """Snapshot of the controller exposed to the presentation layer."""

    phase: SessionPhase
    role: Role | None = None
    ui_language: str | None = None
    current_index: int = 0
    total_questions: int = 0
    current_question: QuestionView | None = None
    questions: list[QuestionView] = Field(default_factory=list)
    pending: PendingAnswerView | None = None
    answers: dict[str, str] = Field(default_factory=dict)
    error: str | None = None


# ---------------------------------------------------------------------------
# Text-to-speech
# ---------------------------------------------------------------------------


class SpeakRequest(BaseModel):
    """POST /speak request body."""

    text: str = Field(min_length=1, max_length=2000)
    language_code: str | None = None


# ---------------------------------------------------------------------------
# WebSocket
# ---------------------------------------------------------------------------


class WebSocketMessageType(StrEnum):
    """Discriminator for messages sent over the audio WebSocket."""

    connected = "connected"
    start = "start"
    stop = "stop"
    error = "error"
    release = "release"


class WebSocketMessage(BaseModel):
    """JSON message sent from server to client over WebSocket."""

    type: WebSocketMessageType
    data: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    detail: str
    code: str
    timestamp: str
