"""Question flow controller.

Drives one intake session through role selection, language selection and
the per-field capture -> transcribe -> translate -> normalize -> confirm loop.
``phase`` is the single authoritative state; the presentation layer reads
``state()`` and sends intents through ``dispatch()``.

A module-level singleton ensures only one session is live at a time.

Usage::

    from src.services import orchestrator

    controller = orchestrator.get_controller()
    await controller.dispatch(SelectRoleIntent(role=Role.job_seeker))
    await controller.dispatch(SelectLanguageIntent(language_code="hi-IN"))
"""

import asyncio
import logging
from dataclasses import dataclass

from src.core.config import Settings, get_settings
from src.core.exceptions import (
    DeviceUnavailableError,
    EmptyRecordingError,
    InvalidTransitionError,
    PersistenceFailedError,
    TranscriptionError,
    TranslationFailedError,
)
from src.core.models import (
    Clip,
    ConfirmIntent,
    FlowPolicy,
    PendingAnswer,
    PendingAnswerView,
    Question,
    QuestionView,
    RejectIntent,
    ResetIntent,
    Role,
    SelectLanguageIntent,
    SelectRoleIntent,
    SessionPhase,
    SessionState,
    StartRecordingIntent,
    StopRecordingIntent,
    SubmitTextIntent,
)
from src.core.questions import CANONICAL_LANGUAGE, get_language, questions_for
from src.services.answer_store import AnswerStore
from src.services.audio import AudioCaptureSession, BrowserAudioDevice
from src.services.normalizer import FieldCategory, category_for, normalize
from src.services.sink import BaseAnswerSink, create_sink
from src.services.transcription import BaseSTT, create_stt
from src.services.translation import BaseTranslator, create_translator

logger = logging.getLogger(__name__)

LABEL_FALLBACK_MESSAGE = "Some questions could not be translated and are shown in English"
ANSWER_FALLBACK_MESSAGE = "Translation is unavailable; your answer was kept as spoken"


@dataclass
class IntakeSession:
    """Business state of the live questionnaire."""

    role: Role
    questions: list[Question]
    answers: AnswerStore
    ui_language: str | None = None
    current_index: int = 0

    @property
    def is_last_field(self) -> bool:
        return self.current_index == len(self.questions) - 1


class QuestionFlowController:
    """State machine for one intake session.

    Args:
        capture: Capture session owning the microphone.
        stt: Speech-to-text provider.
        translator: Translation provider (UI language <-> English).
        sink: Receives the answer snapshot once the flow completes.
        policy: Variant switches (confirmation step, batch label translation).
    """

    def __init__(
        self,
        capture: AudioCaptureSession,
        stt: BaseSTT,
        translator: BaseTranslator,
        sink: BaseAnswerSink | None = None,
        policy: FlowPolicy | None = None,
    ) -> None:
        self._capture = capture
        self._stt = stt
        self._translator = translator
        self._sink = sink
        self._policy = policy or FlowPolicy()

        self._session: IntakeSession | None = None
        self._phase = SessionPhase.role_selection
        self._pending: PendingAnswer | None = None
        self._error: str | None = None

        # Bumped on every teardown; async work started under an older
        # generation must not touch the current session.
        self._generation = 0
        self._task: asyncio.Task | None = None
        self._persist_task: asyncio.Task | None = None

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def policy(self) -> FlowPolicy:
        return self._policy

    @property
    def pending(self) -> PendingAnswer | None:
        return self._pending

    @property
    def current_index(self) -> int:
        return self._session.current_index if self._session else 0

    @property
    def answers(self) -> dict[str, str]:
        """Snapshot of the committed answers (a copy)."""
        return self._session.answers.snapshot() if self._session else {}

    @property
    def current_question(self) -> Question | None:
        session = self._session
        if session is None or session.current_index >= len(session.questions):
            return None
        return session.questions[session.current_index]

    def state(self) -> SessionState:
        """Build the snapshot handed to the presentation layer."""
        session = self._session
        question = self.current_question
        pending = self._pending
        return SessionState(
            phase=self._phase,
            role=session.role if session else None,
            ui_language=session.ui_language if session else None,
            current_index=self.current_index,
            total_questions=len(session.questions) if session else 0,
            current_question=_question_view(question) if question else None,
            questions=[_question_view(q) for q in session.questions] if session else [],
            pending=(
                PendingAnswerView(field_key=pending.field_key, ui_text=pending.ui_text)
                if pending
                else None
            ),
            answers=self.answers,
            error=self._error,
        )

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    async def dispatch(self, intent) -> SessionState:
        """Apply one intent and return the resulting state.

        Raises:
            InvalidTransitionError: If the intent is not valid in the current phase.
            DeviceUnavailableError: If recording cannot start.
            UnsupportedLanguageError: If the selected language is unknown.
        """
        if isinstance(intent, SelectRoleIntent):
            await self.select_role(intent.role)
        elif isinstance(intent, SelectLanguageIntent):
            await self.select_language(intent.language_code)
        elif isinstance(intent, StartRecordingIntent):
            await self.start_recording()
        elif isinstance(intent, StopRecordingIntent):
            await self.stop_recording()
        elif isinstance(intent, SubmitTextIntent):
            await self.submit_text(intent.text)
        elif isinstance(intent, ConfirmIntent):
            await self.confirm(intent.field_key)
        elif isinstance(intent, RejectIntent):
            await self.reject()
        elif isinstance(intent, ResetIntent):
            await self.reset()
        else:
            raise ValueError(f"Unknown intent: {intent!r}")
        return self.state()

    def _require(self, intent: str, *phases: SessionPhase) -> IntakeSession:
        if self._phase not in phases or self._session is None:
            raise InvalidTransitionError(intent, self._phase.value)
        return self._session

    async def select_role(self, role: Role) -> None:
        """Start a fresh session for ``role``, tearing down any previous one."""
        await self._teardown()
        questions = questions_for(role)
        self._session = IntakeSession(
            role=role,
            questions=questions,
            answers=AnswerStore([q.key for q in questions]),
        )
        self._error = None
        self._phase = SessionPhase.language_selection
        logger.info("Session started for role=%s (%d questions)", role.value, len(questions))

    async def select_language(self, language_code: str) -> None:
        """Bind the UI language and translate question labels into it.

        Allowed before the first question and again while waiting for input;
        answers and position are kept on a change of language.
        """
        session = self._require(
            "select_language", SessionPhase.language_selection, SessionPhase.awaiting_input
        )
        language = get_language(language_code)
        generation = self._generation

        session.ui_language = language.code
        self._error = None
        for question in session.questions:
            question.translated_label = ""

        if self._policy.batch_translate_questions:
            await self._translate_labels(session.questions, language.code)
        elif self.current_question is not None:
            await self._translate_labels([self.current_question], language.code)

        if generation != self._generation:
            return
        if self._phase == SessionPhase.language_selection:
            self._phase = SessionPhase.awaiting_input
        logger.info("UI language set to %s", language.code)

    async def start_recording(self) -> None:
        """Begin capturing audio for the current field.

        Raises:
            DeviceUnavailableError: No microphone; the phase stays awaiting_input.
        """
        self._require("start_recording", SessionPhase.awaiting_input)
        self._error = None
        try:
            await self._capture.start()
        except DeviceUnavailableError as exc:
            self._error = exc.detail
            raise
        self._phase = SessionPhase.recording

    async def stop_recording(self) -> None:
        """Stop capturing and run the answer pipeline on the recorded clip."""
        self._require("stop_recording", SessionPhase.recording)
        field_key = self.current_question.key
        generation = self._generation
        self._phase = SessionPhase.processing

        try:
            clip = await self._capture.stop()
        except EmptyRecordingError as exc:
            if generation == self._generation:
                self._fail(exc.detail)
            return

        if generation != self._generation:
            return
        await self._process(field_key, generation, clip=clip)

    async def submit_text(self, text: str) -> None:
        """Answer the current field with typed text instead of speech."""
        self._require("submit_text", SessionPhase.awaiting_input)
        field_key = self.current_question.key
        self._error = None
        self._phase = SessionPhase.processing
        await self._process(field_key, self._generation, typed_text=text)

    async def confirm(self, field_key: str | None = None) -> None:
        """Commit the pending answer and advance.

        A confirm with nothing pending (e.g. a double submit) or aimed at a
        different field than the pending one is ignored.
        """
        pending = self._pending
        if self._phase != SessionPhase.awaiting_confirmation or pending is None:
            logger.warning("Ignoring confirm for %s: no pending answer", field_key)
            return
        if field_key is not None and field_key != pending.field_key:
            logger.warning(
                "Ignoring confirm for %s: pending answer is for %s", field_key, pending.field_key
            )
            return
        # Claim the pending answer before any await so a racing confirm sees nothing
        self._pending = None
        await self._commit(pending)

    async def reject(self) -> None:
        """Discard the pending answer and stay on the same field."""
        if self._phase != SessionPhase.awaiting_confirmation or self._pending is None:
            logger.warning("Ignoring reject: no pending answer")
            return
        logger.info("Answer for %s rejected", self._pending.field_key)
        self._pending = None
        self._phase = SessionPhase.awaiting_input

    async def reset(self) -> None:
        """Abandon the session and return to role selection."""
        await self._teardown()
        self._session = None
        self._error = None
        self._phase = SessionPhase.role_selection

    async def shutdown(self) -> None:
        """Tear down the session and wait for an outstanding sheet append."""
        await self._teardown()
        await self.wait_for_persistence()

    async def wait_for_persistence(self) -> None:
        """Wait until the completion snapshot has been handed to the sink."""
        if self._persist_task is not None:
            await asyncio.wait({self._persist_task})

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def _process(
        self,
        field_key: str,
        generation: int,
        clip: Clip | None = None,
        typed_text: str | None = None,
    ) -> None:
        """Run the pipeline as a cancellable task and apply its outcome."""
        task = asyncio.create_task(self._run_pipeline(field_key, clip, typed_text))
        self._task = task
        try:
            pending = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                logger.info("Discarded in-flight processing for %s", field_key)
                return
            self._fail("Processing was cancelled")
            raise
        except TranscriptionError as exc:
            if generation == self._generation:
                self._fail(exc.detail)
            return
        except Exception:
            logger.exception("Unexpected error processing answer for %s", field_key)
            if generation == self._generation:
                self._fail("Speech processing failed")
            return
        finally:
            if self._task is task:
                self._task = None

        if generation != self._generation:
            return
        if self._policy.confirmation_required:
            self._pending = pending
            self._phase = SessionPhase.awaiting_confirmation
            logger.info("Answer for %s awaiting confirmation", field_key)
        else:
            await self._commit(pending)

    async def _run_pipeline(
        self, field_key: str, clip: Clip | None, typed_text: str | None
    ) -> PendingAnswer:
        language = self._session.ui_language or CANONICAL_LANGUAGE
        if clip is not None:
            raw = await self._stt.transcribe(clip, language)
        else:
            raw = typed_text or ""

        category = category_for(field_key)
        if category == FieldCategory.proper_noun and not self._policy.translate_proper_nouns:
            english = raw
        else:
            english = await self._to_english(raw, language)

        return PendingAnswer(
            field_key=field_key,
            raw_transcript=raw,
            canonical_text=normalize(english, category),
            ui_text=raw.strip(),
        )

    async def _to_english(self, text: str, language: str) -> str:
        try:
            return await self._translator.translate(text, language, CANONICAL_LANGUAGE)
        except TranslationFailedError as exc:
            logger.warning("Keeping untranslated answer: %s", exc.detail)
            self._error = ANSWER_FALLBACK_MESSAGE
            return text

    async def _commit(self, pending: PendingAnswer) -> None:
        session = self._session
        session.answers.commit(pending.field_key, pending.canonical_text)
        logger.info("Committed answer for %s", pending.field_key)

        if session.is_last_field:
            session.current_index = len(session.questions)
            self._phase = SessionPhase.complete
            logger.info("Questionnaire complete (%d answers)", len(session.answers))
            self._schedule_persistence(session)
            return

        session.current_index += 1
        self._phase = SessionPhase.awaiting_input
        question = self.current_question
        if (
            not self._policy.batch_translate_questions
            and session.ui_language
            and not question.translated_label
        ):
            await self._translate_labels([question], session.ui_language)

    async def _translate_labels(self, questions: list[Question], language_code: str) -> None:
        """Translate labels concurrently; a failed label keeps its English text."""
        results = await asyncio.gather(
            *(
                self._translator.translate(q.label, CANONICAL_LANGUAGE, language_code)
                for q in questions
            ),
            return_exceptions=True,
        )
        failed = 0
        for question, result in zip(questions, results, strict=True):
            if isinstance(result, TranslationFailedError):
                failed += 1
                question.translated_label = ""
            elif isinstance(result, BaseException):
                raise result
            else:
                question.translated_label = result
        if failed:
            logger.warning("%d of %d question labels left in English", failed, len(questions))
            self._error = LABEL_FALLBACK_MESSAGE

    def _fail(self, message: str) -> None:
        """Return to awaiting input for the same field with a message."""
        self._pending = None
        self._error = message
        self._phase = SessionPhase.awaiting_input
        logger.info("Processing failed: %s", message)

    # ------------------------------------------------------------------
    # Completion and teardown
    # ------------------------------------------------------------------

    def _schedule_persistence(self, session: IntakeSession) -> None:
        if self._sink is None:
            logger.info("No answer sink configured; skipping append")
            return
        snapshot = session.answers.snapshot()
        self._persist_task = asyncio.create_task(self._persist(session.role, snapshot))

    async def _persist(self, role: Role, snapshot: dict[str, str]) -> None:
        """Append the final answers. Failures are logged and never block the flow."""
        try:
            await self._sink.append_answers(role, snapshot)
        except PersistenceFailedError as exc:
            logger.error("Failed to append %s answers: %s", role.value, exc.detail)
        except Exception:
            logger.exception("Unexpected error appending %s answers", role.value)

    async def _teardown(self) -> None:
        """Cancel in-flight work and release the capture device."""
        self._generation += 1
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})
        self._pending = None
        await self._capture.release()


def _question_view(question: Question) -> QuestionView:
    return QuestionView(
        key=question.key,
        label=question.label,
        display_label=question.display_label,
    )


# ---------------------------------------------------------------------------
# Module-level singleton management
# ---------------------------------------------------------------------------

_audio_device: BrowserAudioDevice | None = None
_controller: QuestionFlowController | None = None


def get_audio_device() -> BrowserAudioDevice:
    """Return the process-wide browser microphone handle."""
    global _audio_device
    if _audio_device is None:
        _audio_device = BrowserAudioDevice()
    return _audio_device


def create_controller(settings: Settings | None = None) -> QuestionFlowController:
    """Wire a controller from configuration."""
    settings = settings or get_settings()
    capture = AudioCaptureSession(
        get_audio_device(),
        flush_delay=settings.capture_flush_delay,
        mime_type=settings.capture_mime_type,
    )
    policy = FlowPolicy(
        confirmation_required=settings.confirmation_required,
        batch_translate_questions=settings.batch_translate_questions,
        translate_proper_nouns=settings.translate_proper_nouns,
    )
    return QuestionFlowController(
        capture=capture,
        stt=create_stt(provider=settings.stt_provider),
        translator=create_translator(provider=settings.translation_provider),
        sink=create_sink("sheets"),
        policy=policy,
    )


def get_controller() -> QuestionFlowController:
    """Return the live controller, creating it on first use."""
    global _controller
    if _controller is None:
        _controller = create_controller()
        logger.info("Created question flow controller")
    return _controller


async def cleanup() -> None:
    """Shut down the live controller (called during app shutdown)."""
    global _controller
    if _controller is None:
        return
    controller = _controller
    _controller = None
    await controller.shutdown()
