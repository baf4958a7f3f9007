"""Shared pytest fixtures for the voice intake test suite.

Provides mock STT / translation / sink providers, a scriptable capture
device, and a ready-wired question flow controller.
"""

from unittest.mock import AsyncMock

import pytest

from src.core.models import Clip, FlowPolicy
from src.services.audio.capture import AudioCaptureSession
from src.services.audio.device import AudioDevice

# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


class FakeAudioDevice(AudioDevice):
    """Scriptable stand-in for the browser microphone.

    ``final_chunk`` is delivered when a stop is requested, the way the
    browser's MediaRecorder flushes its last ``dataavailable`` event.
    """

    def __init__(self, available: bool = True, final_chunk: bytes = b"") -> None:
        self.available = available
        self.final_chunk = final_chunk
        self.opened = False
        self.closed = 0
        self.stop_requests = 0
        self._on_chunk = None

    async def open(self) -> None:
        from src.core.exceptions import DeviceUnavailableError

        if not self.available:
            raise DeviceUnavailableError(detail="Microphone access denied")
        self.opened = True

    async def start(self, on_chunk) -> None:
        self._on_chunk = on_chunk

    def emit(self, data: bytes) -> None:
        """Simulate a periodic ``dataavailable`` chunk."""
        if self._on_chunk is not None:
            self._on_chunk(data)

    async def request_stop(self) -> None:
        self.stop_requests += 1
        if self.final_chunk:
            self.emit(self.final_chunk)

    async def close(self) -> None:
        self.opened = False
        self.closed += 1
        self._on_chunk = None


@pytest.fixture
def device_factory():
    """Build FakeAudioDevice instances with custom availability."""
    return FakeAudioDevice


@pytest.fixture
def fake_device():
    """A capture device that is available and flushes one final chunk."""
    return FakeAudioDevice(final_chunk=b"final-chunk")


@pytest.fixture
def capture(fake_device):
    """AudioCaptureSession over the fake device with no flush delay."""
    return AudioCaptureSession(fake_device, flush_delay=0.0)


@pytest.fixture
def sample_clip():
    """A small opaque webm clip."""
    return Clip(data=b"\x1aE\xdf\xa3webm-opus-bytes", mime_type="audio/webm")


# ---------------------------------------------------------------------------
# Provider Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_stt():
    """Mock STT provider returning a fixed Hindi transcript."""
    from src.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = "राहुल शर्मा"
    return stt


@pytest.fixture
def mock_translator():
    """Mock translator that tags labels and maps answers to English.

    English -> UI translations become ``"[<lang>] <text>"``; UI -> English
    translations use ``english_answers`` when the text is known there.
    """
    from src.services.translation.base import BaseTranslator

    translator = AsyncMock(spec=BaseTranslator)
    translator.english_answers = {"राहुल शर्मा": "rahul SHARMA"}

    async def _translate(text, source_language, target_language):
        if target_language.startswith("en"):
            return translator.english_answers.get(text, text)
        return f"[{target_language}] {text}"

    translator.translate.side_effect = _translate
    return translator


@pytest.fixture
def mock_sink():
    """Mock answer sink."""
    from src.services.sink.base import BaseAnswerSink

    return AsyncMock(spec=BaseAnswerSink)


@pytest.fixture
def make_controller(capture, mock_stt, mock_translator, mock_sink):
    """Factory building a QuestionFlowController from the mock providers."""
    from src.services.orchestrator import QuestionFlowController

    def _make(policy: FlowPolicy | None = None, **overrides):
        return QuestionFlowController(
            capture=overrides.get("capture", capture),
            stt=overrides.get("stt", mock_stt),
            translator=overrides.get("translator", mock_translator),
            sink=overrides.get("sink", mock_sink),
            policy=policy,
        )

    return _make


@pytest.fixture
def controller(make_controller):
    """Controller with the default policy (confirmation + batch labels)."""
    return make_controller()


# ---------------------------------------------------------------------------
# Singleton reset
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_orchestrator():
    """Clear the process-wide device and controller around every test."""
    from src.services import orchestrator

    orchestrator._controller = None
    orchestrator._audio_device = None
    yield
    orchestrator._controller = None
    orchestrator._audio_device = None
