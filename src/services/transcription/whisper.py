"""Whisper STT implementation using faster-whisper.

Offline alternative to the cloud recognizer. faster-whisper decodes the
webm/opus clip itself (via PyAV), so the clip bytes are handed over as an
in-memory file. The WhisperModel is loaded lazily and cached at module level
to avoid repeated initialization overhead.
"""

import asyncio
import io
import logging

from faster_whisper import WhisperModel

from src.core.config import get_settings
from src.core.exceptions import RecognitionFailedError, ServiceUnavailableError
from src.core.models import Clip
from src.core.utils import base_language
from src.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)

_model_cache: WhisperModel | None = None


class WhisperSTT(BaseSTT):
    """Speech-to-text provider using faster-whisper (CTranslate2).

    Args:
        model_size: Whisper model size (tiny, base, small, medium, large-v3).
        device: Computation device ("cpu" or "cuda").
        compute_type: CTranslate2 compute type ("int8", "float16", etc.).
        settings: Optional Settings instance (defaults to get_settings()).
    """

    def __init__(
        self,
        model_size: str | None = None,
        device: str = "cpu",
        compute_type: str = "int8",
        settings=None,
    ) -> None:
        self._settings = settings or get_settings()
        self._model_size = model_size or self._settings.whisper_model
        self._device = device
        self._compute_type = compute_type

    def _get_model(self) -> WhisperModel:
        """Return the cached WhisperModel, loading it on first use."""
        global _model_cache  # noqa: PLW0603
        if _model_cache is None:
            logger.info(
                "Loading Whisper model: %s (device=%s, compute=%s)",
                self._model_size,
                self._device,
                self._compute_type,
            )
            _model_cache = WhisperModel(
                self._model_size,
                device=self._device,
                compute_type=self._compute_type,
            )
        return _model_cache

    def _run_transcription(self, clip: Clip, language: str) -> list:
        """Run synchronous transcription (CPU-bound).

        Must be called via asyncio.to_thread(). The segment iterator is
        materialized into a list inside this function to avoid CTranslate2
        thread-safety issues.
        """
        model = self._get_model()
        segments_iter, _info = model.transcribe(
            io.BytesIO(clip.data),
            language=language,
            beam_size=5,
            vad_filter=True,
        )
        return list(segments_iter)

    async def transcribe(self, clip: Clip, language_code: str) -> str:
        try:
            segments = await asyncio.to_thread(
                self._run_transcription, clip, base_language(language_code)
            )
        except Exception as exc:
            raise ServiceUnavailableError(detail=f"Whisper transcription failed: {exc}") from exc

        transcript = " ".join(seg.text.strip() for seg in segments if seg.text.strip())
        if not transcript:
            raise RecognitionFailedError()
        return transcript
