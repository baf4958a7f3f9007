"""Google Cloud Speech-to-Text implementation.

Sends the whole clip in a single synchronous ``recognize`` request with the
browser's audio profile (opus in webm, 48 kHz). The blocking SDK call runs
in a worker thread.
"""

import asyncio
import logging

from google.api_core.exceptions import GoogleAPIError
from google.cloud import speech

from src.core.config import get_settings
from src.core.exceptions import RecognitionFailedError, ServiceUnavailableError
from src.core.models import Clip
from src.services.google_auth import load_credentials
from src.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


class GoogleSTT(BaseSTT):
    """Speech-to-text provider backed by Google Cloud Speech-to-Text v1.

    Args:
        client: Optional pre-built ``speech.SpeechClient`` (tests inject one).
        settings: Optional Settings instance (defaults to get_settings()).
    """

    def __init__(self, client=None, settings=None) -> None:
        self._settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> speech.SpeechClient:
        """Return the SpeechClient, creating it on first use."""
        if self._client is None:
            credentials = load_credentials(settings=self._settings)
            self._client = speech.SpeechClient(credentials=credentials)
        return self._client

    def _build_config(self, language_code: str) -> speech.RecognitionConfig:
        return speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding[self._settings.stt_encoding],
            sample_rate_hertz=self._settings.stt_sample_rate_hertz,
            language_code=language_code,
            model=self._settings.stt_model,
        )

    def _run_recognition(self, clip: Clip, language_code: str):
        """Run the synchronous recognize call. Must be called via asyncio.to_thread()."""
        return self._get_client().recognize(
            config=self._build_config(language_code),
            audio=speech.RecognitionAudio(content=clip.data),
        )

    @staticmethod
    def _join_best_alternatives(response) -> str:
        """Join the top alternative of every result, in segment order."""
        parts = [
            result.alternatives[0].transcript.strip()
            for result in response.results
            if result.alternatives
        ]
        return " ".join(part for part in parts if part)

    async def transcribe(self, clip: Clip, language_code: str) -> str:
        try:
            response = await asyncio.to_thread(self._run_recognition, clip, language_code)
        except GoogleAPIError as exc:
            logger.error("Google STT request failed: %s", exc)
            raise ServiceUnavailableError(detail=f"Speech recognition failed: {exc}") from exc
        except Exception as exc:
            logger.exception("Unexpected Google STT error")
            raise ServiceUnavailableError(detail=f"Speech recognition failed: {exc}") from exc

        transcript = self._join_best_alternatives(response)
        if not transcript:
            logger.info("Google STT returned no alternatives (language=%s)", language_code)
            raise RecognitionFailedError()
        logger.debug("Google STT transcript (%s): %s", language_code, transcript)
        return transcript
