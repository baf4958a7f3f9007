"""Google Cloud Text-to-Speech implementation (MP3 output)."""

import asyncio
import logging

from google.cloud import texttospeech

from src.core.config import get_settings
from src.core.exceptions import SpeechSynthesisError
from src.services.google_auth import load_credentials
from src.services.tts.base import BaseTTS

logger = logging.getLogger(__name__)


class GoogleTTS(BaseTTS):
    """Text-to-speech provider backed by Google Cloud Text-to-Speech."""

    def __init__(self, client=None, settings=None) -> None:
        self._settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> texttospeech.TextToSpeechClient:
        if self._client is None:
            self._client = texttospeech.TextToSpeechClient(
                credentials=load_credentials(settings=self._settings)
            )
        return self._client

    def _voice_for(self, language_code: str) -> texttospeech.VoiceSelectionParams:
        # A named voice only exists for its own locale; otherwise let Google pick
        voice_name = self._settings.tts_voice_name
        if voice_name and voice_name.lower().startswith(language_code.lower()):
            return texttospeech.VoiceSelectionParams(language_code=language_code, name=voice_name)
        return texttospeech.VoiceSelectionParams(language_code=language_code)

    def _run_synthesis(self, text: str, language_code: str) -> bytes:
        response = self._get_client().synthesize_speech(
            input=texttospeech.SynthesisInput(text=text),
            voice=self._voice_for(language_code),
            audio_config=texttospeech.AudioConfig(
                audio_encoding=texttospeech.AudioEncoding.MP3,
                pitch=0,
                speaking_rate=1,
            ),
        )
        return response.audio_content

    async def speak(self, text: str, language_code: str) -> bytes:
        try:
            audio = await asyncio.to_thread(self._run_synthesis, text, language_code)
        except Exception as exc:
            logger.error("Text-to-speech failed (%s): %s", language_code, exc)
            raise SpeechSynthesisError(detail=f"Failed to generate speech: {exc}") from exc
        if not audio:
            raise SpeechSynthesisError(detail="No audio content generated")
        return audio
