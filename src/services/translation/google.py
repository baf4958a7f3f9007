"""Google Cloud Translation (v2 basic) implementation."""

import asyncio
import logging

from google.cloud import translate_v2

from src.core.config import get_settings
from src.core.exceptions import TranslationFailedError
from src.services.google_auth import load_credentials
from src.services.translation.base import BaseTranslator

logger = logging.getLogger(__name__)


class GoogleTranslator(BaseTranslator):
    """Translation provider backed by Google Cloud Translation v2.

    Single request per call, no retries: a failure surfaces immediately as
    ``TranslationFailedError`` and the caller decides how to degrade.
    """

    def __init__(self, client=None, settings=None) -> None:
        self._settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> translate_v2.Client:
        if self._client is None:
            self._client = translate_v2.Client(
                credentials=load_credentials(settings=self._settings)
            )
        return self._client

    def _run_translation(self, text: str, source_language: str, target_language: str) -> str:
        result = self._get_client().translate(
            text,
            source_language=source_language,
            target_language=target_language,
            format_="text",
        )
        return result["translatedText"]

    async def _translate(self, text: str, source_language: str, target_language: str) -> str:
        logger.debug("Translating %s -> %s: %r", source_language, target_language, text)
        try:
            translated = await asyncio.to_thread(
                self._run_translation, text, source_language, target_language
            )
        except Exception as exc:
            logger.warning(
                "Translation %s -> %s failed: %s", source_language, target_language, exc
            )
            raise TranslationFailedError(detail=f"Translation failed: {exc}") from exc
        return translated
