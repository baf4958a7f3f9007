"""
Abstract base class for translation providers.

Providers implement ``_translate``; the public ``translate`` short-circuits
requests that cannot change the text (blank input, same base language)
so they never cost a round trip.
"""

from abc import ABC, abstractmethod

from src.core.utils import base_language, same_language


class BaseTranslator(ABC):
    """Interface that every translation provider must implement."""

    async def translate(self, text: str, source_language: str, target_language: str) -> str:
        """Translate text between two languages.

        Args:
            text: Text to translate.
            source_language: Source locale or base code ("hi-IN", "hi").
            target_language: Target locale or base code.

        Returns:
            The translated text, or ``text`` unchanged for no-op requests.

        Raises:
            TranslationFailedError: If the provider call fails.
        """
        if not text.strip() or same_language(source_language, target_language):
            return text
        return await self._translate(
            text, base_language(source_language), base_language(target_language)
        )

    @abstractmethod
    async def _translate(self, text: str, source_language: str, target_language: str) -> str:
        """Perform one provider request with base language codes."""
