"""
Abstract base class for text-to-speech providers.

Used by the presentation layer to read a question aloud; the question flow
controller never calls it.
"""

from abc import ABC, abstractmethod


class BaseTTS(ABC):
    """Interface that every TTS provider must implement."""

    media_type: str = "audio/mpeg"

    @abstractmethod
    async def speak(self, text: str, language_code: str) -> bytes:
        """Synthesize ``text`` in the given locale.

        Returns:
            Encoded audio bytes of type ``media_type``.

        Raises:
            SpeechSynthesisError: If synthesis fails or returns no audio.
        """
