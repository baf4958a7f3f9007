"""
Abstract base class for Speech-to-Text providers.

All STT implementations (Google Cloud, local Whisper) must implement
this interface, enabling provider-agnostic transcription in the flow controller.
"""

from abc import ABC, abstractmethod

from src.core.models import Clip


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe(self, clip: Clip, language_code: str) -> str:
        """Transcribe one recorded clip to text.

        Args:
            clip: The recorded audio (opus in webm, 48 kHz).
            language_code: Regional locale hint, e.g. ``"hi-IN"``.

        Returns:
            The transcript, segments joined with single spaces.

        Raises:
            RecognitionFailedError: The service produced no usable alternative.
            ServiceUnavailableError: The service could not be reached or failed.
        """
