"""
TTS module - Text-to-speech abstraction layer.
"""

from .base import BaseTTS

__all__ = ["BaseTTS", "create_tts"]


def create_tts(provider: str, **kwargs) -> BaseTTS:
    """Factory function to create a TTS provider.

    Raises:
        ValueError: If provider is unknown
    """
    if provider == "google":
        from .google import GoogleTTS
        return GoogleTTS(**kwargs)
    raise ValueError(f"Unknown TTS provider: {provider}")
