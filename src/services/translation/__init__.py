"""
Translation module - Text translation abstraction layer.
"""

from .base import BaseTranslator

__all__ = ["BaseTranslator", "create_translator"]


def create_translator(provider: str, **kwargs) -> BaseTranslator:
    """Factory function to create a translator based on provider.

    Raises:
        ValueError: If provider is unknown
    """
    if provider == "google":
        from .google import GoogleTranslator
        return GoogleTranslator(**kwargs)
    raise ValueError(f"Unknown translation provider: {provider}")
