"""Shared utility functions for the voice intake service."""


def base_language(language_code: str) -> str:
    """Reduce a regional locale to its base language ("hi-IN" -> "hi")."""
    return language_code.strip().split("-")[0].lower()


def same_language(first: str, second: str) -> bool:
    """True when two language codes share a base language."""
    return base_language(first) == base_language(second)
