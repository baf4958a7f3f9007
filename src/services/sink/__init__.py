"""
Sink module - Destinations for completed answer snapshots.
"""

from .base import BaseAnswerSink

__all__ = ["BaseAnswerSink", "create_sink"]


def create_sink(provider: str = "sheets", **kwargs) -> BaseAnswerSink:
    """Factory function to create an answer sink.

    Raises:
        ValueError: If provider is unknown
    """
    if provider == "sheets":
        from .sheets import GoogleSheetsSink
        return GoogleSheetsSink(**kwargs)
    raise ValueError(f"Unknown answer sink: {provider}")
