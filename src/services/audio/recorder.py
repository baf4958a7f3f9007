"""Chunk accumulation for one recording cycle.

Collects the encoded chunks the browser's MediaRecorder emits (every
200 ms plus a final flush) and joins them into a single clip.
"""

from src.core.models import Clip


class ClipAccumulator:
    """Accumulates encoded audio chunks for a single recording cycle.

    Chunks are opaque container fragments (opus in webm), so they are only
    concatenated in arrival order, never re-framed.
    """

    def __init__(self, mime_type: str = "audio/webm") -> None:
        self._mime_type = mime_type
        self._buffer = bytearray()
        self._chunk_count = 0

    @property
    def size_bytes(self) -> int:
        """Number of bytes accumulated so far."""
        return len(self._buffer)

    @property
    def chunk_count(self) -> int:
        """Number of non-empty chunks accumulated so far."""
        return self._chunk_count

    def add_bytes(self, data: bytes) -> None:
        """Append one chunk. Empty chunks are ignored."""
        if not data:
            return
        self._buffer.extend(data)
        self._chunk_count += 1

    def has_data(self) -> bool:
        return len(self._buffer) > 0

    def to_clip(self) -> Clip | None:
        """Join the accumulated chunks into a clip.

        Returns:
            The clip, or None if nothing was captured.
        """
        if not self.has_data():
            return None
        return Clip(data=bytes(self._buffer), mime_type=self._mime_type)

    def reset(self) -> None:
        """Clear the buffer."""
        self._buffer.clear()
        self._chunk_count = 0
