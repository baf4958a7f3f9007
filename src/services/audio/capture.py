"""Audio capture session.

Owns the capture device for the lifetime of a questionnaire and turns each
start/stop cycle into exactly one ``Clip``. The chunk accumulator is cleared
on every ``stop()`` (success or failure) and on ``abort()``, so a following
``start()`` never sees audio from an earlier cycle.
"""

import asyncio
import logging

from src.core.exceptions import (
    DeviceUnavailableError,
    EmptyRecordingError,
    RecordingAlreadyActiveError,
)
from src.core.models import Clip
from src.services.audio.device import AudioDevice
from src.services.audio.recorder import ClipAccumulator

logger = logging.getLogger(__name__)


class AudioCaptureSession:
    """Scoped owner of a capture device producing one clip per cycle.

    Usable as an async context manager: the device is acquired on enter and
    released on exit, whatever state the recording was in.

    Args:
        device: The capture device to drive.
        flush_delay: Seconds to wait after requesting a stop so the final
            buffered chunk can arrive before the clip is assembled.
        mime_type: Container type of the recorded chunks.
    """

    def __init__(
        self,
        device: AudioDevice,
        flush_delay: float = 0.1,
        mime_type: str = "audio/webm",
    ) -> None:
        self._device = device
        self._flush_delay = flush_delay
        self._accumulator = ClipAccumulator(mime_type=mime_type)
        self._recording = False
        self._acquired = False

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def is_acquired(self) -> bool:
        return self._acquired

    async def acquire(self) -> None:
        """Open the device, re-opening it if it was lost since the last cycle.

        Raises:
            DeviceUnavailableError: If no device or permission exists.
        """
        await self._device.open()
        if not self._acquired:
            self._acquired = True
            logger.info("Capture device acquired")

    async def release(self) -> None:
        """Abort any recording in progress and close the device."""
        await self.abort()
        if self._acquired:
            self._acquired = False
            await self._device.close()
            logger.info("Capture device released")

    async def __aenter__(self) -> "AudioCaptureSession":
        await self.acquire()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.release()

    def _on_chunk(self, data: bytes) -> None:
        if not self._recording:
            logger.debug("Ignoring %d bytes outside a recording cycle", len(data))
            return
        self._accumulator.add_bytes(data)

    async def start(self) -> None:
        """Begin a new recording cycle.

        Raises:
            RecordingAlreadyActiveError: If a cycle is already running.
            DeviceUnavailableError: If the device cannot be acquired or started.
        """
        if self._recording:
            raise RecordingAlreadyActiveError()
        await self.acquire()
        self._accumulator.reset()
        self._recording = True
        try:
            await self._device.start(self._on_chunk)
        except Exception:
            self._recording = False
            raise
        logger.info("Recording started")

    async def stop(self) -> Clip:
        """End the cycle and return the recorded clip.

        Raises:
            EmptyRecordingError: If no audio bytes were captured.
        """
        if not self._recording:
            raise EmptyRecordingError()
        clip: Clip | None = None
        chunk_count = 0
        try:
            try:
                await self._device.request_stop()
            except DeviceUnavailableError as exc:
                logger.warning("Could not request final chunk: %s", exc.detail)
            await asyncio.sleep(self._flush_delay)
            clip = self._accumulator.to_clip()
            chunk_count = self._accumulator.chunk_count
        finally:
            self._recording = False
            self._accumulator.reset()

        if clip is None:
            raise EmptyRecordingError()
        logger.info("Recording stopped: %d bytes in %d chunks", len(clip.data), chunk_count)
        return clip

    async def abort(self) -> None:
        """Discard the current cycle, if any, without producing a clip."""
        if not self._recording:
            return
        self._recording = False
        discarded = self._accumulator.size_bytes
        self._accumulator.reset()
        logger.info("Recording aborted (%d bytes discarded)", discarded)
        try:
            await self._device.request_stop()
        except DeviceUnavailableError as exc:
            logger.debug("Device already gone while aborting: %s", exc.detail)
