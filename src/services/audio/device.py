"""
Capture device abstraction.

The microphone lives in the browser. ``BrowserAudioDevice`` stands in for
it on the server: it is available while an audio WebSocket is attached,
forwards start/stop commands to the browser, and hands incoming chunks to
whoever started the device.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from src.core.exceptions import DeviceUnavailableError
from src.core.models import WebSocketMessage, WebSocketMessageType

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[bytes], None]
Notifier = Callable[[WebSocketMessage], Awaitable[None]]


class AudioDevice(ABC):
    """Interface every capture device must implement."""

    @abstractmethod
    async def open(self) -> None:
        """Acquire the device. Opening an already open device is a no-op.

        Raises:
            DeviceUnavailableError: If there is no device or no permission.
        """

    @abstractmethod
    async def start(self, on_chunk: ChunkCallback) -> None:
        """Begin delivering recorded chunks to ``on_chunk``."""

    @abstractmethod
    async def request_stop(self) -> None:
        """Ask the device to stop and flush its last buffered chunk."""

    @abstractmethod
    async def close(self) -> None:
        """Release the device (stop all tracks)."""


class BrowserAudioDevice(AudioDevice):
    """Server-side handle for the browser microphone behind a WebSocket."""

    def __init__(self) -> None:
        self._notify: Notifier | None = None
        self._on_chunk: ChunkCallback | None = None
        self._opened = False

    @property
    def is_attached(self) -> bool:
        return self._notify is not None

    @property
    def is_open(self) -> bool:
        return self._opened

    def attach(self, notify: Notifier) -> None:
        """Bind a connected browser socket. A newer socket replaces an older one."""
        if self._notify is not None:
            logger.info("Replacing previously attached audio socket")
        self._notify = notify

    def detach(self, notify: Notifier | None = None) -> None:
        """Forget the browser socket; the device becomes unavailable.

        When ``notify`` is given, only that socket is detached, so a socket
        closing late cannot unbind the one that replaced it.
        """
        if notify is not None and notify is not self._notify:
            return
        self._notify = None
        self._on_chunk = None
        self._opened = False

    def feed(self, data: bytes) -> None:
        """Deliver a chunk received from the browser."""
        if self._on_chunk is None:
            logger.debug("Dropping %d audio bytes received while idle", len(data))
            return
        self._on_chunk(data)

    async def _send(self, message_type: WebSocketMessageType) -> None:
        if self._notify is None:
            raise DeviceUnavailableError()
        try:
            await self._notify(WebSocketMessage(type=message_type))
        except Exception as exc:
            raise DeviceUnavailableError(detail=f"Audio connection lost: {exc}") from exc

    async def open(self) -> None:
        if self._notify is None:
            raise DeviceUnavailableError(detail="Microphone access denied")
        self._opened = True

    async def start(self, on_chunk: ChunkCallback) -> None:
        if not self._opened:
            raise DeviceUnavailableError()
        self._on_chunk = on_chunk
        await self._send(WebSocketMessageType.start)

    async def request_stop(self) -> None:
        # Keep the callback bound so the final chunk still arrives
        await self._send(WebSocketMessageType.stop)

    async def close(self) -> None:
        self._on_chunk = None
        self._opened = False
        if self._notify is None:
            return
        try:
            await self._send(WebSocketMessageType.release)
        except DeviceUnavailableError as exc:
            logger.debug("Could not ask the browser to release the microphone: %s", exc.detail)
