"""WebSocket endpoint carrying browser microphone audio.

The browser connects once microphone permission is granted, which makes the
server-side capture device available. The server tells the browser when to
start and stop its MediaRecorder; the browser streams the recorded chunks
(opus in webm) back as binary frames.

Protocol:
    - Server sends: JSON ``WebSocketMessage`` objects (connected/start/stop/release/error).
    - Client sends: binary audio chunks only.
"""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from src.core.models import WebSocketMessage, WebSocketMessageType
from src.services import orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/audio")
async def audio_ws(websocket: WebSocket) -> None:
    """Attach the browser microphone for the lifetime of the connection."""
    await websocket.accept()
    device = orchestrator.get_audio_device()

    async def _notify(message: WebSocketMessage) -> None:
        """Forward device commands to the browser."""
        await websocket.send_json(message.model_dump(mode="json"))

    device.attach(_notify)
    logger.info("Audio socket attached")
    await _notify(WebSocketMessage(type=WebSocketMessageType.connected))

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            data = message.get("bytes")
            if data is not None:
                device.feed(data)
                continue
            await _notify(
                WebSocketMessage(
                    type=WebSocketMessageType.error,
                    data={"detail": "Only binary audio frames are accepted"},
                )
            )
    except WebSocketDisconnect:
        logger.info("Audio socket disconnected by client")
    finally:
        device.detach(_notify)
        logger.info("Audio socket detached")
