"""Integration test fixtures for the voice intake service.

Wires a real controller to the real browser device singleton (so audio
flows through the ``/ws/audio`` socket) with mocked cloud providers.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from src.api.app import create_app
from src.services import orchestrator
from src.services.audio import AudioCaptureSession
from src.services.orchestrator import QuestionFlowController


@pytest.fixture
def app():
    """Create a fresh FastAPI application instance."""
    return create_app()


@pytest.fixture
def live_controller(mock_stt, mock_translator, mock_sink):
    """Controller over the browser device, installed as the live singleton."""
    capture = AudioCaptureSession(orchestrator.get_audio_device(), flush_delay=0.2)
    controller = QuestionFlowController(
        capture=capture,
        stt=mock_stt,
        translator=mock_translator,
        sink=mock_sink,
    )
    orchestrator._controller = controller
    return controller


@pytest.fixture
async def async_client(app, live_controller):
    """AsyncClient talking to the live controller."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def test_client(app, live_controller):
    """Synchronous TestClient for WebSocket tests.

    Entered as a context manager so REST calls and the audio socket share
    one event loop.
    """
    with TestClient(app) as c:
        yield c
