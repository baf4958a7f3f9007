"""
Questionnaire session REST endpoints.

The presentation layer reads the session snapshot and posts intents; every
intent response is the resulting snapshot. Business logic lives in the
question flow controller.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import Response

from src.core.config import get_settings
from src.core.models import IntentRequest, Language, SessionState, SpeakRequest
from src.core.questions import SUPPORTED_LANGUAGES, get_language
from src.services import orchestrator
from src.services.tts import create_tts

logger = logging.getLogger(__name__)

router = APIRouter(tags=["session"])


@router.get("/session", response_model=SessionState)
async def get_session_state():
    """Return the current session snapshot."""
    return orchestrator.get_controller().state()


@router.post("/session/intents", response_model=SessionState)
async def post_intent(body: IntentRequest):
    """Apply one intent (select_role, start_recording, confirm, ...)."""
    logger.debug("Intent received: %s", body.root.type)
    return await orchestrator.get_controller().dispatch(body.root)


@router.get("/languages", response_model=list[Language])
async def list_languages():
    """List the supported UI languages."""
    return list(SUPPORTED_LANGUAGES)


@router.post("/speak", response_class=Response)
async def speak(body: SpeakRequest):
    """Read text aloud in the session (or requested) language. Returns MP3 audio."""
    settings = get_settings()
    language_code = body.language_code or (
        orchestrator.get_controller().state().ui_language or settings.default_language
    )
    language = get_language(language_code)
    tts = create_tts(provider=settings.tts_provider)
    audio = await tts.speak(body.text, language.code)
    return Response(content=audio, media_type=tts.media_type)
