"""Tests for GoogleSTT (mocked SpeechClient, no network)."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from google.api_core.exceptions import ServiceUnavailable
from google.cloud import speech

from src.core.config import Settings
from src.core.exceptions import RecognitionFailedError, ServiceUnavailableError
from src.services.transcription.google import GoogleSTT


def _make_response(*transcripts):
    """Build a recognize response with one single-alternative result per transcript."""
    results = [
        SimpleNamespace(alternatives=[SimpleNamespace(transcript=t)] if t is not None else [])
        for t in transcripts
    ]
    return SimpleNamespace(results=results)


@pytest.fixture
def client():
    client = MagicMock()
    client.recognize.return_value = _make_response("नमस्ते")
    return client


@pytest.fixture
def stt(client):
    return GoogleSTT(client=client, settings=Settings())


class TestTranscribe:
    async def test_returns_transcript(self, stt, sample_clip):
        assert await stt.transcribe(sample_clip, "hi-IN") == "नमस्ते"

    async def test_request_uses_browser_audio_profile(self, stt, client, sample_clip):
        await stt.transcribe(sample_clip, "bn-IN")

        kwargs = client.recognize.call_args.kwargs
        config = kwargs["config"]
        assert config.encoding == speech.RecognitionConfig.AudioEncoding.WEBM_OPUS
        assert config.sample_rate_hertz == 48000
        assert config.language_code == "bn-IN"
        assert config.model == "default"
        assert kwargs["audio"].content == sample_clip.data

    async def test_joins_results_in_order(self, stt, client, sample_clip):
        """Multi-segment results are joined with single spaces."""
        client.recognize.return_value = _make_response(" first part", "second part ")
        assert await stt.transcribe(sample_clip, "hi-IN") == "first part second part"

    async def test_skips_results_without_alternatives(self, stt, client, sample_clip):
        client.recognize.return_value = _make_response(None, "kept")
        assert await stt.transcribe(sample_clip, "hi-IN") == "kept"

    @pytest.mark.parametrize("response", [_make_response(), _make_response("   ")])
    async def test_no_usable_alternative(self, stt, client, sample_clip, response):
        client.recognize.return_value = response
        with pytest.raises(RecognitionFailedError):
            await stt.transcribe(sample_clip, "hi-IN")

    async def test_api_error_is_service_unavailable(self, stt, client, sample_clip):
        client.recognize.side_effect = ServiceUnavailable("backend down")
        with pytest.raises(ServiceUnavailableError):
            await stt.transcribe(sample_clip, "hi-IN")

    async def test_unexpected_error_is_service_unavailable(self, stt, client, sample_clip):
        client.recognize.side_effect = ConnectionError("no route")
        with pytest.raises(ServiceUnavailableError, match="no route"):
            await stt.transcribe(sample_clip, "hi-IN")
