"""Tests for TranscriptionClient (Whisper over HTTP)."""

from __future__ import annotations

import httpx
import pytest

from note_enhancer.clients.transcription_client import TranscriptionClient
from note_enhancer.errors import ConfigurationError, UpstreamServiceError


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "note.m4a"
    path.write_bytes(b"fake-audio")
    return path


def _client(handler) -> TranscriptionClient:
    return TranscriptionClient(
        api_key="groq-key",
        http=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestTranscriptionClientInit:
    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("GROQ_API_KEY", raising=False)
        with pytest.raises(ConfigurationError, match="GROQ_API_KEY"):
            TranscriptionClient()

    def test_env_key(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "env-key")
        client = TranscriptionClient(base_url="https://example.test/v1/")
        assert client.url == "https://example.test/v1/audio/transcriptions"


class TestTranscribe:
    async def test_success(self, audio_file):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200, json={"text": " hello there ", "language": "english", "duration": 4.2}
            )

        client = _client(handler)
        result = await client.transcribe(audio_file, language="en")

        assert result.text == "hello there"
        assert result.language == "english"
        assert result.duration_seconds == pytest.approx(4.2)
        request = seen[0]
        assert request.headers["Authorization"] == "Bearer groq-key"
        body = request.read()
        assert b"whisper-large-v3" in body
        assert b"verbose_json" in body
        assert b'name="language"' in body
        assert b"fake-audio" in body

    async def test_defaults_when_fields_missing(self, audio_file):
        client = _client(lambda request: httpx.Response(200, json={"text": "hi"}))
        result = await client.transcribe(audio_file)
        assert result.language == "en"
        assert result.duration_seconds == 0.0

    async def test_error_status(self, audio_file):
        client = _client(lambda request: httpx.Response(401, text="invalid key"))
        with pytest.raises(UpstreamServiceError, match="Failed to transcribe audio: API error 401"):
            await client.transcribe(audio_file)

    async def test_network_error(self, audio_file):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(UpstreamServiceError):
            await _client(handler).transcribe(audio_file)

    async def test_missing_text(self, audio_file):
        client = _client(lambda request: httpx.Response(200, json={"language": "en"}))
        with pytest.raises(UpstreamServiceError, match="did not include text"):
            await client.transcribe(audio_file)

    @pytest.mark.parametrize("body", [["hello"], "hello", 42])
    async def test_non_object_body(self, audio_file, body):
        client = _client(lambda request: httpx.Response(200, json=body))
        with pytest.raises(UpstreamServiceError, match="not a JSON object"):
            await client.transcribe(audio_file)
