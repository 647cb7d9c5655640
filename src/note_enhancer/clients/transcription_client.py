"""Whisper speech-to-text over an OpenAI-compatible HTTP API (Groq by default)."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import httpx

from note_enhancer.errors import ConfigurationError, UpstreamServiceError
from note_enhancer.models.enhancement import TranscriptionResult

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "whisper-large-v3"


class TranscriptionClient:
    """Async client for the audio transcription endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = 120.0,
        http: httpx.AsyncClient | None = None,
    ):
        key = api_key or os.environ.get("GROQ_API_KEY")
        if not key:
            raise ConfigurationError(
                "Groq API key not configured. Please set GROQ_API_KEY in your .env file."
            )
        self.model = model
        self.url = f"{base_url.rstrip('/')}/audio/transcriptions"
        self.http = http or httpx.AsyncClient(timeout=timeout)
        self._headers = {"Authorization": f"Bearer {key}"}

    async def aclose(self) -> None:
        await self.http.aclose()

    async def transcribe(
        self,
        audio_path: str | Path,
        language: str | None = None,
    ) -> TranscriptionResult:
        """Transcribe an audio file and return text, language and duration."""
        path = Path(audio_path)
        audio = path.read_bytes()
        logger.info("Transcribing audio file: %s (%d bytes)", path.name, len(audio))

        data = {"model": self.model, "response_format": "verbose_json"}
        if language:
            data["language"] = language
        try:
            response = await self.http.post(
                self.url,
                headers=self._headers,
                data=data,
                files={"file": (path.name, audio, "application/octet-stream")},
            )
        except httpx.HTTPError as exc:
            logger.error("Transcription request failed", exc_info=True)
            raise UpstreamServiceError("transcription", "transcribe audio", str(exc)) from exc

        if not response.is_success:
            logger.error("Transcription API error: %d %s", response.status_code, response.text)
            raise UpstreamServiceError(
                "transcription",
                "transcribe audio",
                f"API error {response.status_code} - {response.text}",
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamServiceError(
                "transcription", "transcribe audio", "response was not valid JSON"
            ) from exc

        if not isinstance(payload, dict):
            raise UpstreamServiceError(
                "transcription", "transcribe audio", "response was not a JSON object"
            )
        text = payload.get("text")
        if not isinstance(text, str):
            raise UpstreamServiceError(
                "transcription", "transcribe audio", "response did not include text"
            )
        result = TranscriptionResult(
            text=text.strip(),
            language=payload.get("language") or "en",
            duration_seconds=float(payload.get("duration") or 0.0),
        )
        logger.info("Transcription successful, text length: %d", len(result.text))
        return result
