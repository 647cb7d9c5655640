"""Claude API wrapper used as the generative-text collaborator."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import anthropic

from note_enhancer.errors import ConfigurationError, UpstreamServiceError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


class LLMClient:
    """Async Claude API client.

    Failed calls are not retried here; the SDK's own retries are controlled
    by ``max_retries`` and default to off.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int = 0,
    ):
        key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not key:
            raise ConfigurationError(
                "Anthropic API key not configured. Set ANTHROPIC_API_KEY in your .env file."
            )
        kwargs: dict = {"api_key": key, "max_retries": max_retries}
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> LLMResponse:
        """Send the user text with a system instruction and return the reply.

        An empty reply is returned as ``text == ""``; only transport, auth
        and non-2xx failures raise.
        """
        logger.debug("LLM call: model=%s max_tokens=%d", model, max_tokens)
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system
        try:
            message = await self.client.messages.create(**kwargs)
        except anthropic.APIError as exc:
            logger.error("LLM call failed", exc_info=True)
            raise UpstreamServiceError("generation", "rephrase text", str(exc)) from exc

        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        text = "".join(
            getattr(block, "text", "") or "" for block in (message.content or [])
        )
        return LLMResponse(
            text=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
