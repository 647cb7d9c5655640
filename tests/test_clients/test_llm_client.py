"""Tests for LLMClient (Claude API wrapper)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from note_enhancer.clients.llm_client import LLMClient, LLMResponse
from note_enhancer.errors import ConfigurationError, UpstreamServiceError


def _make_api_message(text: str, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    """Build a mock anthropic Message-like object."""
    message = MagicMock()
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    message.content = [MagicMock(text=text)]
    return message


@pytest.fixture(autouse=True)
def _api_key(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")


class TestLLMClientInit:
    def test_init_uses_env_key_and_no_retries(self):
        with patch("note_enhancer.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient()
            mock_cls.assert_called_once_with(api_key="env-key", max_retries=0)

    def test_init_with_api_key_and_timeout(self):
        with patch("note_enhancer.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient(api_key="test-key", timeout=30.0)
            mock_cls.assert_called_once_with(api_key="test-key", max_retries=0, timeout=30.0)

    def test_missing_key_raises_configuration_error(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY")
        with patch("note_enhancer.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            with pytest.raises(ConfigurationError, match="ANTHROPIC_API_KEY"):
                LLMClient()
            mock_cls.assert_not_called()


class TestLLMClientGenerate:
    async def test_generate_returns_llm_response(self):
        with patch("note_enhancer.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(
                return_value=_make_api_message("hello world", input_tokens=100, output_tokens=50)
            )
            mock_cls.return_value = mock_client

            llm = LLMClient()
            result = await llm.generate("say hello", system="be nice", max_tokens=64)

        assert isinstance(result, LLMResponse)
        assert result.text == "hello world"
        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["system"] == "be nice"
        assert kwargs["max_tokens"] == 64
        assert kwargs["messages"] == [{"role": "user", "content": "say hello"}]

    async def test_system_omitted_when_empty(self):
        with patch("note_enhancer.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(return_value=_make_api_message("x"))
            mock_cls.return_value = mock_client

            await LLMClient().generate("prompt")

        assert "system" not in mock_client.messages.create.call_args.kwargs

    async def test_empty_content_gives_empty_text(self):
        with patch("note_enhancer.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            message = _make_api_message("")
            message.content = []
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(return_value=message)
            mock_cls.return_value = mock_client

            result = await LLMClient().generate("prompt")

        assert result.text == ""

    async def test_api_error_is_wrapped_and_not_retried(self):
        with patch("note_enhancer.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(
                side_effect=anthropic.APIConnectionError(
                    request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
                )
            )
            mock_cls.return_value = mock_client

            llm = LLMClient()
            with pytest.raises(UpstreamServiceError, match="Failed to rephrase text"):
                await llm.generate("prompt")

        assert mock_client.messages.create.await_count == 1

    async def test_usage_reported_per_response(self):
        with patch("note_enhancer.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(
                side_effect=[
                    _make_api_message("one", input_tokens=20, output_tokens=8),
                    _make_api_message("two", input_tokens=5, output_tokens=3),
                ]
            )
            mock_cls.return_value = mock_client

            llm = LLMClient()
            first = await llm.generate("prompt", model="claude-haiku-4-5-20251001")
            second = await llm.generate("prompt", model="claude-haiku-4-5-20251001")

        assert (first.input_tokens, first.output_tokens) == (20, 8)
        assert (second.input_tokens, second.output_tokens) == (5, 3)
