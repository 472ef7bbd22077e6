"""Tests for LiteLLMSummarizer with mocked litellm.acompletion."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ehr_cohort.core.config import LLMConfig
from ehr_cohort.exceptions import ConfigurationError, NonRetryableError, ServiceError
from ehr_cohort.summarization.client import LiteLLMSummarizer


def _make_config(**overrides: Any) -> LLMConfig:
    defaults = {
        "api_key": "test-key",
        "model": "gpt-3.5-turbo",
        "temperature": 0.7,
        "timeout": 10.0,
        "max_retries": 1,
    }
    defaults.update(overrides)
    return LLMConfig(**defaults)


def _mock_response(content: str | None = "test response") -> MagicMock:
    """Build a mock LiteLLM response object."""
    message = MagicMock()
    message.content = content

    choice = MagicMock()
    choice.message = message

    response = MagicMock()
    response.choices = [choice]
    return response


class TestSummarize:
    @pytest.mark.asyncio
    async def test_sends_system_and_user_messages(self) -> None:
        client = LiteLLMSummarizer(_make_config())

        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response("A concise summary.")
            result = await client.summarize("You are a clinician.", "Summarize these notes")

        assert result == "A concise summary."
        kwargs = mock_acomp.call_args.kwargs
        assert kwargs["messages"] == [
            {"role": "system", "content": "You are a clinician."},
            {"role": "user", "content": "Summarize these notes"},
        ]
        assert kwargs["model"] == "gpt-3.5-turbo"
        assert kwargs["temperature"] == 0.7
        assert kwargs["api_key"] == "test-key"
        assert "api_base" not in kwargs

    @pytest.mark.asyncio
    async def test_empty_content_becomes_empty_string(self) -> None:
        client = LiteLLMSummarizer(_make_config())

        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response(None)
            assert await client.summarize("s", "u") == ""

    @pytest.mark.asyncio
    async def test_base_url_forwarded(self) -> None:
        client = LiteLLMSummarizer(_make_config(base_url="http://localhost:4000/v1"))

        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response()
            await client.summarize("s", "u")

        assert mock_acomp.call_args.kwargs["api_base"] == "http://localhost:4000/v1"

    @pytest.mark.asyncio
    async def test_missing_key_fails_without_calling(self) -> None:
        client = LiteLLMSummarizer(_make_config(api_key=""))

        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            with pytest.raises(ConfigurationError, match="API key not found"):
                await client.summarize("s", "u")

        mock_acomp.assert_not_called()

    @pytest.mark.asyncio
    async def test_ollama_needs_no_key(self) -> None:
        client = LiteLLMSummarizer(_make_config(provider="ollama", api_key="", model="llama3"))
        assert client.has_credential

        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _mock_response("local")
            assert await client.summarize("s", "u") == "local"

        assert mock_acomp.call_args.kwargs["model"] == "ollama/llama3"
        assert "api_key" not in mock_acomp.call_args.kwargs


class TestRetry:
    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self) -> None:
        client = LiteLLMSummarizer(_make_config(max_retries=3))

        with (
            patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp,
            patch("ehr_cohort.summarization.client.asyncio.sleep", new_callable=AsyncMock) as mock_sleep,
        ):
            mock_acomp.side_effect = [RuntimeError("rate limited"), _mock_response("ok")]
            result = await client.summarize("s", "u")

        assert result == "ok"
        assert mock_acomp.call_count == 2
        assert mock_sleep.await_count == 1

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_service_error(self) -> None:
        client = LiteLLMSummarizer(_make_config(max_retries=2))

        with (
            patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp,
            patch("ehr_cohort.summarization.client.asyncio.sleep", new_callable=AsyncMock) as mock_sleep,
        ):
            mock_acomp.side_effect = RuntimeError("upstream 503")
            with pytest.raises(ServiceError, match="after 2 retries"):
                await client.summarize("s", "u")

        assert mock_acomp.call_count == 2
        # No sleep after the final attempt
        assert mock_sleep.await_count == 1

    @pytest.mark.asyncio
    async def test_non_retryable_fails_immediately(self) -> None:
        client = LiteLLMSummarizer(_make_config(max_retries=3))

        with (
            patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp,
            patch.object(LiteLLMSummarizer, "_is_retryable", return_value=False),
        ):
            mock_acomp.side_effect = RuntimeError("invalid api key")
            with pytest.raises(NonRetryableError, match="invalid api key"):
                await client.summarize("s", "u")

        assert mock_acomp.call_count == 1

    def test_classification(self) -> None:
        from litellm.exceptions import AuthenticationError

        auth = AuthenticationError(message="bad key", llm_provider="openai", model="gpt-3.5-turbo")
        assert LiteLLMSummarizer._is_retryable(auth) is False
        assert LiteLLMSummarizer._is_retryable(TimeoutError()) is True


class TestModelRouting:
    @pytest.mark.parametrize(
        ("provider", "model", "expected"),
        [
            ("openai", "gpt-4o-mini", "gpt-4o-mini"),
            ("anthropic", "claude-3-haiku", "anthropic/claude-3-haiku"),
            ("anthropic", "anthropic/claude-3-haiku", "anthropic/claude-3-haiku"),
            ("litellm", "my-proxy-model", "my-proxy-model"),
        ],
    )
    def test_provider_prefix(self, provider: str, model: str, expected: str) -> None:
        client = LiteLLMSummarizer(_make_config(provider=provider, model=model))
        assert client.model == expected
