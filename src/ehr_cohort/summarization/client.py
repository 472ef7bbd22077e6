"""Summarizer backend routed through LiteLLM for multi-provider support.

Supports ``openai/``, ``anthropic/``, ``ollama/`` model prefixes transparently;
the default configuration targets OpenAI ``gpt-3.5-turbo`` at temperature 0.7.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any

from ehr_cohort.core.config import NO_KEY_PROVIDERS, LLMConfig
from ehr_cohort.exceptions import ConfigurationError, NonRetryableError, ServiceError

log = logging.getLogger(__name__)


class LiteLLMSummarizer:
    """Async summarizer using ``litellm.acompletion`` with retry and backoff."""

    def __init__(self, config: LLMConfig) -> None:
        self._config = config

    @property
    def model(self) -> str:
        """Model ID with the provider prefix LiteLLM expects."""
        model = self._config.model
        if "/" in model or self._config.provider in ("openai", "litellm"):
            return model
        return f"{self._config.provider}/{model}"

    @property
    def has_credential(self) -> bool:
        return self._config.provider in NO_KEY_PROVIDERS or bool(self._config.api_key)

    @staticmethod
    def _is_retryable(exc: Exception) -> bool:
        """Classify whether an LLM API error should be retried.

        Non-retryable: AuthenticationError, BadRequestError, NotFoundError (4xx non-429).
        Retryable (default): everything else including rate limits, timeouts, 5xx.
        """
        from litellm.exceptions import AuthenticationError, BadRequestError, NotFoundError

        return not isinstance(exc, (AuthenticationError, BadRequestError, NotFoundError))

    def _request_kwargs(self, messages: list[dict[str, Any]]) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self._config.temperature,
            "timeout": self._config.timeout,
        }
        if self._config.api_key:
            kwargs["api_key"] = self._config.api_key
        if self._config.base_url:
            kwargs["api_base"] = self._config.base_url
        return kwargs

    async def summarize(self, system_text: str, user_text: str) -> str:
        """Send one system/user pair and return the reply content.

        Raises:
            ConfigurationError: No credential is configured.
            NonRetryableError: The provider rejected the request outright.
            ServiceError: Retries exhausted.
        """
        if not self.has_credential:
            raise ConfigurationError("LLM API key not found.")

        from litellm import acompletion

        messages = [
            {"role": "system", "content": system_text},
            {"role": "user", "content": user_text},
        ]
        max_retries = self._config.max_retries
        last_error: Exception | None = None

        for attempt in range(max_retries):
            try:
                response = await acompletion(**self._request_kwargs(messages))
                return response.choices[0].message.content or ""

            except Exception as e:
                last_error = e
                if not self._is_retryable(e):
                    raise NonRetryableError(f"Non-retryable LLM error: {e}") from e

                base_wait = min(2 ** attempt, self._config.retry_max_delay)
                wait = base_wait + random.uniform(0, base_wait * self._config.retry_jitter_factor)

                log.warning(
                    "LLM retry %d/%d: %s (wait=%.1fs)",
                    attempt + 1, max_retries, e, wait,
                )
                if attempt < max_retries - 1:
                    await asyncio.sleep(wait)

        raise ServiceError(
            f"LLM API failed after {max_retries} retries: {last_error}"
        ) from last_error
