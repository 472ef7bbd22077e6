"""Nested pydantic-settings configuration for the application.

Each sub-config reads its own ``EHR_<GROUP>_*`` env vars::

    export EHR_LLM_MODEL=gpt-4o-mini
    export EHR_DATA_CSV_PATH=./EHR_Data.csv
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

# Providers that run locally and do not require an API key
NO_KEY_PROVIDERS = frozenset({"ollama"})


class LLMConfig(BaseSettings):
    """Summarizer backend configuration.

    Env vars use ``EHR_LLM_`` prefix; the credential also falls back to
    ``OPENAI_API_KEY``::

        export EHR_LLM_API_KEY=sk-...
        export EHR_LLM_MODEL=gpt-3.5-turbo
    """

    model_config = {"env_prefix": "EHR_LLM_", "populate_by_name": True}

    provider: Literal["openai", "anthropic", "ollama", "litellm"] = "openai"
    model: str = "gpt-3.5-turbo"
    api_key: str = Field(
        default="",
        validation_alias=AliasChoices("EHR_LLM_API_KEY", "OPENAI_API_KEY"),
    )
    base_url: Optional[str] = None
    temperature: float = 0.7
    timeout: float = Field(default=60.0, description="Per-attempt timeout in seconds")
    max_retries: int = Field(default=2, ge=1)
    retry_jitter_factor: float = 0.5
    retry_max_delay: float = 30.0

    @property
    def call_budget_seconds(self) -> float:
        """Worst-case time for one summarize() call: every attempt times out
        and every backoff sleeps its maximum."""
        backoff = sum(
            min(2 ** attempt, self.retry_max_delay) * (1 + self.retry_jitter_factor)
            for attempt in range(self.max_retries - 1)
        )
        return self.timeout * self.max_retries + backoff


class DataConfig(BaseSettings):
    """Patient extract location.

    Env vars use ``EHR_DATA_`` prefix.
    """

    model_config = {"env_prefix": "EHR_DATA_"}

    csv_path: Path = Path("./EHR_Data.csv")


class ExportConfig(BaseSettings):
    """Summary export configuration.

    Env vars use ``EHR_EXPORT_`` prefix.
    """

    model_config = {"env_prefix": "EHR_EXPORT_"}

    output_dir: Path = Path("./exports")


class ObservabilityConfig(BaseSettings):
    """Observability configuration.

    Env vars use ``EHR_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "EHR_OBSERVABILITY_"}

    log_level: str = "INFO"


class APIConfig(BaseSettings):
    """HTTP API metadata.

    Env vars use ``EHR_API_`` prefix.
    """

    model_config = {"env_prefix": "EHR_API_"}

    title: str = "EHR Cohort Analysis"
    description: str = "Cohort derivation and LLM summarization over an EHR extract"


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    api: APIConfig = Field(default_factory=APIConfig)
