"""Startup validation: fail-fast on fatal misconfiguration, warn on the rest."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ehr_cohort.core.config import NO_KEY_PROVIDERS

if TYPE_CHECKING:
    from ehr_cohort.core.config import AppSettings

log = logging.getLogger(__name__)


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ValueError on fatal misconfig."""
    _check_api_key(settings)
    _check_timeouts(settings)
    _check_data_path(settings)


def _check_api_key(settings: AppSettings) -> None:
    """A missing credential only disables summaries, so it is a warning."""
    if settings.llm.provider in NO_KEY_PROVIDERS:
        return
    if not settings.llm.api_key:
        log.warning(
            "EHR_LLM_API_KEY is not set for provider '%s'. "
            "Cohort views work, but every summary will report an error.",
            settings.llm.provider,
        )


def _check_timeouts(settings: AppSettings) -> None:
    if settings.llm.timeout <= 0:
        raise ValueError(
            f"EHR_LLM_TIMEOUT must be positive, got {settings.llm.timeout}."
        )


def _check_data_path(settings: AppSettings) -> None:
    if not settings.data.csv_path.exists():
        log.warning("Patient extract not found at %s", settings.data.csv_path)
