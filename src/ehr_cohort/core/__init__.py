"""Core configuration and startup checks."""

from __future__ import annotations

from ehr_cohort.core.config import (
    APIConfig,
    AppSettings,
    DataConfig,
    ExportConfig,
    LLMConfig,
    ObservabilityConfig,
)
from ehr_cohort.core.startup_checks import validate_settings

__all__ = [
    "APIConfig",
    "AppSettings",
    "DataConfig",
    "ExportConfig",
    "LLMConfig",
    "ObservabilityConfig",
    "validate_settings",
]
