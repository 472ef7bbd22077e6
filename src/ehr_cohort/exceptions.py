"""Exception hierarchy for ehr-cohort."""

from __future__ import annotations


class EHRCohortError(Exception):
    """Base exception for all ehr-cohort errors."""


class DataSourceError(EHRCohortError):
    """Raised when the patient extract cannot be read or has the wrong shape."""


class SummarizerError(EHRCohortError):
    """Raised by a summarizer backend when a summary could not be produced."""


class ConfigurationError(SummarizerError):
    """The summarizer is missing a credential or other required setting."""


class ServiceError(SummarizerError):
    """Network / API failures after exhausting retries."""


class NonRetryableError(ServiceError):
    """Auth errors, bad requests, 4xx (non-429); fail immediately."""


class SessionStateError(EHRCohortError):
    """Raised when a session action is not valid in the current state."""


class ExportError(EHRCohortError):
    """Raised when there is nothing to export or the export cannot be written."""
