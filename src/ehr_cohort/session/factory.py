"""Build a ready-to-use session from settings."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ehr_cohort.core.config import AppSettings
from ehr_cohort.data.source import load_patient_records
from ehr_cohort.data.store import PatientStore
from ehr_cohort.models import PatientRecord
from ehr_cohort.session.state import AnalysisSession
from ehr_cohort.summarization.client import LiteLLMSummarizer
from ehr_cohort.summarization.orchestrator import SummarizationOrchestrator
from ehr_cohort.summarization.protocols import ISummarizerService

log = logging.getLogger(__name__)


def create_session(
    settings: AppSettings,
    records: Optional[Iterable[PatientRecord]] = None,
    *,
    service: Optional[ISummarizerService] = None,
) -> AnalysisSession:
    """Wire store, summarizer and orchestrator.

    When *records* is omitted they are loaded from ``settings.data.csv_path``;
    a missing file yields an empty session.
    """
    if records is None:
        if settings.data.csv_path.exists():
            records = load_patient_records(settings.data.csv_path)
        else:
            log.warning("No patient extract at %s; starting with an empty record set", settings.data.csv_path)
            records = []

    orchestrator = SummarizationOrchestrator(
        service or LiteLLMSummarizer(settings.llm),
        timeout_seconds=settings.llm.call_budget_seconds,
    )
    return AnalysisSession(PatientStore(records), orchestrator)
