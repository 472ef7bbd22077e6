"""ehr-cohort: diagnosis cohorts, age histograms and LLM summaries over an EHR extract.

Usage::

    from ehr_cohort import AppSettings, create_session, JSONExporter

    session = create_session(AppSettings())
    session.select_patient("12")
    print(session.cohort.peers, session.histogram)

    pair = await session.generate_summaries()
    session.export(JSONExporter(), Path("./exports"))
"""

from __future__ import annotations

from ehr_cohort.cohort import build_age_histogram, derive_cohort
from ehr_cohort.core.config import AppSettings
from ehr_cohort.data import PatientStore, load_patient_records, parse_patient_records
from ehr_cohort.exceptions import (
    ConfigurationError,
    DataSourceError,
    EHRCohortError,
    ExportError,
    NonRetryableError,
    ServiceError,
    SessionStateError,
    SummarizerError,
)
from ehr_cohort.formatters import JSONExporter
from ehr_cohort.models import (
    AgeBin,
    Cohort,
    PatientRecord,
    PromptPair,
    PromptTemplates,
    SummaryPair,
    SummaryResult,
)
from ehr_cohort.prompts import build_patient_prompt, build_population_prompt, default_templates
from ehr_cohort.session import AnalysisSession, SessionState, create_session
from ehr_cohort.summarization import (
    SUMMARY_ERROR_TEXT,
    ISummarizerService,
    LiteLLMSummarizer,
    SummarizationOrchestrator,
)

__all__ = [
    "AgeBin",
    "AnalysisSession",
    "AppSettings",
    "Cohort",
    "ConfigurationError",
    "DataSourceError",
    "EHRCohortError",
    "ExportError",
    "ISummarizerService",
    "JSONExporter",
    "LiteLLMSummarizer",
    "NonRetryableError",
    "PatientRecord",
    "PatientStore",
    "PromptPair",
    "PromptTemplates",
    "SUMMARY_ERROR_TEXT",
    "ServiceError",
    "SessionState",
    "SessionStateError",
    "SummarizationOrchestrator",
    "SummarizerError",
    "SummaryPair",
    "SummaryResult",
    "build_age_histogram",
    "build_patient_prompt",
    "build_population_prompt",
    "create_session",
    "default_templates",
    "derive_cohort",
    "load_patient_records",
    "parse_patient_records",
]
