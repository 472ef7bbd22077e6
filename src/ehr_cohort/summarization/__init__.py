"""Summarizer backends and the two-call summarization orchestrator.

Usage::

    from ehr_cohort.summarization import LiteLLMSummarizer, SummarizationOrchestrator

    orchestrator = SummarizationOrchestrator(LiteLLMSummarizer(settings.llm))
    pair = await orchestrator.run(patient_prompt, population_prompt)
"""

from __future__ import annotations

from ehr_cohort.summarization.client import LiteLLMSummarizer
from ehr_cohort.summarization.orchestrator import SUMMARY_ERROR_TEXT, SummarizationOrchestrator
from ehr_cohort.summarization.protocols import ISummarizerService

__all__ = [
    "ISummarizerService",
    "LiteLLMSummarizer",
    "SUMMARY_ERROR_TEXT",
    "SummarizationOrchestrator",
]
