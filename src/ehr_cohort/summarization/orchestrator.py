"""Two-call summarization: patient-level, then population-level.

Each call fails on its own.  A failed or timed-out call yields a
``SummaryResult`` whose text is :data:`SUMMARY_ERROR_TEXT`; the other call
is unaffected and nothing is raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging

from ehr_cohort.exceptions import SummarizerError
from ehr_cohort.hooks.run_tracker import track_stage
from ehr_cohort.models import PromptPair, SummaryPair, SummaryResult
from ehr_cohort.summarization.protocols import ISummarizerService

log = logging.getLogger(__name__)

SUMMARY_ERROR_TEXT = "Error generating summary. Please check your API key."


class SummarizationOrchestrator:
    """Issues both summarization requests sequentially against one service."""

    def __init__(self, service: ISummarizerService, *, timeout_seconds: float = 60.0) -> None:
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")
        self._service = service
        self._timeout = timeout_seconds

    @property
    def service(self) -> ISummarizerService:
        return self._service

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    async def run(self, patient_prompt: PromptPair, population_prompt: PromptPair) -> SummaryPair:
        """Summarize both prompts; always returns a fully populated pair."""
        patient = await self._summarize("patient_summary", patient_prompt)
        population = await self._summarize("population_summary", population_prompt)
        return SummaryPair(patient=patient, population=population)

    async def _summarize(self, stage_name: str, prompt: PromptPair) -> SummaryResult:
        with track_stage(stage_name) as stage:
            try:
                text = await asyncio.wait_for(
                    self._service.summarize(prompt.system_text, prompt.user_text),
                    timeout=self._timeout,
                )
            except asyncio.TimeoutError:
                log.error("%s timed out after %.1fs", stage_name, self._timeout)
                stage.succeeded = False
                return SummaryResult(
                    prompt=prompt,
                    text=SUMMARY_ERROR_TEXT,
                    error=f"timed out after {self._timeout}s",
                )
            except SummarizerError as e:
                log.error("%s failed: %s", stage_name, e)
                stage.succeeded = False
                return SummaryResult(prompt=prompt, text=SUMMARY_ERROR_TEXT, error=str(e))
            except Exception as e:
                # Third-party backends may raise anything
                log.error("%s failed with unexpected error", stage_name, exc_info=True)
                stage.succeeded = False
                return SummaryResult(prompt=prompt, text=SUMMARY_ERROR_TEXT, error=repr(e))

        log.info("%s generated (%d chars)", stage_name, len(text))
        return SummaryResult(prompt=prompt, text=text)
