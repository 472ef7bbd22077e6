"""Analysis session: selection state machine and recompute wiring.

Transitions and what each one invalidates:

- ``select_patient(id)``  recomputes cohort + histogram; clears summaries
  when the patient changes.  Never summarizes.
- ``deselect()`` / ``select_patient("")``  clears cohort, histogram and
  summaries.
- ``replace_records(records)``  recomputes cohort + histogram for the
  current selection.
- ``edit_prompt`` / ``restore_default_prompts``  replace the templates only.
- ``generate_summaries()``  builds prompts from a snapshot of the templates
  and replaces both summaries in one assignment.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from ehr_cohort.cohort.selector import CohortSelection, SelectionStatus, build_age_histogram, derive_cohort
from ehr_cohort.data.store import PatientStore
from ehr_cohort.exceptions import ExportError, SessionStateError
from ehr_cohort.formatters.models import SummaryExport
from ehr_cohort.formatters.protocols import IOutputFormatter
from ehr_cohort.hooks.run_tracker import end_run, start_run
from ehr_cohort.models import AgeBin, Cohort, PatientRecord, PromptTemplates, RunAnalytics, SummaryPair
from ehr_cohort.prompts.builder import build_prompts
from ehr_cohort.prompts.defaults import default_templates
from ehr_cohort.summarization.orchestrator import SummarizationOrchestrator

log = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNSELECTED = "unselected"
    SELECTED = "selected"


class AnalysisSession:
    """Single-user, in-memory analysis session over one record set."""

    def __init__(
        self,
        store: PatientStore,
        orchestrator: SummarizationOrchestrator,
        templates: Optional[PromptTemplates] = None,
    ) -> None:
        self._store = store
        self._orchestrator = orchestrator
        self._templates = templates or default_templates()

        self._selected_patient_id: Optional[str] = None
        self._cohort: Optional[Cohort] = None
        self._histogram: tuple[AgeBin, ...] = ()
        self._summaries: Optional[SummaryPair] = None
        self._last_run: Optional[RunAnalytics] = None

        # Bumped whenever the cohort a running generation was built from goes stale
        self._selection_epoch = 0
        self._generate_lock = asyncio.Lock()

    # ── Read-only views ─────────────────────────────────────────────

    @property
    def store(self) -> PatientStore:
        return self._store

    @property
    def orchestrator(self) -> SummarizationOrchestrator:
        return self._orchestrator

    @property
    def state(self) -> SessionState:
        return SessionState.SELECTED if self._cohort is not None else SessionState.UNSELECTED

    @property
    def selected_patient_id(self) -> Optional[str]:
        return self._selected_patient_id

    @property
    def cohort(self) -> Optional[Cohort]:
        return self._cohort

    @property
    def histogram(self) -> tuple[AgeBin, ...]:
        return self._histogram

    @property
    def templates(self) -> PromptTemplates:
        return self._templates

    @property
    def summaries(self) -> Optional[SummaryPair]:
        return self._summaries

    @property
    def last_run(self) -> Optional[RunAnalytics]:
        return self._last_run

    @property
    def is_generating(self) -> bool:
        return self._generate_lock.locked()

    # ── Selection ───────────────────────────────────────────────────

    def select_patient(self, patient_id: str) -> CohortSelection:
        """Select *patient_id* and recompute its cohort and histogram.

        An empty ID deselects.  An unknown ID also leaves the session
        unselected rather than raising.
        """
        selection = derive_cohort(self._store.records, patient_id)
        if selection.status is not SelectionStatus.SELECTED:
            self.deselect()
            return selection

        if patient_id != self._selected_patient_id:
            self._summaries = None
            self._selection_epoch += 1
        self._apply(patient_id, selection)
        return selection

    def deselect(self) -> None:
        if self._selected_patient_id is not None:
            log.info("Deselected patient %s", self._selected_patient_id)
        self._selected_patient_id = None
        self._cohort = None
        self._histogram = ()
        self._summaries = None
        self._selection_epoch += 1

    def replace_records(self, records: Iterable[PatientRecord]) -> None:
        """Swap the record set and recompute derived values for the selection."""
        self._store = PatientStore(records)
        self._selection_epoch += 1
        if self._selected_patient_id is None:
            return

        selection = derive_cohort(self._store.records, self._selected_patient_id)
        if selection.status is not SelectionStatus.SELECTED:
            self.deselect()
            return
        self._apply(self._selected_patient_id, selection)

    def _apply(self, patient_id: str, selection: CohortSelection) -> None:
        assert selection.cohort is not None
        self._selected_patient_id = patient_id
        self._cohort = selection.cohort
        self._histogram = tuple(build_age_histogram(selection.cohort))
        log.info(
            "Selected patient %s: %d peers, %d age bins",
            patient_id, len(selection.cohort.peers), len(self._histogram),
        )

    # ── Prompt editing ──────────────────────────────────────────────

    def edit_prompt(self, field: str, text: str) -> PromptTemplates:
        """Replace one template string. Raises KeyError for an unknown field."""
        self._templates = self._templates.with_field(field, text)
        return self._templates

    def restore_default_prompts(self) -> PromptTemplates:
        self._templates = default_templates()
        return self._templates

    # ── Summaries ───────────────────────────────────────────────────

    async def generate_summaries(self) -> SummaryPair:
        """Run both summarization calls for the selected patient.

        Overlapping calls queue on a lock.  If the selection changes while a
        call is in flight its results are returned but not stored.

        Raises:
            SessionStateError: No patient is selected.
        """
        async with self._generate_lock:
            cohort = self._cohort
            if cohort is None:
                raise SessionStateError("Select a patient before generating summaries")

            epoch = self._selection_epoch
            patient_prompt, population_prompt = build_prompts(self._templates, cohort, self._histogram)

            start_run(patient_id=cohort.focal.id)
            try:
                pair = await self._orchestrator.run(patient_prompt, population_prompt)
            finally:
                self._last_run = end_run()

            if epoch != self._selection_epoch:
                log.warning(
                    "Selection changed while summarizing patient %s; discarding results",
                    cohort.focal.id,
                )
                return pair

            self._summaries = pair
            return pair

    # ── Export ──────────────────────────────────────────────────────

    def build_export(self) -> SummaryExport:
        """Bundle the current summaries. Raises ExportError if there are none."""
        if self._summaries is None or self._selected_patient_id is None:
            raise ExportError("No patient summary to export; generate summaries first")
        return SummaryExport(
            timestamp=datetime.now(timezone.utc),
            selected_patient_id=self._selected_patient_id,
            patient=self._summaries.patient,
            population=self._summaries.population,
        )

    def export(self, formatter: IOutputFormatter, directory: Path) -> Path:
        """Write the export bundle to ``directory/summary_{ID}.{ext}``.

        Raises:
            ExportError: Nothing to export, or the file cannot be written.
        """
        bundle = self.build_export()
        path = directory / bundle.file_name(formatter.file_extension)
        try:
            directory.mkdir(parents=True, exist_ok=True)
            formatter.format_to_file(bundle, path)
        except OSError as e:
            raise ExportError(f"Cannot write export to {path}: {e}") from e
        log.info("Exported summaries for patient %s to %s", bundle.selected_patient_id, path)
        return path
