"""JSON exporter for patient/population summaries."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ehr_cohort.formatters.models import SummaryExport

EXPORT_TYPE = "PatientCase"


def export_payload(bundle: SummaryExport) -> dict[str, Any]:
    """Key layout of the exported document.

    ``systemPrompt`` / ``userPrompt`` are the patient-level prompts exactly
    as sent, not the templates as currently edited.
    """
    return {
        "timestamp": bundle.timestamp.isoformat(),
        "selectedPatientId": bundle.selected_patient_id,
        "type": EXPORT_TYPE,
        "systemPrompt": bundle.patient.prompt.system_text,
        "userPrompt": bundle.patient.prompt.user_text,
        "patientSummaryText": bundle.patient.text,
        "populationSystemPrompt": bundle.population.prompt.system_text,
        "populationUserPrompt": bundle.population.prompt.user_text,
        "populationSummaryText": bundle.population.text,
    }


class JSONExporter:
    """Renders a SummaryExport as indented JSON bytes."""

    def format(self, bundle: SummaryExport, **kwargs: Any) -> bytes:
        return json.dumps(export_payload(bundle), indent=2, ensure_ascii=False).encode("utf-8")

    def format_to_file(self, bundle: SummaryExport, path: Path, **kwargs: Any) -> Path:
        """Write JSON to *path* and return it."""
        path.write_bytes(self.format(bundle, **kwargs))
        return path

    @property
    def content_type(self) -> str:
        return "application/json"

    @property
    def file_extension(self) -> str:
        return "json"
