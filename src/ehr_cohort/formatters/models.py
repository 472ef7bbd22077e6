"""Export bundle handed to output formatters."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from ehr_cohort.models import SummaryResult

# Anything outside this set is replaced so the ID is safe in paths and headers
_UNSAFE_FILE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def safe_file_stem(text: str) -> str:
    return _UNSAFE_FILE_CHARS.sub("_", text) or "_"


@dataclass(frozen=True)
class SummaryExport:
    """Summaries of one patient plus the prompts that produced them."""

    timestamp: datetime
    selected_patient_id: str
    patient: SummaryResult
    population: SummaryResult

    def file_name(self, extension: str = "json") -> str:
        """``summary_{ID}.{extension}`` with path and header-unsafe characters replaced."""
        return f"summary_{safe_file_stem(self.selected_patient_id)}.{extension}"
