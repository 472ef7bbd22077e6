"""CSV ingestion: header-driven mapping of the EHR extract onto PatientRecord."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pandas as pd

from ehr_cohort.exceptions import DataSourceError
from ehr_cohort.models import PatientRecord

log = logging.getLogger(__name__)

# Source column -> PatientRecord field
COLUMN_MAP: dict[str, str] = {
    "ID": "id",
    "Age": "age_text",
    "Heart_Disease_Type": "diagnosis_category",
    "Diagnoses_Note": "diagnosis_note",
}

# An empty Age is kept as an unparseable age; the others make a row malformed
REQUIRED_VALUES: tuple[str, ...] = ("ID", "Heart_Disease_Type", "Diagnoses_Note")


def parse_patient_records(text: str) -> list[PatientRecord]:
    """Parse CSV text into records, in source order.

    Values are kept as strings exactly as read; ages are parsed later so an
    unparseable age never drops the row.  Rows with too many fields, or with
    an empty or missing ``ID``, category or note, are skipped and counted.

    Raises:
        DataSourceError: If the text is not CSV or a required header is absent.
    """
    bad_lines: list[list[str]] = []

    def _skip_bad_line(fields: list[str]) -> None:
        bad_lines.append(fields)
        return None

    try:
        frame = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=_skip_bad_line,
        )
    except pd.errors.EmptyDataError as e:
        raise DataSourceError("Patient extract is empty") from e
    except pd.errors.ParserError as e:
        raise DataSourceError(f"Patient extract is not valid CSV: {e}") from e

    frame.columns = [str(c).strip() for c in frame.columns]
    missing = [col for col in COLUMN_MAP if col not in frame.columns]
    if missing:
        raise DataSourceError(f"Patient extract is missing required columns: {missing}")

    frame = frame[list(COLUMN_MAP)]
    incomplete = pd.Series(False, index=frame.index)
    for col in REQUIRED_VALUES:
        incomplete |= frame[col].isna() | (frame[col].fillna("").str.strip() == "")

    skipped = int(incomplete.sum()) + len(bad_lines)
    if skipped:
        log.warning("Skipping %d malformed rows in patient extract", skipped)
    frame = frame[~incomplete].fillna("")

    records = [
        PatientRecord(**{COLUMN_MAP[col]: row[col] for col in COLUMN_MAP})
        for row in frame.to_dict(orient="records")
    ]
    log.info("Loaded %d patient records", len(records))
    return records


def load_patient_records(path: Path) -> list[PatientRecord]:
    """Read and parse a CSV extract from *path*."""
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except OSError as e:
        raise DataSourceError(f"Cannot read patient extract {path}: {e}") from e
    return parse_patient_records(text)
