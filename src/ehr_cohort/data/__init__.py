"""Patient data: CSV ingestion and the in-memory store."""

from __future__ import annotations

from ehr_cohort.data.source import COLUMN_MAP, load_patient_records, parse_patient_records
from ehr_cohort.data.store import PatientStore

__all__ = [
    "COLUMN_MAP",
    "PatientStore",
    "load_patient_records",
    "parse_patient_records",
]
