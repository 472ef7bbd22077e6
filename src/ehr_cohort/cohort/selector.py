"""Cohort derivation and age histogram construction.

Pure functions of their inputs.  Diagnosis categories are compared as exact,
case-sensitive strings: ``"Arrhythmia"`` and ``"arrhythmia"`` are different
cohorts.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from ehr_cohort.models import AgeBin, Cohort, PatientRecord, parse_age

log = logging.getLogger(__name__)

BIN_WIDTH = 5


class SelectionStatus(str, Enum):
    SELECTED = "selected"
    NO_SELECTION = "no_selection"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class CohortSelection:
    """Outcome of :func:`derive_cohort`; ``cohort`` is set only when SELECTED."""

    status: SelectionStatus
    cohort: Optional[Cohort] = None


def find_peers(records: Iterable[PatientRecord], focal: PatientRecord) -> tuple[PatientRecord, ...]:
    """Records sharing *focal*'s category, excluding *focal*, in source order."""
    return tuple(
        r for r in records
        if r.id != focal.id and r.diagnosis_category == focal.diagnosis_category
    )


def derive_cohort(records: Sequence[PatientRecord], patient_id: str) -> CohortSelection:
    """Derive the cohort for *patient_id*.

    Returns a NO_SELECTION / NOT_FOUND signal instead of raising when the ID
    is empty or absent from *records*.
    """
    if not patient_id:
        return CohortSelection(SelectionStatus.NO_SELECTION)

    focal = next((r for r in records if r.id == patient_id), None)
    if focal is None:
        log.warning("Selected patient %s not found in record set", patient_id)
        return CohortSelection(SelectionStatus.NOT_FOUND)

    cohort = Cohort(focal=focal, peers=find_peers(records, focal))
    log.debug(
        "Derived cohort for patient %s: category=%r peers=%d",
        patient_id, cohort.category, len(cohort.peers),
    )
    return CohortSelection(SelectionStatus.SELECTED, cohort)


def bin_start(age: int) -> int:
    return (age // BIN_WIDTH) * BIN_WIDTH


def build_age_histogram(cohort: Cohort) -> list[AgeBin]:
    """Count cohort members (focal included) per 5-year bin, ascending.

    Members whose age does not parse are left out; empty bins are omitted.
    """
    counts: Counter[int] = Counter()
    skipped = 0
    for member in cohort.members:
        age = parse_age(member.age_text)
        if age is None:
            skipped += 1
            continue
        counts[bin_start(age)] += 1

    if skipped:
        log.debug("Excluded %d cohort members with unparseable ages from histogram", skipped)

    return [AgeBin(start=start, count=counts[start]) for start in sorted(counts)]


__all__ = [
    "BIN_WIDTH",
    "CohortSelection",
    "SelectionStatus",
    "bin_start",
    "build_age_histogram",
    "derive_cohort",
    "find_peers",
    "parse_age",
]
