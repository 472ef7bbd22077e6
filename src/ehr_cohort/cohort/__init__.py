"""Cohort selection and age-bin histograms."""

from __future__ import annotations

from ehr_cohort.cohort.selector import (
    BIN_WIDTH,
    CohortSelection,
    SelectionStatus,
    build_age_histogram,
    derive_cohort,
    find_peers,
    parse_age,
)

__all__ = [
    "BIN_WIDTH",
    "CohortSelection",
    "SelectionStatus",
    "build_age_histogram",
    "derive_cohort",
    "find_peers",
    "parse_age",
]
