"""Observability hooks: logging setup and per-run analytics."""

from __future__ import annotations

from ehr_cohort.hooks.logging_config import setup_logging
from ehr_cohort.hooks.run_tracker import end_run, get_current_run, start_run, track_stage

__all__ = [
    "end_run",
    "get_current_run",
    "setup_logging",
    "start_run",
    "track_stage",
]
