"""Rendering of the cohort age histogram."""

from __future__ import annotations

from ehr_cohort.visualization.histogram import (
    build_histogram_table,
    histogram_chart_data,
    render_age_histogram,
)

__all__ = ["build_histogram_table", "histogram_chart_data", "render_age_histogram"]
