"""Exporters for rendering summary bundles.

Usage::

    from ehr_cohort.formatters import JSONExporter

    path = session.export(JSONExporter(), Path("./exports"))
"""

from __future__ import annotations

from ehr_cohort.formatters.json_formatter import JSONExporter, export_payload
from ehr_cohort.formatters.models import SummaryExport
from ehr_cohort.formatters.protocols import IOutputFormatter

__all__ = [
    "IOutputFormatter",
    "JSONExporter",
    "SummaryExport",
    "export_payload",
]
