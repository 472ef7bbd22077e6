"""Output formatter protocol: defines the contract all exporters implement."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from ehr_cohort.formatters.models import SummaryExport


@runtime_checkable
class IOutputFormatter(Protocol):
    """Protocol for export formatters (JSON, etc.)."""

    def format(self, bundle: SummaryExport, **kwargs: Any) -> bytes:
        """Render the bundle into output bytes."""
        ...

    def format_to_file(self, bundle: SummaryExport, path: Path, **kwargs: Any) -> Path:
        """Render and write to a file. Returns the output path."""
        ...

    @property
    def content_type(self) -> str:
        """MIME type for the output format (e.g. 'application/json')."""
        ...

    @property
    def file_extension(self) -> str:
        """File extension without the dot."""
        ...


__all__ = ["IOutputFormatter"]
