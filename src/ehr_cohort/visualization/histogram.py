"""Age distribution bar chart rendered to a rich console."""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.table import Table

from ehr_cohort.models import AgeBin

BAR_CHAR = "█"
DEFAULT_BAR_WIDTH = 40


def histogram_chart_data(bins: Sequence[AgeBin]) -> list[dict[str, Any]]:
    """Chart series keyed by range label, as consumed by charting front-ends."""
    return [{"range": b.range_label, "count": b.count} for b in bins]


def bar_length(count: int, max_count: int, width: int = DEFAULT_BAR_WIDTH) -> int:
    """Scaled bar length; any non-zero count gets at least one cell."""
    if count <= 0 or max_count <= 0:
        return 0
    return max(1, round(count / max_count * width))


def build_histogram_table(bins: Sequence[AgeBin], *, width: int = DEFAULT_BAR_WIDTH) -> Table:
    table = Table(title="Age Distribution", show_edge=False)
    table.add_column("Age Range", style="cyan", no_wrap=True)
    table.add_column("Number of Patients", style="magenta")
    table.add_column("", justify="right")

    max_count = max((b.count for b in bins), default=0)
    for b in bins:
        table.add_row(b.range_label, BAR_CHAR * bar_length(b.count, max_count, width), str(b.count))
    return table


def render_age_histogram(
    bins: Sequence[AgeBin],
    console: Console | None = None,
    *,
    width: int = DEFAULT_BAR_WIDTH,
) -> bool:
    """Print the chart. Returns False, printing nothing, when there are no bins."""
    if not bins:
        return False
    (console or Console()).print(build_histogram_table(bins, width=width))
    return True
