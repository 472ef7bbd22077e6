"""CLI for ehr-cohort: patients / cohort / prompts / summarize commands."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ehr_cohort.cohort.selector import SelectionStatus
from ehr_cohort.core.config import AppSettings, LLMConfig
from ehr_cohort.core.startup_checks import validate_settings
from ehr_cohort.data.source import load_patient_records
from ehr_cohort.exceptions import DataSourceError, ExportError
from ehr_cohort.formatters.json_formatter import JSONExporter
from ehr_cohort.hooks import setup_logging
from ehr_cohort.models import PatientRecord
from ehr_cohort.prompts.defaults import default_templates
from ehr_cohort.session.factory import create_session
from ehr_cohort.session.state import AnalysisSession
from ehr_cohort.utils.text import clean_display_text
from ehr_cohort.visualization.histogram import render_age_histogram

app = typer.Typer(name="ehr-cohort", help="Cohort analysis and LLM summaries over an EHR extract")
console = Console()


def _build_settings(
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    verbose: bool = False,
) -> AppSettings:
    """Build settings, overriding env defaults with CLI flags."""
    settings = AppSettings()
    overrides: dict = {}
    if api_key:
        overrides["api_key"] = api_key
    if model:
        overrides["model"] = model
    if overrides:
        settings.llm = LLMConfig(**{**settings.llm.model_dump(), **overrides})
    if verbose:
        settings.observability.log_level = "DEBUG"
    setup_logging(settings.observability)
    return settings


def _load(csv_file: Optional[Path], settings: AppSettings) -> list[PatientRecord]:
    path = csv_file or settings.data.csv_path
    try:
        return load_patient_records(path)
    except DataSourceError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _select(session: AnalysisSession, patient_id: str) -> None:
    selection = session.select_patient(patient_id)
    if selection.status is not SelectionStatus.SELECTED:
        console.print(f"[yellow]Patient {patient_id!r} not found[/yellow]")
        raise typer.Exit(code=1)


def _print_cohort(session: AnalysisSession) -> None:
    cohort = session.cohort
    assert cohort is not None
    console.print(
        f"[bold]Patient {cohort.focal.id}[/bold] - {clean_display_text(cohort.category)}, "
        f"age {cohort.focal.age_text or '?'}"
    )
    console.print(clean_display_text(cohort.focal.diagnosis_note))

    table = Table(title=f"Similar patients ({len(cohort.peers)})")
    table.add_column("#", justify="right")
    table.add_column("ID", style="cyan")
    table.add_column("Age")
    table.add_column("Diagnosis Note", max_width=80)
    for i, peer in enumerate(cohort.peers, start=1):
        table.add_row(str(i), peer.id, peer.age_text, clean_display_text(peer.diagnosis_note))
    console.print(table)

    if not render_age_histogram(session.histogram, console):
        console.print("[dim]No parseable ages in this cohort[/dim]")


@app.command()
def patients(
    csv_file: Optional[Path] = typer.Argument(None, help="EHR extract (CSV)"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """List the patients in the extract."""
    settings = _build_settings(verbose=verbose)
    records = _load(csv_file, settings)

    table = Table(title=f"Patients ({len(records)})")
    table.add_column("ID", style="cyan")
    table.add_column("Age")
    table.add_column("Diagnosis Category", style="green")
    for r in records:
        table.add_row(r.id, r.age_text, clean_display_text(r.diagnosis_category))
    console.print(table)


@app.command()
def cohort(
    patient_id: str = typer.Option(..., "--patient", "-p", help="Focal patient ID"),
    csv_file: Optional[Path] = typer.Argument(None, help="EHR extract (CSV)"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Show the cohort and age distribution for one patient."""
    settings = _build_settings(verbose=verbose)
    session = create_session(settings, _load(csv_file, settings))
    _select(session, patient_id)
    _print_cohort(session)


@app.command()
def prompts() -> None:
    """Print the built-in prompt templates."""
    templates = default_templates()
    for name in templates.field_names():
        console.print(Panel(getattr(templates, name), title=name, title_align="left"))


@app.command()
def summarize(
    patient_id: str = typer.Option(..., "--patient", "-p", help="Focal patient ID"),
    csv_file: Optional[Path] = typer.Argument(None, help="EHR extract (CSV)"),
    system_prompt: Optional[str] = typer.Option(None, help="Patient summary system prompt"),
    user_prompt_template: Optional[str] = typer.Option(None, help="Patient summary user prompt template"),
    population_system_prompt: Optional[str] = typer.Option(None, help="Population summary system prompt"),
    population_user_prompt: Optional[str] = typer.Option(None, help="Population summary user prompt"),
    export_dir: Optional[Path] = typer.Option(None, "--export", help="Write summary_<ID>.json here"),
    save: bool = typer.Option(False, "--save", help="Write summary_<ID>.json to EHR_EXPORT_OUTPUT_DIR"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="LLM API key"),
    model: Optional[str] = typer.Option(None, "--model", help="LLM model name"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Generate the diagnosis and population summaries for one patient."""
    settings = _build_settings(api_key, model, verbose)
    validate_settings(settings)
    session = create_session(settings, _load(csv_file, settings))
    _select(session, patient_id)

    edits = {
        "system_prompt": system_prompt,
        "user_prompt_template": user_prompt_template,
        "population_system_prompt": population_system_prompt,
        "population_user_prompt": population_user_prompt,
    }
    for field, text in edits.items():
        if text is not None:
            session.edit_prompt(field, text)

    _print_cohort(session)

    with console.status("Generating summaries..."):
        pair = asyncio.run(session.generate_summaries())

    console.print(Panel(pair.patient.text or "", title="Diagnosis Summary", border_style="magenta"))
    console.print(Panel(pair.population.text or "", title="Population Statistic Summary", border_style="blue"))

    if session.last_run is not None:
        logging.getLogger(__name__).info(
            "Summaries finished in %.0f ms (%s)",
            session.last_run.total_duration_ms, session.last_run.status,
        )

    if export_dir is None and save:
        export_dir = settings.export.output_dir
    if export_dir is not None:
        try:
            path = session.export(JSONExporter(), export_dir)
        except ExportError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            raise typer.Exit(code=1) from e
        console.print(f"[green]Summary saved to {path}[/green]")


if __name__ == "__main__":
    app()
