"""Session endpoints: patient picker, selection, prompt editing, summaries, export."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, Field

from ehr_cohort.formatters.json_formatter import JSONExporter
from ehr_cohort.models import PatientRecord, PromptTemplates, SummaryPair, SummaryResult
from ehr_cohort.session.state import AnalysisSession
from ehr_cohort.utils.text import clean_display_text
from ehr_cohort.visualization.histogram import histogram_chart_data

router = APIRouter(tags=["session"])


# ── Schemas ─────────────────────────────────────────────────────────


class PatientOption(BaseModel):
    """One entry of the patient picker."""

    id: str
    label: str
    category: str


class PatientResponse(BaseModel):
    id: str
    age: str
    diagnosis_category: str
    diagnosis_note: str


class AgeBinResponse(BaseModel):
    range: str
    count: int


class TemplatesResponse(BaseModel):
    system_prompt: str
    user_prompt_template: str
    population_system_prompt: str
    population_user_prompt: str


class SummaryResponse(BaseModel):
    system_prompt: str
    user_prompt: str
    text: Optional[str] = None
    generated_at: str
    succeeded: bool


class SummariesResponse(BaseModel):
    patient: SummaryResponse
    population: SummaryResponse


class SessionResponse(BaseModel):
    state: str
    selected_patient_id: Optional[str] = None
    selection_status: Optional[str] = None
    focal: Optional[PatientResponse] = None
    peers: list[PatientResponse] = Field(default_factory=list)
    histogram: list[AgeBinResponse] = Field(default_factory=list)
    templates: TemplatesResponse
    summaries: Optional[SummariesResponse] = None
    generating: bool = False


class SelectionRequest(BaseModel):
    patient_id: str = ""


class PromptEditRequest(BaseModel):
    text: str


# ── Conversions ─────────────────────────────────────────────────────


def get_session(request: Request) -> AnalysisSession:
    return request.app.state.session


def _patient(record: PatientRecord) -> PatientResponse:
    return PatientResponse(
        id=record.id,
        age=record.age_text,
        diagnosis_category=clean_display_text(record.diagnosis_category),
        diagnosis_note=clean_display_text(record.diagnosis_note),
    )


def _templates(templates: PromptTemplates) -> TemplatesResponse:
    return TemplatesResponse(
        system_prompt=templates.system_prompt,
        user_prompt_template=templates.user_prompt_template,
        population_system_prompt=templates.population_system_prompt,
        population_user_prompt=templates.population_user_prompt,
    )


def _summary(result: SummaryResult) -> SummaryResponse:
    return SummaryResponse(
        system_prompt=result.prompt.system_text,
        user_prompt=result.prompt.user_text,
        text=result.text,
        generated_at=result.generated_at.isoformat(),
        succeeded=result.succeeded,
    )


def _summaries(pair: Optional[SummaryPair]) -> Optional[SummariesResponse]:
    if pair is None:
        return None
    return SummariesResponse(patient=_summary(pair.patient), population=_summary(pair.population))


def _session(session: AnalysisSession, selection_status: Optional[str] = None) -> SessionResponse:
    cohort = session.cohort
    return SessionResponse(
        state=session.state.value,
        selected_patient_id=session.selected_patient_id,
        selection_status=selection_status,
        focal=_patient(cohort.focal) if cohort else None,
        peers=[_patient(p) for p in cohort.peers] if cohort else [],
        histogram=[AgeBinResponse(**row) for row in histogram_chart_data(session.histogram)],
        templates=_templates(session.templates),
        summaries=_summaries(session.summaries),
        generating=session.is_generating,
    )


# ── Routes ──────────────────────────────────────────────────────────


@router.get("/patients", response_model=list[PatientOption])
async def list_patients(session: AnalysisSession = Depends(get_session)) -> list[PatientOption]:
    return [
        PatientOption(id=pid, label=clean_display_text(label), category=record.diagnosis_category)
        for record, (pid, label) in zip(session.store, session.store.options())
    ]


@router.get("/session", response_model=SessionResponse)
async def read_session(session: AnalysisSession = Depends(get_session)) -> SessionResponse:
    return _session(session)


@router.put("/session/selection", response_model=SessionResponse)
async def select_patient(
    body: SelectionRequest,
    session: AnalysisSession = Depends(get_session),
) -> SessionResponse:
    selection = session.select_patient(body.patient_id)
    return _session(session, selection.status.value)


@router.delete("/session/selection", response_model=SessionResponse)
async def deselect_patient(session: AnalysisSession = Depends(get_session)) -> SessionResponse:
    session.deselect()
    return _session(session)


@router.put("/session/prompts/{field}", response_model=TemplatesResponse)
async def edit_prompt(
    field: str,
    body: PromptEditRequest,
    session: AnalysisSession = Depends(get_session),
) -> TemplatesResponse:
    return _templates(session.edit_prompt(field, body.text))


@router.post("/session/prompts/restore", response_model=TemplatesResponse)
async def restore_prompts(session: AnalysisSession = Depends(get_session)) -> TemplatesResponse:
    return _templates(session.restore_default_prompts())


@router.post("/session/summaries", response_model=SummariesResponse)
async def generate_summaries(session: AnalysisSession = Depends(get_session)) -> SummariesResponse:
    pair = await session.generate_summaries()
    return SummariesResponse(patient=_summary(pair.patient), population=_summary(pair.population))


@router.get("/session/export")
async def export_summaries(session: AnalysisSession = Depends(get_session)) -> Response:
    bundle = session.build_export()
    exporter = JSONExporter()
    return Response(
        content=exporter.format(bundle),
        media_type=exporter.content_type,
        headers={"Content-Disposition": f'attachment; filename="{bundle.file_name(exporter.file_extension)}"'},
    )
