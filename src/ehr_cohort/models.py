"""Data models for ehr-cohort.

``PatientRecord`` is a pydantic model because it is built from untrusted
tabular input and serialized by the API.  The derived values (cohort, age
bins, prompts, summaries) are frozen dataclasses: they are produced by the
pipeline itself and never validated from outside.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

_INT_RE = re.compile(r"^[+-]?\d+$")

# ── Patient records ──────────────────────────────────────────────────


def parse_age(text: str) -> Optional[int]:
    """Parse an age field, returning ``None`` when it is not a usable age.

    Accepts a base-10 integer with optional sign and surrounding whitespace.
    """
    candidate = text.strip()
    if not _INT_RE.match(candidate):
        return None
    return int(candidate)


class PatientRecord(BaseModel):
    """A single row of the EHR extract."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(alias="ID")
    age_text: str = Field(default="", alias="Age")
    diagnosis_category: str = Field(default="", alias="Heart_Disease_Type")
    diagnosis_note: str = Field(default="", alias="Diagnoses_Note")

    @property
    def age(self) -> Optional[int]:
        return parse_age(self.age_text)


# ── Cohort / histogram ───────────────────────────────────────────────


@dataclass(frozen=True)
class AgeBin:
    """A 5-year-wide age range and the number of cohort members in it."""

    start: int
    count: int

    @property
    def range_label(self) -> str:
        return f"{self.start}-{self.start + 4}"


@dataclass(frozen=True)
class Cohort:
    """Focal patient plus every other record sharing its diagnosis category."""

    focal: PatientRecord
    peers: tuple[PatientRecord, ...] = ()

    @property
    def category(self) -> str:
        return self.focal.diagnosis_category

    @property
    def members(self) -> tuple[PatientRecord, ...]:
        return (self.focal, *self.peers)


# ── Prompts ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PromptPair:
    """System instruction and user content sent together in one call."""

    system_text: str
    user_text: str


@dataclass(frozen=True)
class PromptTemplates:
    """The four user-editable prompt strings.

    Instances are immutable; an edit returns a new instance so a reader
    holding the old one keeps a consistent snapshot.
    """

    system_prompt: str
    user_prompt_template: str
    population_system_prompt: str
    population_user_prompt: str

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def with_field(self, name: str, text: str) -> PromptTemplates:
        if name not in self.field_names():
            raise KeyError(f"Unknown prompt field: {name}")
        return replace(self, **{name: text})


# ── Summaries ────────────────────────────────────────────────────────


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SummaryResult:
    """One summarization call: the prompt as sent and the text returned.

    ``text`` holds the user-visible error string when the call failed;
    ``error`` keeps the underlying reason for diagnostics.
    """

    prompt: PromptPair
    text: Optional[str]
    generated_at: datetime = field(default_factory=_utcnow)
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.text is not None


@dataclass(frozen=True)
class SummaryPair:
    """Patient-level and population-level results of one generation."""

    patient: SummaryResult
    population: SummaryResult


# ── Run analytics ────────────────────────────────────────────────────


@dataclass
class StageMetrics:
    """Timing for one stage (one summarization call) of a run."""

    stage: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    duration_ms: float = 0.0
    succeeded: bool = True


@dataclass
class RunAnalytics:
    """Timing and outcome of one ``generate_summaries()`` invocation."""

    run_id: str
    patient_id: str = ""
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    status: str = "running"
    stages: list[StageMetrics] = field(default_factory=list)
    total_duration_ms: float = 0.0

    def finalize(self) -> None:
        self.ended_at = _utcnow()
        if self.started_at:
            self.total_duration_ms = (self.ended_at - self.started_at).total_seconds() * 1000
        self.status = "completed" if all(s.succeeded for s in self.stages) else "partial"
