"""Shared fixtures for ehr-cohort tests."""

from __future__ import annotations

import pytest

from ehr_cohort.core.config import AppSettings, DataConfig, LLMConfig
from ehr_cohort.data.store import PatientStore
from ehr_cohort.models import PatientRecord, PromptTemplates

SAMPLE_CSV = """ID,Age,Heart_Disease_Type,Diagnoses_Note
101,55,Arrhythmia,Intermittent palpitations; Holter shows paroxysmal AF.
102,58,Arrhythmia,Syncope episode; bradycardia on ECG.
103,abc,Arrhythmia,Age missing from intake form; AF on telemetry.
104,61,arrhythmia,Lower-case category from a second site.
105,47,Heart Failure,Reduced EF 35%; started on sacubitril/valsartan.
106,72,Arrhythmia,Atrial flutter after CABG.
107,49,Heart Failure,Dyspnea on exertion; BNP elevated.
"""


def make_record(pid: str, age: str, category: str, note: str = "") -> PatientRecord:
    return PatientRecord(id=pid, age_text=age, diagnosis_category=category, diagnosis_note=note)


@pytest.fixture
def scenario_records() -> list[PatientRecord]:
    """Three-record set: two in category A, one in B."""
    return [
        make_record("1", "62", "A", "x"),
        make_record("2", "64", "A", "y"),
        make_record("3", "70", "B", "z"),
    ]


@pytest.fixture
def sample_records() -> list[PatientRecord]:
    """Seven records with a bad age and a casing variant of a category."""
    return [
        make_record("101", "55", "Arrhythmia", "Intermittent palpitations; Holter shows paroxysmal AF."),
        make_record("102", "58", "Arrhythmia", "Syncope episode; bradycardia on ECG."),
        make_record("103", "abc", "Arrhythmia", "Age missing from intake form; AF on telemetry."),
        make_record("104", "61", "arrhythmia", "Lower-case category from a second site."),
        make_record("105", "47", "Heart Failure", "Reduced EF 35%; started on sacubitril/valsartan."),
        make_record("106", "72", "Arrhythmia", "Atrial flutter after CABG."),
        make_record("107", "49", "Heart Failure", "Dyspnea on exertion; BNP elevated."),
    ]


@pytest.fixture
def sample_store(sample_records: list[PatientRecord]) -> PatientStore:
    return PatientStore(sample_records)


@pytest.fixture
def templates() -> PromptTemplates:
    """Short, easy-to-assert templates."""
    return PromptTemplates(
        system_prompt="SYS",
        user_prompt_template="Summarize patients with",
        population_system_prompt="POP-SYS",
        population_user_prompt="Age groups:",
    )


@pytest.fixture
def sample_csv_path(tmp_path):
    path = tmp_path / "EHR_Data.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


@pytest.fixture
def settings(sample_csv_path) -> AppSettings:
    """Settings pointing at the sample CSV, with no LLM credential."""
    return AppSettings(
        llm=LLMConfig(api_key="", model="test-model", timeout=5.0, max_retries=1),
        data=DataConfig(csv_path=sample_csv_path),
    )


@pytest.fixture(autouse=True)
def _isolate_llm_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's real credentials out of the tests."""
    for var in ("OPENAI_API_KEY", "EHR_LLM_API_KEY", "EHR_LLM_MODEL", "EHR_LLM_PROVIDER"):
        monkeypatch.delenv(var, raising=False)
