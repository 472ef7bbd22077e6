"""End-to-end: CSV extract -> session -> summaries -> JSON export."""

from __future__ import annotations

import json

import pytest

from ehr_cohort.formatters.json_formatter import JSONExporter
from ehr_cohort.session.factory import create_session
from ehr_cohort.session.state import SessionState
from ehr_cohort.summarization.orchestrator import SUMMARY_ERROR_TEXT
from tests.fakes.fake_summarizer import FakeSummarizer


class TestSessionPipeline:
    @pytest.mark.asyncio
    async def test_full_flow(self, settings, tmp_path) -> None:
        fake = FakeSummarizer(responses=["Arrhythmia cohort summary.", "Mostly 55-59."])
        session = create_session(settings, service=fake)
        assert len(session.store) == 7

        session.select_patient("101")
        assert [p.id for p in session.cohort.peers] == ["102", "103", "106"]
        assert [(b.range_label, b.count) for b in session.histogram] == [("55-59", 2), ("70-74", 1)]

        session.edit_prompt("user_prompt_template", "Find patterns in patients with")
        pair = await session.generate_summaries()

        assert fake.calls[0].user_text == (
            "Find patterns in patients with Arrhythmia:\n"
            "1. Syncope episode; bradycardia on ECG.\n"
            "2. Age missing from intake form; AF on telemetry.\n"
            "3. Atrial flutter after CABG."
        )
        assert fake.calls[1].user_text.endswith("\n55-59: 2\n70-74: 1")
        assert pair.patient.text == "Arrhythmia cohort summary."

        path = session.export(JSONExporter(), tmp_path / "exports")
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert path.name == "summary_101.json"
        assert payload["userPrompt"] == fake.calls[0].user_text
        assert payload["populationUserPrompt"] == fake.calls[1].user_text

    @pytest.mark.asyncio
    async def test_switching_patients(self, settings) -> None:
        session = create_session(settings, service=FakeSummarizer())

        session.select_patient("101")
        await session.generate_summaries()
        session.select_patient("105")

        assert session.summaries is None
        assert [p.id for p in session.cohort.peers] == ["107"]
        assert [(b.range_label, b.count) for b in session.histogram] == [("45-49", 2)]

        session.select_patient("")
        assert session.state is SessionState.UNSELECTED

    @pytest.mark.asyncio
    async def test_no_credential_still_shows_cohort(self, settings) -> None:
        session = create_session(settings)
        session.select_patient("104")

        assert session.cohort.peers == ()
        pair = await session.generate_summaries()
        assert pair.patient.text == SUMMARY_ERROR_TEXT
        assert pair.population.text == SUMMARY_ERROR_TEXT

    def test_missing_extract_starts_empty(self, settings, tmp_path) -> None:
        settings.data.csv_path = tmp_path / "absent.csv"
        session = create_session(settings, service=FakeSummarizer())
        assert len(session.store) == 0
        assert session.select_patient("101").status.value == "not_found"
