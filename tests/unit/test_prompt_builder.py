"""Tests for prompt composition."""

from __future__ import annotations

from ehr_cohort.cohort.selector import build_age_histogram, derive_cohort
from ehr_cohort.models import AgeBin, Cohort, PromptTemplates
from ehr_cohort.prompts import TEMPLATE_FIELDS, default_templates
from ehr_cohort.prompts.builder import build_patient_prompt, build_population_prompt, build_prompts
from tests.conftest import make_record


class TestPatientPrompt:
    def test_scenario_user_text(self, scenario_records, templates) -> None:
        cohort = derive_cohort(scenario_records, "1").cohort
        prompt = build_patient_prompt(templates, cohort)

        assert prompt.system_text == "SYS"
        assert prompt.user_text == "Summarize patients with A:\n1. y"

    def test_notes_numbered_from_one(self, templates) -> None:
        cohort = Cohort(
            focal=make_record("1", "50", "CAD", "focal note"),
            peers=(make_record("2", "51", "CAD", "first"), make_record("3", "52", "CAD", "second")),
        )
        prompt = build_patient_prompt(templates, cohort)
        assert prompt.user_text == "Summarize patients with CAD:\n1. first\n2. second"
        assert "focal note" not in prompt.user_text

    def test_no_peers_ends_after_colon(self, templates) -> None:
        cohort = Cohort(focal=make_record("1", "50", "Rare", "note"))
        assert build_patient_prompt(templates, cohort).user_text == "Summarize patients with Rare:\n"

    def test_notes_passed_through_verbatim(self, templates) -> None:
        note = "Line one\nLine two, with “quotes”"
        cohort = Cohort(focal=make_record("1", "50", "A"), peers=(make_record("2", "51", "A", note),))
        assert build_patient_prompt(templates, cohort).user_text.endswith(f"1. {note}")


class TestPopulationPrompt:
    def test_scenario_user_text(self, scenario_records, templates) -> None:
        cohort = derive_cohort(scenario_records, "1").cohort
        prompt = build_population_prompt(templates, build_age_histogram(cohort))

        assert prompt.system_text == "POP-SYS"
        assert prompt.user_text == "Age groups:\n60-64: 2"

    def test_one_line_per_bin(self, templates) -> None:
        bins = [AgeBin(40, 1), AgeBin(55, 3), AgeBin(70, 2)]
        assert build_population_prompt(templates, bins).user_text == (
            "Age groups:\n40-44: 1\n55-59: 3\n70-74: 2"
        )

    def test_no_bins(self, templates) -> None:
        assert build_population_prompt(templates, []).user_text == "Age groups:\n"


class TestBuildPrompts:
    def test_is_deterministic(self, sample_records, templates) -> None:
        cohort = derive_cohort(sample_records, "101").cohort
        bins = build_age_histogram(cohort)
        assert build_prompts(templates, cohort, bins) == build_prompts(templates, cohort, bins)

    def test_uses_edited_templates(self, scenario_records, templates) -> None:
        cohort = derive_cohort(scenario_records, "1").cohort
        edited = templates.with_field("user_prompt_template", "Compare")
        patient, _ = build_prompts(edited, cohort, build_age_histogram(cohort))
        assert patient.user_text == "Compare A:\n1. y"


class TestDefaultTemplates:
    def test_all_fields_populated(self) -> None:
        defaults = default_templates()
        assert isinstance(defaults, PromptTemplates)
        assert TEMPLATE_FIELDS == PromptTemplates.field_names()
        assert all(getattr(defaults, name) for name in TEMPLATE_FIELDS)

    def test_fresh_equal_instances(self) -> None:
        assert default_templates() == default_templates()
