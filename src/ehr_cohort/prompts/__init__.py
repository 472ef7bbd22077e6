"""Prompt templates and prompt composition."""

from __future__ import annotations

from ehr_cohort.models import PromptTemplates
from ehr_cohort.prompts.builder import build_patient_prompt, build_population_prompt, build_prompts
from ehr_cohort.prompts.defaults import default_templates

TEMPLATE_FIELDS: tuple[str, ...] = PromptTemplates.field_names()

__all__ = [
    "TEMPLATE_FIELDS",
    "build_patient_prompt",
    "build_population_prompt",
    "build_prompts",
    "default_templates",
]
