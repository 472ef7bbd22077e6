"""Built-in prompt templates restored by ``restore_default_prompts()``."""

from __future__ import annotations

from ehr_cohort.models import PromptTemplates

_PROMPT_DATA: dict[str, str] = {
    "system_prompt": (
        "You are a clinical reasoning assistant. First, summarize the patient diagnosis "
        "in ~25 words. Then, give three reasonable guesses for the recovery time."
    ),
    "user_prompt_template": "Summarize the common patterns across these patients with",
    "population_system_prompt": "Summarize key population trend concisely.",
    "population_user_prompt": (
        "You are a medical data analyst. Summarize in around 20 words the most "
        "significant trend across the following age group distribution:"
    ),
}


def default_templates() -> PromptTemplates:
    return PromptTemplates(**_PROMPT_DATA)
