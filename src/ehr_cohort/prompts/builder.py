"""Prompt composition for the two summarization calls.

Plain string concatenation, no I/O; identical inputs give byte-identical
prompts.  Layout of the user texts::

    patient:     "{user_prompt_template} {category}:\\n1. {note}\\n2. {note}"
    population:  "{population_user_prompt}\\n{range}: {count}\\n{range}: {count}"
"""

from __future__ import annotations

from typing import Sequence

from ehr_cohort.models import AgeBin, Cohort, PromptPair, PromptTemplates


def build_patient_prompt(templates: PromptTemplates, cohort: Cohort) -> PromptPair:
    """Patient-level prompt: numbered diagnosis notes of the peers, 1-based."""
    notes = "\n".join(
        f"{i}. {peer.diagnosis_note}" for i, peer in enumerate(cohort.peers, start=1)
    )
    user_text = f"{templates.user_prompt_template} {cohort.category}:\n{notes}"
    return PromptPair(system_text=templates.system_prompt, user_text=user_text)


def build_population_prompt(templates: PromptTemplates, bins: Sequence[AgeBin]) -> PromptPair:
    """Population-level prompt: one ``range: count`` line per bin."""
    distribution = "\n".join(f"{b.range_label}: {b.count}" for b in bins)
    user_text = f"{templates.population_user_prompt}\n{distribution}"
    return PromptPair(system_text=templates.population_system_prompt, user_text=user_text)


def build_prompts(
    templates: PromptTemplates,
    cohort: Cohort,
    bins: Sequence[AgeBin],
) -> tuple[PromptPair, PromptPair]:
    """Return ``(patient_prompt, population_prompt)``."""
    return build_patient_prompt(templates, cohort), build_population_prompt(templates, bins)
