"""Summarizer service protocol: the contract all backends implement."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ISummarizerService(Protocol):
    """A chat-completion capability: system + user text in, plain text out.

    Implementations raise :class:`~ehr_cohort.exceptions.SummarizerError`
    (or a subclass) on any failure; callers rely on nothing more specific.
    """

    async def summarize(self, system_text: str, user_text: str) -> str:
        """Return the model's reply to one system/user message pair."""
        ...
