"""Session state, recompute wiring and construction from settings."""

from __future__ import annotations

from ehr_cohort.session.factory import create_session
from ehr_cohort.session.state import AnalysisSession, SessionState

__all__ = ["AnalysisSession", "SessionState", "create_session"]
