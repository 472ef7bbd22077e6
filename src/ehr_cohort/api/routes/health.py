"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe: always returns 200 if the process is up."""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request) -> dict[str, str]:
    """Readiness probe: the session exists and records are loaded."""
    session = getattr(request.app.state, "session", None)
    if session is None:
        return {"status": "starting"}
    return {"status": "ready", "patients": str(len(session.store))}
