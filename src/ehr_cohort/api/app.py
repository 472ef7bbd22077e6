"""FastAPI application with lifespan management."""

from __future__ import annotations

import importlib.metadata
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from ehr_cohort.api.middleware.error_handler import register_error_handlers
from ehr_cohort.api.routes import health, session
from ehr_cohort.core.config import APIConfig, AppSettings
from ehr_cohort.core.startup_checks import validate_settings
from ehr_cohort.hooks import setup_logging
from ehr_cohort.session.factory import create_session


def _get_version() -> str:
    """Read package version from installed metadata, with dev fallback."""
    try:
        return importlib.metadata.version("ehr-cohort")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0-dev"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup/shutdown lifecycle."""
    settings = AppSettings()
    validate_settings(settings)
    setup_logging(settings.observability)

    app.state.settings = settings
    app.state.session = create_session(settings)
    yield


def create_app(*, with_lifespan: bool = True) -> FastAPI:
    """Build the app; tests pass ``with_lifespan=False`` and set ``app.state`` themselves."""
    api_config = APIConfig()
    application = FastAPI(
        title=api_config.title,
        description=api_config.description,
        version=_get_version(),
        lifespan=lifespan if with_lifespan else None,
    )
    register_error_handlers(application)
    application.include_router(health.router)
    application.include_router(session.router, prefix="/api")
    return application


app = create_app()
