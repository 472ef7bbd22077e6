"""Global exception handlers mapping domain exceptions to HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ehr_cohort.exceptions import (
    DataSourceError,
    EHRCohortError,
    ExportError,
    SessionStateError,
)


def register_error_handlers(app: FastAPI) -> None:
    """Register exception-to-HTTP-status mappings."""

    @app.exception_handler(SessionStateError)
    async def handle_session_state(request: Request, exc: SessionStateError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"error": str(exc), "type": "session_state_error"})

    @app.exception_handler(ExportError)
    async def handle_export(request: Request, exc: ExportError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"error": str(exc), "type": "export_error"})

    @app.exception_handler(DataSourceError)
    async def handle_data_source(request: Request, exc: DataSourceError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"error": str(exc), "type": "data_source_error"})

    @app.exception_handler(EHRCohortError)
    async def handle_generic_error(request: Request, exc: EHRCohortError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": str(exc), "type": "ehr_cohort_error"})

    @app.exception_handler(KeyError)
    async def handle_not_found(request: Request, exc: KeyError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc), "type": "not_found"})
