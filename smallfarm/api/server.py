from __future__ import annotations

import uuid
from functools import partial
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..application.services.crop_service import (
    CropDetailsProvider,
    generate_crop_details,
    seed_system_crops,
)
from ..domain.errors import NotFoundError
from ..infra.auth import SessionVerifier, build_session_verifier
from ..infra.config import AppConfig, get_config
from ..infra.farm_store import FarmStore, build_farm_store
from ..observability.logging_utils import (
    init_logging,
    log_error,
    log_event,
    reset_trace_id,
    set_trace_id,
)
from ..schemas import HealthResponse
from .routes import crops, fields_beds, schedules


TRACE_HEADER = "X-Request-ID"


def create_app(
    *,
    store: Optional[FarmStore] = None,
    verifier: Optional[SessionVerifier] = None,
    crop_details: Optional[CropDetailsProvider] = None,
    settings: Optional[AppConfig] = None,
) -> FastAPI:
    """
    Build the API with its collaborators.

    Anything not passed in is built from the environment configuration.
    """
    settings = settings or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_logging(log_path=settings.log_path)
        if settings.seed_system_crops:
            seed_system_crops(app.state.store)
        log_event("api_started", store=app.state.store.name)
        yield
        log_event("api_stopped")

    app = FastAPI(title="SmallFarm Schedules", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store or build_farm_store(settings)
    app.state.verifier = verifier or build_session_verifier(settings)
    app.state.crop_details = crop_details or partial(generate_crop_details, cfg=settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def _trace_requests(request: Request, call_next):
        trace_id = request.headers.get(TRACE_HEADER) or uuid.uuid4().hex
        request.state.trace_id = trace_id
        token = set_trace_id(trace_id)
        try:
            response = await call_next(request)
        finally:
            reset_trace_id(token)
        response.headers[TRACE_HEADER] = trace_id
        return response

    @app.exception_handler(NotFoundError)
    async def _not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        trace_id = getattr(request.state, "trace_id", "unknown")
        log_error(
            "request_failed",
            exc,
            path=request.url.path,
            method=request.method,
            request_trace_id=trace_id,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "traceId": trace_id},
            headers={TRACE_HEADER: trace_id},
        )

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(status="ok", store=app.state.store.name)

    app.include_router(crops.router)
    app.include_router(fields_beds.router)
    app.include_router(schedules.router)
    return app
