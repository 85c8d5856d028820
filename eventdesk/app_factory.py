"""Application factory: wires settings, the Record Store and services into FastAPI."""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from eventdesk.core.config import Settings, get_settings
from eventdesk.core.logging_config import setup_logging
from eventdesk.repositories import RecordStore, build_store
from eventdesk.routers import admin as admin_router
from eventdesk.routers import health as health_router
from eventdesk.routers import pages as pages_router
from eventdesk.routers import submissions as submissions_router
from eventdesk.services.admin_service import AdminQueryService
from eventdesk.services.auth_service import AdminAuthService
from eventdesk.services.submission_service import SubmissionService

logger = logging.getLogger("eventdesk.http")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration for every request."""

    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response


async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse({"success": False, "message": "Request body must be a JSON object"}, status_code=400)


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"success": False, "message": "Internal server error"}, status_code=500)


def create_app(settings: Optional[Settings] = None, store: Optional[RecordStore] = None) -> FastAPI:
    """Build the API. Tests pass their own settings and store."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_file or None, settings.log_format)
    store = store or build_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            yield
        finally:
            store.close()
            logger.info("Storage backend %s closed", store.backend_name)

    app = FastAPI(title="MTN GITEX Nigeria Event API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.submission_service = SubmissionService(store, duplicate_email_policy=settings.duplicate_email_policy)
    app.state.admin_service = AdminQueryService(
        store,
        registration_limit=settings.registration_result_limit,
        feedback_limit=settings.feedback_result_limit,
    )
    app.state.auth_service = AdminAuthService.from_settings(settings)

    origins = list(settings.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_exception_handler(RequestValidationError, _invalid_body)
    app.add_exception_handler(Exception, _unhandled)

    app.include_router(submissions_router.router)
    app.include_router(admin_router.router)
    app.include_router(health_router.router)
    app.include_router(pages_router.router)
    app.mount("/", pages_router.FrontendFiles(directory=settings.frontend_dir, check_dir=False), name="frontend")

    logger.info("Storage backend: %s", store.backend_name)
    return app
