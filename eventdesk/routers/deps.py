"""Shared helpers for routers: service lookup on app.state and JSON envelopes."""
from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse


def _state_attr(request: Request, name: str):
    value = getattr(getattr(request.app, "state", None), name, None)
    if value is None:
        raise RuntimeError(f"{name} is not configured")
    return value


def submission_service(request: Request):
    return _state_attr(request, "submission_service")


def admin_service(request: Request):
    return _state_attr(request, "admin_service")


def auth_service(request: Request):
    return _state_attr(request, "auth_service")


def settings(request: Request):
    return _state_attr(request, "settings")


def failure(message: str, status_code: int, **extra) -> JSONResponse:
    body = {"success": False, "message": message}
    body.update(extra)
    return JSONResponse(body, status_code=status_code)
