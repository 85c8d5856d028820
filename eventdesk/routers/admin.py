"""Admin dashboard endpoints: login, stats, registration search, feedback list."""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Request

from eventdesk.routers.deps import admin_service, auth_service, failure, settings
from eventdesk.services.auth_service import InvalidCredentialsError

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/login")
def login(request: Request, payload: Optional[dict[str, Any]] = Body(None)):
    data = payload or {}
    try:
        token = auth_service(request).login(data.get("username"), data.get("password"))
    except InvalidCredentialsError:
        return failure("Invalid credentials", 401)
    return {"success": True, "message": "Login successful", "token": token}


@router.get("/stats")
def stats(request: Request):
    result = admin_service(request).get_stats()
    return {
        "registrations": result.registration_count,
        "feedbacks": result.feedback_count,
        "admins": settings(request).admin_count,
    }


@router.get("/registrations")
def registrations(request: Request, search: str = ""):
    return [record.to_document() for record in admin_service(request).list_registrations(search)]


@router.get("/feedbacks")
def feedbacks(request: Request):
    return [view.to_document() for view in admin_service(request).list_feedbacks()]
