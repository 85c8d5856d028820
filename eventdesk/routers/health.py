from fastapi import APIRouter, Request

from eventdesk.domain.records import format_timestamp, utc_now
from eventdesk.routers.deps import admin_service

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health(request: Request):
    report = admin_service(request).health()
    return {
        "status": "OK",
        "database": "connected" if report.connected else "disconnected",
        "backend": report.backend,
        "timestamp": format_timestamp(utc_now()),
        "registrations": report.registration_count,
        "feedbacks": report.feedback_count,
        "message": "MTN GITEX Nigeria API is running",
    }
