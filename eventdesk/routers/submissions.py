from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Request

from eventdesk.domain.validation import ValidationError
from eventdesk.repositories.base import StorageError
from eventdesk.routers.deps import failure, submission_service

router = APIRouter(prefix="/api", tags=["submissions"])
logger = logging.getLogger(__name__)


@router.post("/register")
def register(request: Request, payload: Optional[dict[str, Any]] = Body(None)):
    try:
        record_id = submission_service(request).submit_registration(payload or {})
    except ValidationError as exc:
        return failure(exc.message, 400)
    except StorageError as exc:
        logger.error("Registration error: %s", exc)
        return failure("Server error during registration", 500)
    return {"success": True, "message": "Registration successful", "id": record_id}


@router.post("/feedback")
def feedback(request: Request, payload: Optional[dict[str, Any]] = Body(None)):
    try:
        submission_service(request).submit_feedback(payload or {})
    except ValidationError as exc:
        return failure(exc.message, 400)
    except StorageError as exc:
        logger.error("Feedback error: %s", exc)
        return failure("Server error during feedback submission", 500)
    return {"success": True, "message": "Feedback submitted successfully"}
