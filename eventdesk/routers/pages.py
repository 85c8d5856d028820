"""
Catch-all handling: JSON 404 for unknown API paths, frontend files otherwise.

The router must be included after every other router; ``FrontendFiles`` is
mounted at ``/`` after that.
"""

from __future__ import annotations

import logging
import os

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, HTMLResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException

from eventdesk.routers.deps import failure

router = APIRouter(tags=["pages"])
logger = logging.getLogger(__name__)

ENTRY_DOCUMENT = "index.html"
PLACEHOLDER_HTML = (
    "<!doctype html><html lang='en'><head><meta charset='utf-8'>"
    "<title>MTN GITEX Nigeria</title></head>"
    "<body><main><h1>MTN GITEX Nigeria</h1><p>Frontend not installed.</p></main></body></html>"
)


@router.api_route("/api/{rest:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def unknown_api(request: Request, rest: str):
    path = request.url.path
    logger.info("Unknown API endpoint: %s", path)
    return failure(f"API endpoint not found: {path}", 404, error="API endpoint not found", endpoint=path)


class FrontendFiles(StaticFiles):
    """Static frontend that answers unknown paths with the entry document."""

    async def check_config(self) -> None:
        # the frontend may be deployed after the API starts
        if self.directory is not None and os.path.isdir(self.directory):
            await super().check_config()

    async def get_response(self, path, scope):
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404:
                raise
        entry = os.path.join(str(self.directory), ENTRY_DOCUMENT)
        if os.path.isfile(entry):
            return FileResponse(entry, media_type="text/html")
        return HTMLResponse(PLACEHOLDER_HTML)
