"""FastAPI route for contact-form submissions.

The body is read as raw JSON and handed to the ``ContactSubmissionHandler``
stored on ``app.state.handler`` at startup.  Schema validation happens inside
the handler so that every malformed body gets the same 400 response shape
instead of FastAPI's 422 error format.
"""

from __future__ import annotations

import json
from typing import Any

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from contact_relay.contact.handler import ContactSubmissionHandler

logger = structlog.get_logger()

router = APIRouter(tags=["contact"])


@router.post("/contact")
async def submit_contact(request: Request) -> JSONResponse:
    """Relay a contact-form submission to the site owner by email.

    Args:
        request: The incoming FastAPI request with a JSON object body.

    Returns:
        200, 400 or 500 with ``{"success": bool, "message": str}``.
    """
    handler: ContactSubmissionHandler = request.app.state.handler

    raw_body = await request.body()
    try:
        payload: Any = json.loads(raw_body) if raw_body else None
    except (ValueError, RecursionError):
        # JSONDecodeError and UnicodeDecodeError are ValueErrors
        logger.info("Contact request body is not valid JSON", body_length=len(raw_body))
        payload = None

    response = await handler.handle(payload)
    return JSONResponse(content=response.body(), status_code=response.status_code)
