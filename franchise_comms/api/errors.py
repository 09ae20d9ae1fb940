# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
API Error Handling — FastAPI exception handlers for the error envelope.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from franchise_comms.core.errors import APIError, BadRequestError, UpstreamError
from franchise_comms.core.metrics import service_metrics

logger = logging.getLogger("franchise.api.errors")


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Invalid JSON body"
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    field = ".".join(loc)
    msg = first.get("msg", "is invalid")
    return f"{field}: {msg}" if field else msg


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Global exception handler for APIError."""
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc.message,
            extra={"trace_id": getattr(request.state, "trace_id", None)},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


async def validation_error_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Malformed bodies and wrong field types become a 400 envelope."""
    logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content=BadRequestError(_first_validation_message(exc)).to_response(),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all — never leaks internal details."""
    service_metrics.inc("unhandled_errors")
    logger.error(
        "Unhandled exception on %s: %s", request.url.path, exc,
        exc_info=exc,
        extra={"trace_id": getattr(request.state, "trace_id", None)},
    )
    return JSONResponse(status_code=500, content=UpstreamError().to_response())
