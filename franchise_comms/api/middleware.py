# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
API Middleware — trace id propagation and request accounting.
"""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from franchise_comms.api.errors import unhandled_error_handler
from franchise_comms.core.logging import bind_trace_id, reset_trace_id
from franchise_comms.core.metrics import service_metrics

logger = logging.getLogger("franchise.api")

TRACE_HEADER = "X-Trace-Id"


class TraceMiddleware(BaseHTTPMiddleware):
    """
    Accepts the caller's X-Trace-Id or mints one, binds it to the logging
    context for the request, echoes it on the response, and records
    status counts plus latency. Exceptions escaping the routes are turned
    into the generic 500 here so that response is traced and counted too.
    """

    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get(TRACE_HEADER) or str(uuid.uuid4())
        request.state.trace_id = trace_id
        token = bind_trace_id(trace_id)

        start = time.perf_counter()
        try:
            response: Response = await call_next(request)
        except Exception as exc:
            response = await unhandled_error_handler(request, exc)
        finally:
            reset_trace_id(token)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers[TRACE_HEADER] = trace_id
        service_metrics.inc("requests_total")
        service_metrics.inc(f"status_{response.status_code}")
        service_metrics.observe("request_latency_ms", elapsed_ms)
        logger.info(
            "[api] %s %s → %d (%.0fms)",
            request.method, request.url.path, response.status_code, elapsed_ms,
            extra={"trace_id": trace_id},
        )
        return response
