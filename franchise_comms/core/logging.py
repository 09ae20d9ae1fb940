# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Structured Logging — JSON lines carrying the request's trace id.

TraceMiddleware binds the trace id for the duration of a request; the
TraceContextFilter copies it onto every record emitted meanwhile, so call
sites only pass tenant_id / user_id through ``extra=``.
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar, Token
from typing import Optional

_trace_id: ContextVar[Optional[str]] = ContextVar("franchise_trace_id", default=None)

CONTEXT_KEYS = ("trace_id", "tenant_id", "user_id")


def bind_trace_id(trace_id: str) -> Token:
    return _trace_id.set(trace_id)


def reset_trace_id(token: Token) -> None:
    _trace_id.reset(token)


def current_trace_id() -> Optional[str]:
    return _trace_id.get()


class TraceContextFilter(logging.Filter):
    """Fill record.trace_id from the active request when the call site did not."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "trace_id", None):
            record.trace_id = current_trace_id()
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def __init__(self, service: Optional[str] = None):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }
        if self.service:
            log_entry["service"] = self.service
        for key in CONTEXT_KEYS:
            val = getattr(record, key, None)
            if val:
                log_entry[key] = val

        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", service: Optional[str] = None) -> None:
    """Route the root logger to stdout as JSON lines."""
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(TraceContextFilter())
    handler.setFormatter(StructuredFormatter(service=service))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)
