# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Input Validation — pure checks over path, query and body values.

Each check raises BadRequestError on the first violation, before any
backend call is made. Patterns are applied with fullmatch so a trailing
newline never slips through.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from franchise_comms.core.errors import BadRequestError

# Accepts an optional lowercase-letter prefix ("post-", "user-") so synthetic
# test identifiers pass; this is not a strict RFC 4122 check.
LOOSE_UUID_RE = re.compile(
    r"([a-z]+-)?[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)
SLUG_RE = re.compile(r"[a-z0-9-]+")
# Prefix check only; offsets and fractional seconds may follow.
ISO_DATETIME_RE = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")

REACTION_TYPES = ("like", "acknowledge", "needs_attention")
REACTION_ACTIONS = ("add", "remove")
POST_TYPES = ("message", "announcement", "request", "performance_update")
REQUEST_STATUSES = ("active", "closed")
REQUEST_ROLES = ("created", "assigned")
REQUEST_FIELD_TYPES = ("text", "number", "date", "file", "select")
LOCATION_STATUSES = ("active", "inactive")

MAX_TITLE_LENGTH = 500
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def is_loose_uuid(value: Any) -> bool:
    return isinstance(value, str) and LOOSE_UUID_RE.fullmatch(value) is not None


def validate_uuid(value: Any, field: str) -> str:
    if not is_loose_uuid(value):
        raise BadRequestError(f"{field} must be a valid UUID format")
    return value


def validate_optional_uuid(value: Optional[Any], field: str) -> Optional[str]:
    if value is None or value == "":
        return None
    return validate_uuid(value, field)


# ── Tenants ─────────────────────────────────────────────────

def validate_tenant_name(name: Any) -> str:
    """Return the trimmed name; at least 2 characters after trimming."""
    if not isinstance(name, str) or len(name.strip()) < 2:
        raise BadRequestError("name must be at least 2 characters")
    return name.strip()


def validate_tenant_slug(slug: Any) -> str:
    if not isinstance(slug, str) or len(slug) < 2 or not SLUG_RE.fullmatch(slug):
        raise BadRequestError(
            "slug must be at least 2 characters and contain only "
            "lowercase letters, numbers, and hyphens"
        )
    return slug


# ── Post interactions ───────────────────────────────────────

def validate_reaction(reaction_type: Any, action: Any) -> tuple[str, str]:
    if not reaction_type or not isinstance(reaction_type, str):
        raise BadRequestError("type is required and must be a string")
    if not action or not isinstance(action, str):
        raise BadRequestError("action is required and must be a string")
    if reaction_type not in REACTION_TYPES:
        raise BadRequestError(f"type must be one of: {', '.join(REACTION_TYPES)}")
    if action not in REACTION_ACTIONS:
        raise BadRequestError(f"action must be one of: {', '.join(REACTION_ACTIONS)}")
    return reaction_type, action


def validate_comment_body(body: Any) -> str:
    if not isinstance(body, str) or not body.strip():
        raise BadRequestError("body is required and must be a non-empty string")
    return body.strip()


# ── Feed and post creation ──────────────────────────────────

def _parse_int(raw: Optional[str], default: int) -> Optional[int]:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return None


def validate_page(limit: Optional[str], offset: Optional[str]) -> tuple[int, int]:
    """Parse limit/offset query strings; limit defaults to 20, offset to 0."""
    parsed_limit = _parse_int(limit, DEFAULT_PAGE_SIZE)
    if parsed_limit is None or not 1 <= parsed_limit <= MAX_PAGE_SIZE:
        raise BadRequestError(f"limit parameter must be between 1 and {MAX_PAGE_SIZE}")
    parsed_offset = _parse_int(offset, 0)
    if parsed_offset is None or parsed_offset < 0:
        raise BadRequestError("offset parameter must be a non-negative number")
    return parsed_limit, parsed_offset


def validate_post_type_filter(post_type: Optional[str]) -> Optional[str]:
    if not post_type:
        return None
    if post_type not in POST_TYPES:
        raise BadRequestError(f"type parameter must be one of: {', '.join(POST_TYPES)}")
    return post_type


def validate_due_date(due_date: Any) -> Optional[str]:
    if due_date is None or due_date == "":
        return None
    if not isinstance(due_date, str) or not ISO_DATETIME_RE.match(due_date):
        raise BadRequestError("due_date must be in ISO 8601 format")
    return due_date


def validate_new_post(
    body: Any,
    post_type: Any,
    targeting: Any,
    title: Any = None,
    due_date: Any = None,
) -> None:
    if not body or not isinstance(body, str):
        raise BadRequestError("body is required")
    if not post_type:
        raise BadRequestError("post_type is required")
    if not targeting:
        raise BadRequestError("targeting is required")
    if not isinstance(targeting, dict):
        raise BadRequestError("targeting must be an object")
    if post_type not in POST_TYPES:
        raise BadRequestError(f"post_type must be one of: {', '.join(POST_TYPES)}")
    location_ids = targeting.get("location_ids")
    if location_ids is not None and not isinstance(location_ids, list):
        raise BadRequestError("targeting.location_ids must be an array")
    if title is not None and not isinstance(title, str):
        raise BadRequestError("title must be a string")
    if title and len(title) > MAX_TITLE_LENGTH:
        raise BadRequestError(f"title must not exceed {MAX_TITLE_LENGTH} characters")
    validate_due_date(due_date)


# ── Requests ────────────────────────────────────────────────

def validate_request_filters(
    status: Optional[str], role: Optional[str],
) -> tuple[Optional[str], Optional[str]]:
    if status and status not in REQUEST_STATUSES:
        raise BadRequestError('Invalid status parameter. Must be "active" or "closed"')
    if role and role not in REQUEST_ROLES:
        raise BadRequestError('Invalid role parameter. Must be "created" or "assigned"')
    return status or None, role or None


def validate_request_fields(fields: Any) -> List[Dict[str, Any]]:
    if not fields or not isinstance(fields, list):
        raise BadRequestError("fields array is required")
    for field in fields:
        if (
            not isinstance(field, dict)
            or not field.get("name")
            or not field.get("type")
            or not isinstance(field.get("required"), bool)
        ):
            raise BadRequestError("Each field must have name, type, and required properties")
        if field["type"] not in REQUEST_FIELD_TYPES:
            raise BadRequestError(
                f"Invalid field type. Must be one of: {', '.join(REQUEST_FIELD_TYPES)}"
            )
        if field["type"] == "select" and not isinstance(field.get("options"), list):
            raise BadRequestError("Select fields must have an options array")
    return fields


def validate_new_request(post_id: Any, title: Any, fields: Any, due_date: Any = None) -> None:
    if not post_id:
        raise BadRequestError("post_id is required")
    if not title or not isinstance(title, str):
        raise BadRequestError("title is required")
    if not fields or not isinstance(fields, list):
        raise BadRequestError("fields array is required")
    validate_uuid(post_id, "post_id")
    validate_request_fields(fields)
    validate_due_date(due_date)


# ── Locations ───────────────────────────────────────────────

def validate_location_status(status: Optional[str]) -> Optional[str]:
    if not status:
        return None
    if status not in LOCATION_STATUSES:
        raise BadRequestError('status parameter must be "active" or "inactive"')
    return status
