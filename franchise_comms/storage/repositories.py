# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Repository Layer — tenant-scoped access to the managed backend's tables.

Each repository takes a SupabaseClient (user-scoped or admin) and provides
typed access. Row-level security decides what the caller can see; this layer
only interprets the three possible outcomes of a call:

  - the call raised (transport failure)
  - the backend returned an error object
  - the backend returned no row

Lookups collapse all three into ``None``. Listings and mutations raise
StorageError, or UniqueViolation when the backend reports error code 23505.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from franchise_comms.core.metrics import service_metrics
from franchise_comms.runtime.supabase_client import (
    BackendError,
    QueryResult,
    SupabaseClient,
    ilike_any,
)

logger = logging.getLogger("franchise.storage")

Row = Dict[str, Any]


class StorageError(Exception):
    """A mutation failed; ``error`` holds the backend error when there is one."""

    def __init__(self, message: str, error: Optional[BackendError] = None):
        self.message = message
        self.error = error
        super().__init__(message)


class UniqueViolation(StorageError):
    """The backend rejected a write on a unique constraint."""


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def _lookup(coro, what: str) -> Any:
    """Await a read; return its data, or None when absent, denied or failed."""
    try:
        result: QueryResult = await coro
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("[storage] %s lookup raised: %s", what, e)
        service_metrics.inc("backend_errors")
        return None
    if result.error is not None:
        if not result.error.is_no_rows:
            service_metrics.inc("backend_errors")
            logger.info("[storage] %s lookup error code=%s", what, result.error.code)
        return None
    return result.data or None


async def _fetch(coro, what: str) -> QueryResult:
    """Await a listing read; failures raise StorageError instead of looking empty."""
    try:
        result: QueryResult = await coro
    except (httpx.HTTPError, ValueError) as e:
        logger.error("[storage] %s listing raised: %s", what, e)
        service_metrics.inc("backend_errors")
        raise StorageError(f"{what} listing failed: {e}") from e
    if result.error is not None:
        service_metrics.inc("backend_errors")
        logger.error("[storage] %s listing failed code=%s", what, result.error.code)
        raise StorageError(f"{what} listing failed: {result.error.message}", result.error)
    return result


async def _mutate(coro, what: str) -> QueryResult:
    """Await a write; raise StorageError / UniqueViolation on failure."""
    try:
        result: QueryResult = await coro
    except (httpx.HTTPError, ValueError) as e:
        logger.error("[storage] %s raised: %s", what, e)
        service_metrics.inc("backend_errors")
        raise StorageError(f"{what} failed: {e}") from e
    if result.error is not None:
        service_metrics.inc("backend_errors")
        logger.error(
            "[storage] %s failed code=%s message=%s", what, result.error.code, result.error.message,
        )
        if result.error.is_unique_violation:
            raise UniqueViolation(f"{what} violates a unique constraint", result.error)
        raise StorageError(f"{what} failed: {result.error.message}", result.error)
    return result


def _first(data: Any) -> Optional[Row]:
    if isinstance(data, list):
        return data[0] if data else None
    return data or None


# ── Post Repository ─────────────────────────────────────────

POST_FEED_COLUMNS = "*, author:users!author_user_id(id, name, email)"


class PostRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    async def get_ref(self, post_id: str) -> Optional[Row]:
        """Return {id, tenant_id} when the post exists and is visible."""
        return await _lookup(
            self.client.select("posts", "id, tenant_id", {"id": post_id}, single=True),
            "post",
        )

    async def get_targeting(self, post_id: str) -> Optional[Row]:
        return await _lookup(
            self.client.select(
                "posts", "id, tenant_id, author_user_id, targeting", {"id": post_id}, single=True,
            ),
            "post",
        )

    async def feed(
        self,
        limit: int,
        offset: int = 0,
        post_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Row], int]:
        """Newest-first page of visible posts plus the total matching count."""
        result = await _fetch(
            self.client.select(
                "posts", POST_FEED_COLUMNS,
                {"post_type": post_type} if post_type else None,
                or_filter=ilike_any(("title", "body"), search) if search else None,
                order="created_at.desc",
                limit=limit,
                offset=offset,
                count=True,
            ),
            "posts",
        )
        rows = result.data or []
        total = result.count if result.count is not None else len(rows)
        return rows, total

    async def create(self, record: Row) -> Optional[Row]:
        result = await _mutate(
            self.client.insert("posts", record, POST_FEED_COLUMNS, single=True),
            "post insert",
        )
        return _first(result.data)

    async def authored_ids(self, user_id: str, post_ids: Sequence[str]) -> List[str]:
        """The subset of post_ids written by user_id."""
        result = await _fetch(
            self.client.select(
                "posts", "id", {"author_user_id": user_id}, in_filters={"id": post_ids},
            ),
            "authored posts",
        )
        return [row["id"] for row in result.data or []]

    async def targeting_by_id(self, post_ids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        result = await _fetch(
            self.client.select("posts", "id, targeting", in_filters={"id": post_ids}),
            "post targeting",
        )
        return {row["id"]: row.get("targeting") or {} for row in result.data or []}


# ── Read Receipt Repository ─────────────────────────────────

class ReadReceiptRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    async def upsert(
        self,
        tenant_id: str,
        post_id: str,
        user_id: str,
        read_at: Optional[str] = None,
    ) -> Optional[Row]:
        """Create the receipt or refresh its read_at; one row per (post, user)."""
        record = {
            "tenant_id": tenant_id,
            "post_id": post_id,
            "user_id": user_id,
            "read_at": read_at or utc_now_iso(),
        }
        result = await _mutate(
            self.client.upsert("read_receipts", record, on_conflict="post_id,user_id"),
            "read receipt upsert",
        )
        return _first(result.data)


# ── Tenant Repository ───────────────────────────────────────

class TenantRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    async def create(self, name: str, slug: str, status: str = "trial") -> Row:
        result = await _mutate(
            self.client.insert(
                "tenants", {"name": name, "slug": slug, "status": status}, single=True,
            ),
            "tenant insert",
        )
        return _first(result.data)

    async def delete(self, tenant_id: str) -> None:
        await _mutate(self.client.delete("tenants", {"id": tenant_id}), "tenant delete")

    async def sample(self, limit: int = 1) -> QueryResult:
        """Raw read used by the admin diagnostic; errors are returned, not raised."""
        return await self.client.select("tenants", "id, name", limit=limit)


# ── Membership Repository ───────────────────────────────────

class MembershipRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    async def create(
        self,
        user_id: str,
        tenant_id: str,
        role: str = "tenant_admin",
        status: str = "active",
    ) -> Optional[Row]:
        result = await _mutate(
            self.client.insert(
                "memberships",
                {"user_id": user_id, "tenant_id": tenant_id, "role": role, "status": status},
            ),
            "membership insert",
        )
        return _first(result.data)

    async def first_active_tenant_slug(self, user_id: str) -> Optional[str]:
        rows = await _lookup(
            self.client.select(
                "memberships", "tenant:tenants(slug)",
                {"user_id": user_id, "status": "active"}, limit=1,
            ),
            "membership",
        )
        first = _first(rows)
        tenant = (first or {}).get("tenant") or {}
        return tenant.get("slug") or None

    async def active_membership(self, user_id: str) -> Optional[Row]:
        """First active membership with its tenant embedded (``tenant`` may be None)."""
        rows = await _lookup(
            self.client.select(
                "memberships",
                "id, role, tenant_id, tenant:tenants(id, name, slug, current_plan, status, settings)",
                {"user_id": user_id, "status": "active"}, limit=1,
            ),
            "current membership",
        )
        return _first(rows)


# ── User Profile Repository ─────────────────────────────────

PROFILE_COLUMNS = "id, email, name, avatar_url, created_at, updated_at"


class UserProfileRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    async def get(self, user_id: str) -> Optional[Row]:
        return await _lookup(
            self.client.select("users", PROFILE_COLUMNS, {"id": user_id}, single=True),
            "user profile",
        )


# ── Reaction Repository ─────────────────────────────────────

class ReactionRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    async def upsert(self, tenant_id: str, post_id: str, user_id: str, reaction_type: str) -> None:
        """Set the caller's reaction on a post, replacing any previous type."""
        await _mutate(
            self.client.upsert(
                "reactions",
                {"tenant_id": tenant_id, "post_id": post_id, "user_id": user_id, "type": reaction_type},
                on_conflict="post_id,user_id",
            ),
            "reaction upsert",
        )

    async def delete(self, post_id: str, user_id: str) -> None:
        await _mutate(
            self.client.delete("reactions", {"post_id": post_id, "user_id": user_id}),
            "reaction delete",
        )


# ── Comment Repository ──────────────────────────────────────

COMMENT_COLUMNS = (
    "id, tenant_id, post_id, parent_comment_id, author_user_id, body, body_rich, created_at"
)


class CommentRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    async def get_in_post(self, comment_id: str, post_id: str) -> Optional[Row]:
        return await _lookup(
            self.client.select(
                "comments", "id, post_id, tenant_id",
                {"id": comment_id, "post_id": post_id}, single=True,
            ),
            "parent comment",
        )

    async def create(self, record: Row) -> Optional[Row]:
        result = await _mutate(
            self.client.insert("comments", record, COMMENT_COLUMNS),
            "comment insert",
        )
        return _first(result.data)


# ── Request Repository ──────────────────────────────────────

class RequestRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    async def list(self, status: Optional[str] = None) -> List[Row]:
        result = await _fetch(
            self.client.select(
                "requests", "*", {"status": status} if status else None,
                order="created_at.desc",
            ),
            "requests",
        )
        return result.data or []

    async def create(self, record: Row) -> Optional[Row]:
        result = await _mutate(self.client.insert("requests", record), "request insert")
        return _first(result.data)


# ── Location Repositories ───────────────────────────────────

class LocationRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    async def list(self, status: Optional[str] = None) -> List[Row]:
        result = await _fetch(
            self.client.select("locations", "*", {"status": status} if status else None),
            "locations",
        )
        return result.data or []

    async def visible_ids(self, location_ids: Sequence[str]) -> Optional[List[str]]:
        """Which of location_ids the caller can see; None when the check itself failed."""
        try:
            result = await _fetch(
                self.client.select("locations", "id", in_filters={"id": location_ids}),
                "location access",
            )
        except StorageError:
            return None
        return [row["id"] for row in result.data or []]

    async def count_visible(self) -> Optional[int]:
        try:
            result = await _fetch(
                self.client.select("locations", "id", limit=1, count=True),
                "location count",
            )
        except StorageError:
            return None
        return result.count


class LocationMembershipRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    async def location_ids(self, user_id: str) -> List[str]:
        result = await _fetch(
            self.client.select("location_memberships", "location_id", {"user_id": user_id}),
            "location memberships",
        )
        return [row["location_id"] for row in result.data or []]
