# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Requests — structured data collection attached to a post.

Tenant staff attach a request (a list of typed fields) to a post; the
targeted locations answer it. Listing narrows the caller-visible requests
to the ones they created or the ones aimed at their locations.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from franchise_comms.core.errors import NotFoundError, UpstreamError
from franchise_comms.core.identity import AuthUser
from franchise_comms.runtime.supabase_client import SupabaseClient
from franchise_comms.storage.repositories import (
    LocationMembershipRepository,
    LocationRepository,
    MembershipRepository,
    PostRepository,
    RequestRepository,
    Row,
    StorageError,
)

logger = logging.getLogger("franchise.services.requests")

AUTHOR_ROLES = ("tenant_admin", "tenant_staff")
LOCATION_TARGETS = ("locations", "specific_locations")


def targets_any(targeting: Dict[str, Any], location_ids: List[str]) -> bool:
    """True when a post's targeting reaches at least one of location_ids."""
    if targeting.get("type") == "global":
        return True
    return bool(set(targeting.get("location_ids") or []) & set(location_ids))


class RequestService:
    def __init__(self, client: SupabaseClient):
        self.requests = RequestRepository(client)
        self.posts = PostRepository(client)
        self.memberships = MembershipRepository(client)
        self.locations = LocationRepository(client)
        self.location_memberships = LocationMembershipRepository(client)

    async def list(
        self, user: AuthUser, status: Optional[str] = None, role: Optional[str] = None,
    ) -> List[Row]:
        try:
            rows = await self.requests.list(status)
            if rows and role == "created":
                rows = await self._created_by(user, rows)
            elif rows and role == "assigned":
                rows = await self._assigned_to(user, rows)
        except StorageError as e:
            raise UpstreamError("Failed to retrieve requests") from e
        return rows

    async def _created_by(self, user: AuthUser, rows: List[Row]) -> List[Row]:
        authored = set(await self.posts.authored_ids(user.id, _post_ids(rows)))
        return [r for r in rows if r.get("post_id") in authored]

    async def _assigned_to(self, user: AuthUser, rows: List[Row]) -> List[Row]:
        location_ids = await self.location_memberships.location_ids(user.id)
        targeting = await self.posts.targeting_by_id(_post_ids(rows))
        return [
            r for r in rows
            if targets_any(targeting.get(r.get("post_id"), {}), location_ids)
        ]

    async def create(
        self,
        user: AuthUser,
        post_id: str,
        title: str,
        fields: List[Dict[str, Any]],
        description: Optional[str] = None,
        due_date: Optional[str] = None,
    ) -> Row:
        membership = await self.memberships.active_membership(user.id)
        if not membership:
            raise NotFoundError("No active membership found")
        if membership.get("role") not in AUTHOR_ROLES:
            raise NotFoundError("Only corporate staff can create requests")
        tenant_id = (membership.get("tenant") or {}).get("id")
        if not tenant_id:
            raise NotFoundError("Invalid tenant membership")

        post = await self.posts.get_targeting(post_id)
        if not post:
            raise NotFoundError("post not found or access denied")

        total = await self._target_count(post.get("targeting") or {})
        record = {
            "tenant_id": tenant_id,
            "post_id": post_id,
            "title": title,
            "description": description or None,
            "fields": fields,
            "due_date": due_date or None,
            "status": "active",
            "completion_stats": {
                "total_locations": total,
                "submitted": 0,
                "pending": total,
                "overdue": 0,
            },
        }
        try:
            created = await self.requests.create(record)
        except StorageError as e:
            raise UpstreamError("Failed to create request") from e
        if not created:
            raise UpstreamError("Failed to create request")
        logger.info(
            "Request %s created on post %s", created.get("id"), post_id,
            extra={"tenant_id": tenant_id, "user_id": user.id},
        )
        return created

    async def _target_count(self, targeting: Dict[str, Any]) -> int:
        if targeting.get("type") in LOCATION_TARGETS:
            return len(targeting.get("location_ids") or [])
        if targeting.get("type") == "global":
            return await self.locations.count_visible() or 0
        return 0


def _post_ids(rows: List[Row]) -> List[str]:
    return sorted({r["post_id"] for r in rows if r.get("post_id")})
