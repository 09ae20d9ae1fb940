# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Posts — the feed, post creation, read receipts, reactions and comments.

All calls run on the caller's user-scoped client, so row-level security
decides which posts are visible. A post that is missing and a post the
caller may not see both surface as NotFoundError.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from franchise_comms.core.errors import BadRequestError, NotFoundError, UpstreamError
from franchise_comms.core.identity import AuthUser
from franchise_comms.runtime.supabase_client import SupabaseClient
from franchise_comms.storage.repositories import (
    CommentRepository,
    LocationRepository,
    MembershipRepository,
    PostRepository,
    ReactionRepository,
    ReadReceiptRepository,
    Row,
    StorageError,
)

logger = logging.getLogger("franchise.services.posts")

LOCATION_TARGETING = "specific_locations"


class PostService:
    def __init__(self, client: SupabaseClient):
        self.posts = PostRepository(client)
        self.receipts = ReadReceiptRepository(client)
        self.reactions = ReactionRepository(client)
        self.comments = CommentRepository(client)
        self.locations = LocationRepository(client)
        self.memberships = MembershipRepository(client)

    async def _require_post(self, post_id: str) -> Row:
        post = await self.posts.get_ref(post_id)
        if not post:
            raise NotFoundError("post not found or access denied")
        return post

    # ── Feed ─────────────────────────────────────────────────

    async def feed(
        self,
        limit: int,
        offset: int,
        post_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        try:
            rows, total = await self.posts.feed(limit, offset, post_type=post_type, search=search)
        except StorageError as e:
            raise UpstreamError("Failed to retrieve posts") from e
        return {
            "data": rows,
            "pagination": {
                "total": total,
                "limit": limit,
                "offset": offset,
                "has_more": offset + limit < total,
            },
        }

    async def create(
        self,
        user: AuthUser,
        body: str,
        post_type: str,
        targeting: Dict[str, Any],
        title: Optional[str] = None,
        body_rich: Optional[Dict[str, Any]] = None,
        due_date: Optional[str] = None,
    ) -> Row:
        """Publish a post in the caller's tenant; returns it with the author embedded."""
        if targeting.get("type") == LOCATION_TARGETING and targeting.get("location_ids"):
            await self._require_locations(targeting["location_ids"])

        membership = await self.memberships.active_membership(user.id)
        if not membership or not membership.get("tenant_id"):
            raise NotFoundError("No active tenant membership found")

        record = {
            "tenant_id": membership["tenant_id"],
            "author_user_id": user.id,
            "title": title or None,
            "body": body,
            "body_rich": body_rich,
            "post_type": post_type,
            "targeting": targeting,
            "due_date": due_date or None,
            "status": "published",
        }
        try:
            created = await self.posts.create(record)
        except StorageError as e:
            raise UpstreamError("Failed to create post") from e
        if not created:
            raise UpstreamError("Failed to create post")
        logger.info(
            "Post %s created (%s)", created.get("id"), post_type,
            extra={"tenant_id": membership["tenant_id"], "user_id": user.id},
        )
        return created

    async def _require_locations(self, location_ids: List[str]) -> None:
        visible = await self.locations.visible_ids(location_ids)
        if visible is None or set(location_ids) - set(visible):
            raise NotFoundError("Access denied to one or more specified locations")

    # ── Interactions ─────────────────────────────────────────

    async def mark_read(self, post_id: str, user: AuthUser) -> Optional[Row]:
        """Upsert the caller's read receipt; repeat calls only move read_at forward."""
        post = await self._require_post(post_id)
        try:
            receipt = await self.receipts.upsert(post["tenant_id"], post_id, user.id)
        except StorageError as e:
            raise UpstreamError("Failed to mark post as read") from e
        logger.info(
            "Post %s marked read", post_id,
            extra={"tenant_id": post["tenant_id"], "user_id": user.id},
        )
        return receipt

    async def react(self, post_id: str, user: AuthUser, reaction_type: str, action: str) -> None:
        post = await self._require_post(post_id)
        if action == "add":
            try:
                await self.reactions.upsert(post["tenant_id"], post_id, user.id, reaction_type)
            except StorageError as e:
                raise UpstreamError("Failed to add reaction") from e
        else:
            try:
                await self.reactions.delete(post_id, user.id)
            except StorageError as e:
                raise UpstreamError("Failed to remove reaction") from e

    async def comment(
        self,
        post_id: str,
        user: AuthUser,
        body: str,
        body_rich: Optional[Dict[str, Any]] = None,
        parent_comment_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a (possibly nested) comment and return it with its author."""
        post = await self._require_post(post_id)

        if parent_comment_id:
            parent = await self.comments.get_in_post(parent_comment_id, post_id)
            if not parent:
                raise BadRequestError(
                    "Invalid parent_comment_id: comment not found or access denied"
                )
        record = {
            "tenant_id": post["tenant_id"],
            "post_id": post_id,
            "parent_comment_id": parent_comment_id,
            "author_user_id": user.id,
            "body": body,
            "body_rich": body_rich,
        }
        try:
            created = await self.comments.create(record)
        except StorageError as e:
            raise UpstreamError("Failed to create comment") from e
        if not created:
            raise UpstreamError("Failed to create comment")

        return {
            "id": created.get("id"),
            "tenant_id": created.get("tenant_id"),
            "post_id": created.get("post_id"),
            "parent_comment_id": created.get("parent_comment_id"),
            "author_user_id": created.get("author_user_id"),
            "author": user.author_summary(),
            "body": created.get("body"),
            "body_rich": created.get("body_rich"),
            "attachments": [],
            "created_at": created.get("created_at"),
        }
