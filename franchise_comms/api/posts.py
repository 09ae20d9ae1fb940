# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Posts API — the feed, post creation, and read receipts, reactions and
comments on a single post.

Every handler runs the same sequence: validate path/query/body, resolve the
session, then touch the backend under the caller's token.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from franchise_comms.api.deps import SessionResolver, get_backend, get_session_resolver
from franchise_comms.api.validation import (
    validate_comment_body,
    validate_new_post,
    validate_optional_uuid,
    validate_page,
    validate_post_type_filter,
    validate_reaction,
    validate_uuid,
)
from franchise_comms.runtime.supabase_client import SupabaseBackend
from franchise_comms.services.posts import PostService

router = APIRouter(prefix="/posts", tags=["posts"])


# ── Request Models ──────────────────────────────────────────

class PostCreateRequest(BaseModel):
    body: Optional[str] = None
    post_type: Optional[str] = None
    targeting: Optional[Any] = None
    title: Optional[str] = None
    body_rich: Optional[Dict[str, Any]] = None
    due_date: Optional[str] = None


class ReactionRequest(BaseModel):
    type: Optional[str] = None
    action: Optional[str] = None


class CommentRequest(BaseModel):
    body: Optional[str] = None
    body_rich: Optional[Dict[str, Any]] = None
    parent_comment_id: Optional[str] = None


# ── Endpoints ───────────────────────────────────────────────

@router.get("")
async def list_posts(
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    post_type: Optional[str] = Query(None, alias="type"),
    search: Optional[str] = Query(None),
    session: SessionResolver = Depends(get_session_resolver),
    backend: SupabaseBackend = Depends(get_backend),
):
    """Newest-first feed of visible posts with pagination."""
    page_size, start = validate_page(limit, offset)
    post_type = validate_post_type_filter(post_type)
    user = await session.require_user()
    return await PostService(backend.for_user(user.access_token)).feed(
        page_size, start, post_type=post_type, search=search or None,
    )


@router.post("", status_code=201)
async def create_post(
    req: PostCreateRequest,
    session: SessionResolver = Depends(get_session_resolver),
    backend: SupabaseBackend = Depends(get_backend),
):
    """Publish a post in the caller's tenant."""
    validate_new_post(req.body, req.post_type, req.targeting, req.title, req.due_date)
    user = await session.require_user()
    return await PostService(backend.for_user(user.access_token)).create(
        user, req.body, req.post_type, req.targeting,
        title=req.title, body_rich=req.body_rich, due_date=req.due_date,
    )


@router.post("/{post_id}/read")
async def mark_post_read(
    post_id: str,
    session: SessionResolver = Depends(get_session_resolver),
    backend: SupabaseBackend = Depends(get_backend),
):
    """Mark a post as read by the current user (idempotent)."""
    validate_uuid(post_id, "postId")
    user = await session.require_user()
    await PostService(backend.for_user(user.access_token)).mark_read(post_id, user)
    return {"message": "Post marked as read successfully"}


@router.post("/{post_id}/reactions")
async def react_to_post(
    post_id: str,
    req: ReactionRequest,
    session: SessionResolver = Depends(get_session_resolver),
    backend: SupabaseBackend = Depends(get_backend),
):
    """Add or remove the current user's reaction on a post."""
    validate_uuid(post_id, "postId")
    reaction_type, action = validate_reaction(req.type, req.action)
    user = await session.require_user()
    await PostService(backend.for_user(user.access_token)).react(
        post_id, user, reaction_type, action,
    )
    return {"message": "Reaction operation completed successfully"}


@router.post("/{post_id}/comments", status_code=201)
async def comment_on_post(
    post_id: str,
    req: CommentRequest,
    session: SessionResolver = Depends(get_session_resolver),
    backend: SupabaseBackend = Depends(get_backend),
):
    """Create a comment, optionally nested under another comment of the same post."""
    validate_uuid(post_id, "postId")
    body = validate_comment_body(req.body)
    parent_comment_id = validate_optional_uuid(req.parent_comment_id, "parent_comment_id")
    user = await session.require_user()
    return await PostService(backend.for_user(user.access_token)).comment(
        post_id, user, body,
        body_rich=req.body_rich,
        parent_comment_id=parent_comment_id,
    )
