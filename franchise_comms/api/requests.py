# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Requests API — list and create data-collection requests.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from franchise_comms.api.deps import SessionResolver, get_backend, get_session_resolver
from franchise_comms.api.validation import validate_new_request, validate_request_filters
from franchise_comms.runtime.supabase_client import SupabaseBackend
from franchise_comms.services.requests import RequestService

router = APIRouter(prefix="/requests", tags=["requests"])


class RequestCreateRequest(BaseModel):
    post_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    fields: Optional[Any] = None
    due_date: Optional[str] = None


@router.get("")
async def list_requests(
    status: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    session: SessionResolver = Depends(get_session_resolver),
    backend: SupabaseBackend = Depends(get_backend),
):
    """Visible requests, newest first; role narrows to created or assigned."""
    status, role = validate_request_filters(status, role)
    user = await session.require_user()
    rows = await RequestService(backend.for_user(user.access_token)).list(
        user, status=status, role=role,
    )
    return {"data": rows}


@router.post("", status_code=201)
async def create_request(
    req: RequestCreateRequest,
    session: SessionResolver = Depends(get_session_resolver),
    backend: SupabaseBackend = Depends(get_backend),
):
    validate_new_request(req.post_id, req.title, req.fields, req.due_date)
    user = await session.require_user()
    return await RequestService(backend.for_user(user.access_token)).create(
        user, req.post_id, req.title, req.fields,
        description=req.description, due_date=req.due_date,
    )
