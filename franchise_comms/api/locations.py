# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Locations API — locations the caller can see.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from franchise_comms.api.deps import SessionResolver, get_backend, get_session_resolver
from franchise_comms.api.validation import validate_location_status
from franchise_comms.runtime.supabase_client import SupabaseBackend
from franchise_comms.services.locations import list_locations

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("")
async def get_locations(
    status: Optional[str] = Query(None),
    session: SessionResolver = Depends(get_session_resolver),
    backend: SupabaseBackend = Depends(get_backend),
):
    status = validate_location_status(status)
    user = await session.require_user()
    return {"data": await list_locations(backend.for_user(user.access_token), status)}
