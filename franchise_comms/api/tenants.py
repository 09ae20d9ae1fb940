# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Tenants API — onboarding (create tenant) and the caller's current tenant.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from franchise_comms.api.deps import SessionResolver, get_backend, get_session_resolver
from franchise_comms.api.validation import validate_tenant_name, validate_tenant_slug
from franchise_comms.runtime.supabase_client import SupabaseBackend
from franchise_comms.services.tenants import TenantService

router = APIRouter(prefix="/tenants", tags=["tenants"])


class TenantCreateRequest(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None


@router.post("", status_code=201)
async def create_tenant(
    req: TenantCreateRequest,
    session: SessionResolver = Depends(get_session_resolver),
    backend: SupabaseBackend = Depends(get_backend),
):
    """Create a tenant and make the caller its admin. Returns the tenant row."""
    name = validate_tenant_name(req.name)
    slug = validate_tenant_slug(req.slug)
    user = await session.require_user()
    tenant = await TenantService(backend).create(user, name=name, slug=slug)
    return JSONResponse(status_code=201, content=tenant)


@router.get("/current")
async def get_current_tenant(
    session: SessionResolver = Depends(get_session_resolver),
    backend: SupabaseBackend = Depends(get_backend),
):
    """Tenant behind the caller's active membership."""
    user = await session.require_user()
    return await TenantService(backend).current(user)
