# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Admin Diagnostics — verifies the privileged client is configured and can read.

Responses here intentionally carry a ``details`` field with the backend's
error text; this endpoint exists for operators.
"""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from franchise_comms.api.deps import get_backend
from franchise_comms.runtime.supabase_client import SupabaseBackend
from franchise_comms.storage.repositories import TenantRepository

logger = logging.getLogger("franchise.api.admin")

router = APIRouter(tags=["admin"])


@router.get("/test-admin")
async def test_admin(backend: SupabaseBackend = Depends(get_backend)):
    """Check service-role configuration and run one read query."""
    if not backend.has_service_role:
        return JSONResponse(
            status_code=500,
            content={"error": "Missing SUPABASE_SERVICE_ROLE_KEY environment variable"},
        )

    try:
        result = await TenantRepository(backend.admin()).sample(limit=1)
    except httpx.HTTPError as e:
        logger.error("Admin client test query raised: %s", e)
        return JSONResponse(
            status_code=500,
            content={"error": "Unexpected error testing admin client", "details": str(e)},
        )

    if result.error is not None:
        return JSONResponse(
            status_code=500,
            content={
                "error": "Admin client test failed",
                "details": result.error.message,
                "code": result.error.code,
            },
        )

    return {
        "success": True,
        "message": "Admin client is working correctly",
        "serviceRoleConfigured": True,
        "testQueryWorked": True,
        "resultCount": len(result.data or []),
    }
