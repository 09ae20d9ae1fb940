# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Observability API — health check with backend reachability and metrics.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from franchise_comms import __version__
from franchise_comms.api.deps import get_backend
from franchise_comms.core.metrics import service_metrics
from franchise_comms.runtime.supabase_client import SupabaseBackend

router = APIRouter(tags=["observability"])


@router.get("/health")
async def health_check(backend: SupabaseBackend = Depends(get_backend)):
    """Enhanced health check with component status."""
    reachable = await backend.health_check()
    return {
        "status": "ok",
        "version": __version__,
        "backend": "reachable" if reachable else "unreachable",
        "service_role_configured": backend.has_service_role,
        "metrics": service_metrics.snapshot(),
    }
