# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Franchise Comms Application Entry Point.

FastAPI app with lifespan, middleware, error handlers and all API routers.
create_app() takes the settings and backend explicitly so tests can pass a
backend wired to a fake transport.

Entry point: uvicorn franchise_comms.main:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from franchise_comms import __version__
from franchise_comms.core.config import FranchiseSettings, settings as default_settings
from franchise_comms.core.errors import APIError
from franchise_comms.core.logging import setup_logging
from franchise_comms.runtime.supabase_client import SupabaseBackend
from franchise_comms.api.errors import (
    api_error_handler,
    unhandled_error_handler,
    validation_error_handler,
)
from franchise_comms.api.middleware import TraceMiddleware
from franchise_comms.api.posts import router as posts_router
from franchise_comms.api.tenants import router as tenants_router
from franchise_comms.api.requests import router as requests_router
from franchise_comms.api.locations import router as locations_router
from franchise_comms.api.auth import router as auth_router, callback_router
from franchise_comms.api.admin import router as admin_router
from franchise_comms.api.observability import router as observability_router

logger = logging.getLogger("franchise.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage startup/shutdown of service resources."""
    setup_logging(app.state.settings.LOG_LEVEL, service=app.state.settings.APP_NAME)
    if not app.state.backend.has_service_role:
        logger.warning("SUPABASE_SERVICE_ROLE_KEY not set; tenant creation is disabled")
    logger.info("[franchise] API ready (env=%s)", app.state.settings.APP_ENV)
    yield
    await app.state.backend.close()
    logger.info("[franchise] Shutdown complete")


def create_app(
    settings: Optional[FranchiseSettings] = None,
    backend: Optional[SupabaseBackend] = None,
) -> FastAPI:
    settings = settings or default_settings
    app = FastAPI(
        title="Franchise Communications API",
        description="Multi-tenant franchise communications backend",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.backend = backend or SupabaseBackend.from_settings(settings)

    # ── Middleware ───────────────────────────────────────────────
    app.add_middleware(TraceMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error Handlers ──────────────────────────────────────────
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # ── Routes ──────────────────────────────────────────────────
    app.include_router(posts_router, prefix="/api")
    app.include_router(tenants_router, prefix="/api")
    app.include_router(requests_router, prefix="/api")
    app.include_router(locations_router, prefix="/api")
    app.include_router(auth_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")
    app.include_router(callback_router)
    app.include_router(observability_router)
    return app


app = create_app()
