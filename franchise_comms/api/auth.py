# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Auth API — current user profile and the login callback redirect.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse

from franchise_comms.api.deps import SessionResolver, get_backend, get_session_resolver, get_settings
from franchise_comms.core.config import FranchiseSettings
from franchise_comms.runtime.supabase_client import SupabaseBackend
from franchise_comms.services.auth import complete_login, load_profile

router = APIRouter(prefix="/auth", tags=["auth"])

# Mounted without the /api prefix: the identity provider redirects here.
callback_router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
async def get_me(
    session: SessionResolver = Depends(get_session_resolver),
    backend: SupabaseBackend = Depends(get_backend),
):
    """Return the authenticated user's profile."""
    user = await session.require_user()
    return await load_profile(backend, user)


@callback_router.get("/callback")
async def auth_callback(
    request: Request,
    code: Optional[str] = None,
    next_path: Optional[str] = Query(None, alias="next"),
    backend: SupabaseBackend = Depends(get_backend),
    settings: FranchiseSettings = Depends(get_settings),
):
    """Exchange the authorization code and redirect to dashboard, onboarding or error page."""
    code_verifier = request.cookies.get(settings.AUTH_CODE_VERIFIER_COOKIE)
    outcome = await complete_login(backend, code, code_verifier)

    origin = str(request.base_url).rstrip("/")
    response = RedirectResponse(url=f"{origin}{outcome.path}", status_code=302)
    if outcome.succeeded:
        _set_session_cookies(response, outcome.session, settings)
    return response


def _set_session_cookies(response: RedirectResponse, session: dict, settings: FranchiseSettings) -> None:
    max_age = session.get("expires_in")
    response.set_cookie(
        settings.AUTH_ACCESS_TOKEN_COOKIE, session["access_token"],
        max_age=max_age, httponly=True, secure=settings.COOKIE_SECURE, samesite="lax",
    )
    if session.get("refresh_token"):
        response.set_cookie(
            settings.AUTH_REFRESH_TOKEN_COOKIE, session["refresh_token"],
            httponly=True, secure=settings.COOKIE_SECURE, samesite="lax",
        )
    response.delete_cookie(settings.AUTH_CODE_VERIFIER_COOKIE)
