# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Auth Flows — login callback routing and the caller's profile.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from franchise_comms.core.identity import AuthUser
from franchise_comms.runtime.supabase_client import SupabaseBackend
from franchise_comms.storage.repositories import MembershipRepository, UserProfileRepository

logger = logging.getLogger("franchise.services.auth")

AUTH_ERROR_PATH = "/auth/auth-code-error"
ONBOARDING_PATH = "/onboarding"


def dashboard_path(slug: str) -> str:
    return f"/tenant/{slug}/dashboard"


@dataclass
class LoginOutcome:
    """Where to send the browser after the code exchange, plus the new session."""

    path: str
    session: Optional[Dict[str, Any]] = None

    @property
    def succeeded(self) -> bool:
        return self.session is not None


async def complete_login(
    backend: SupabaseBackend,
    code: Optional[str],
    code_verifier: Optional[str] = None,
) -> LoginOutcome:
    """
    Exchange an authorization code and pick the landing page.

    Three outcomes: exchange failed → error page; active membership →
    that tenant's dashboard; no membership → onboarding. The exchange is
    attempted exactly once.
    """
    if not code:
        return LoginOutcome(AUTH_ERROR_PATH)

    try:
        result = await backend.anon().exchange_code_for_session(code, code_verifier)
    except httpx.HTTPError as e:
        logger.warning("Code exchange raised: %s", e)
        return LoginOutcome(AUTH_ERROR_PATH)
    session = result.data if result.ok else None
    if not session or not session.get("access_token"):
        logger.info("Code exchange rejected: %s", result.error.message if result.error else "empty session")
        return LoginOutcome(AUTH_ERROR_PATH)

    access_token = session["access_token"]
    user_id = (session.get("user") or {}).get("id")
    slug = None
    if user_id:
        memberships = MembershipRepository(backend.for_user(access_token))
        slug = await memberships.first_active_tenant_slug(user_id)

    if slug:
        return LoginOutcome(dashboard_path(slug), session)
    return LoginOutcome(ONBOARDING_PATH, session)


async def load_profile(backend: SupabaseBackend, user: AuthUser) -> Dict[str, Any]:
    """
    Profile row from the users table, returned as stored.

    When the row is missing or unreadable the response is built from the
    auth service's user metadata instead.
    """
    profiles = UserProfileRepository(backend.for_user(user.access_token))
    row = await profiles.get(user.id)
    if row:
        return row
    return {
        "id": user.id,
        "email": user.email or "",
        "name": user.display_name,
        "avatar_url": user.avatar_url,
        "created_at": user.created_at,
    }
