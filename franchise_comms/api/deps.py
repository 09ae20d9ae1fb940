# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
API Dependencies — FastAPI dependency injection.

The backend and settings live on ``app.state`` (set by create_app), so tests
build an app around a fake backend instead of patching globals.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from fastapi import Depends, Header, Request

from franchise_comms.core.errors import UnauthorizedError
from franchise_comms.core.config import FranchiseSettings
from franchise_comms.core.identity import AuthUser
from franchise_comms.runtime.supabase_client import SupabaseBackend

logger = logging.getLogger("franchise.api.deps")


def get_backend(request: Request) -> SupabaseBackend:
    return request.app.state.backend


def get_settings(request: Request) -> FranchiseSettings:
    return request.app.state.settings


def extract_access_token(authorization: Optional[str], cookie_token: Optional[str]) -> Optional[str]:
    """Bearer header wins; otherwise fall back to the session cookie."""
    if authorization:
        parts = authorization.split(" ", 1)
        if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1].strip():
            return parts[1].strip()
    return cookie_token or None


class SessionResolver:
    """
    Resolves the caller's identity through the auth service.

    resolve() never raises: a missing token, a rejected token or an
    unreachable auth service all yield None. require_user() turns that
    into a 401.
    """

    def __init__(self, backend: SupabaseBackend, access_token: Optional[str]):
        self._backend = backend
        self._access_token = access_token

    async def resolve(self) -> Optional[AuthUser]:
        if not self._access_token:
            return None
        try:
            result = await self._backend.for_user(self._access_token).get_user()
        except httpx.HTTPError as e:
            logger.warning("Auth service unreachable: %s", e)
            return None
        if not result.ok or not isinstance(result.data, dict) or not result.data.get("id"):
            logger.debug("Session rejected: %s", result.error.message if result.error else "no user")
            return None
        return AuthUser.from_payload(result.data, access_token=self._access_token)

    async def require_user(self) -> AuthUser:
        user = await self.resolve()
        if user is None:
            raise UnauthorizedError()
        return user


async def get_session_resolver(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
    backend: SupabaseBackend = Depends(get_backend),
    settings: FranchiseSettings = Depends(get_settings),
) -> SessionResolver:
    """Bind credentials only; the auth call happens when the handler asks for the user."""
    cookie_token = request.cookies.get(settings.AUTH_ACCESS_TOKEN_COOKIE)
    return SessionResolver(backend, extract_access_token(authorization, cookie_token))
