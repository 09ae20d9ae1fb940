# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Franchise Comms Configuration — Environment-driven settings.

All configuration is loaded from environment variables (or .env file).
"""

from __future__ import annotations

from typing import List

from pydantic_settings import BaseSettings
from pydantic import Field


class FranchiseSettings(BaseSettings):
    """Service-wide configuration loaded from environment."""

    # --- Managed backend ---
    SUPABASE_URL: str = Field(
        default="http://localhost:54321",
        description="Base URL of the managed backend (auth + REST)",
    )
    SUPABASE_ANON_KEY: str = Field(
        default="",
        description="Public anon key; requests run under row-level security",
    )
    SUPABASE_SERVICE_ROLE_KEY: str = Field(
        default="",
        description="Privileged key (server-side only); bypasses row-level security",
    )
    APP_NAME: str = Field(
        default="franchise-communications",
        description="Sent as x-application-name on every backend request",
    )
    HTTP_TIMEOUT: float = Field(
        default=10.0,
        description="Timeout in seconds for backend HTTP calls",
    )

    # --- Auth cookies ---
    AUTH_ACCESS_TOKEN_COOKIE: str = Field(default="sb-access-token")
    AUTH_REFRESH_TOKEN_COOKIE: str = Field(default="sb-refresh-token")
    AUTH_CODE_VERIFIER_COOKIE: str = Field(
        default="sb-auth-token-code-verifier",
        description="Cookie holding the PKCE code verifier set during login",
    )
    COOKIE_SECURE: bool = Field(default=False)

    # --- Platform ---
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    LOG_LEVEL: str = Field(default="INFO")
    APP_ENV: str = Field(
        default="dev",
        description="Environment: dev | prod",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    @property
    def has_service_role(self) -> bool:
        return bool(self.SUPABASE_SERVICE_ROLE_KEY)


# Global singleton
settings = FranchiseSettings()
