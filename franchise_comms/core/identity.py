# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Identity — the authenticated principal carried through a request.

Built from the managed auth service's user payload. Tenant scoping is not
stored here; row-level security resolves it from the caller's token.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class AuthUser:
    """Authenticated user as reported by the auth service."""

    id: str
    email: Optional[str] = None
    created_at: Optional[str] = None
    user_metadata: Dict[str, Any] = field(default_factory=dict)
    access_token: Optional[str] = field(default=None, repr=False)

    def __post_init__(self):
        if not self.id:
            raise ValueError("user id must not be empty")
        if self.user_metadata is None:
            self.user_metadata = {}

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], access_token: Optional[str] = None) -> "AuthUser":
        return cls(
            id=payload["id"],
            email=payload.get("email"),
            created_at=payload.get("created_at"),
            user_metadata=payload.get("user_metadata") or {},
            access_token=access_token,
        )

    @property
    def display_name(self) -> str:
        """Metadata name, then full_name, else empty."""
        return self.user_metadata.get("name") or self.user_metadata.get("full_name") or ""

    @property
    def avatar_url(self) -> Optional[str]:
        return self.user_metadata.get("avatar_url") or None

    def author_summary(self) -> Dict[str, Any]:
        """Author block embedded in created comments."""
        name = self.user_metadata.get("name")
        if not name and self.email:
            name = self.email.split("@")[0]
        return {"id": self.id, "email": self.email, "name": name or "Anonymous"}

    def __repr__(self) -> str:
        return f"AuthUser(id={self.id!r}, email={self.email!r})"
