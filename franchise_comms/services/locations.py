# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""Locations visible to the caller; row-level security does the scoping."""

from __future__ import annotations

from typing import List, Optional

from franchise_comms.core.errors import UpstreamError
from franchise_comms.runtime.supabase_client import SupabaseClient
from franchise_comms.storage.repositories import LocationRepository, Row, StorageError


async def list_locations(client: SupabaseClient, status: Optional[str] = None) -> List[Row]:
    try:
        return await LocationRepository(client).list(status)
    except StorageError as e:
        raise UpstreamError("Failed to retrieve locations") from e
