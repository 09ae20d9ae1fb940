# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Franchise Communications API.

Multi-tenant HTTP backend over a managed Postgres service (auth, REST,
row-level security). Handlers validate input, resolve the caller's session,
issue tenant-scoped queries and map the outcome to a small set of HTTP
status codes.
"""

__version__ = "0.1.0"
