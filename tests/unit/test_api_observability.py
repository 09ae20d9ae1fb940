# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""Unit tests for the health endpoint and request accounting."""

import httpx
import pytest
from httpx import AsyncClient, ASGITransport

from franchise_comms.main import create_app
from franchise_comms.runtime.supabase_client import SupabaseBackend


class TestHealthAPI:
    @pytest.mark.asyncio
    async def test_health(self, app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["backend"] == "reachable"
        assert data["service_role_configured"] is True
        assert "version" in data
        assert "uptime_seconds" in data["metrics"]

    @pytest.mark.asyncio
    async def test_backend_unreachable(self, test_settings):
        def explode(request):
            raise httpx.ConnectError("refused", request=request)

        backend = SupabaseBackend(
            url="http://sb.test", anon_key="anon", transport=httpx.MockTransport(explode),
        )
        app = create_app(settings=test_settings, backend=backend)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["backend"] == "unreachable"
        assert resp.json()["service_role_configured"] is False

    @pytest.mark.asyncio
    async def test_requests_are_counted(self, app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.get("/api/auth/me")
            resp = await client.get("/health")
        counters = resp.json()["metrics"]["counters"]
        assert counters["requests_total"] == 1
        assert counters["status_401"] == 1
        assert "histogram_request_latency_ms" in resp.json()["metrics"]

    @pytest.mark.asyncio
    async def test_trace_id_generated(self, app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/health")
        assert len(resp.headers["X-Trace-Id"]) == 36
