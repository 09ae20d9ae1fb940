# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Shared test fixtures for all Franchise Comms tests.
"""

import pytest

from franchise_comms.core.config import FranchiseSettings
from franchise_comms.core.metrics import service_metrics
from franchise_comms.main import create_app
from tests.fake_supabase import (
    ANON_KEY,
    BASE_URL,
    SERVICE_KEY,
    USER_ID,
    USER_TOKEN,
    FakeSupabase,
)


@pytest.fixture(autouse=True)
def reset_metrics():
    service_metrics.reset()
    yield
    service_metrics.reset()


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    """In-memory backend with one signed-in user."""
    fake = FakeSupabase()
    fake.add_user(
        USER_TOKEN, user_id=USER_ID, email="owner@acme.test",
        metadata={"name": "Olivia Owner", "avatar_url": "https://cdn.test/o.png"},
    )
    return fake


@pytest.fixture
def test_settings() -> FranchiseSettings:
    return FranchiseSettings(
        _env_file=None,
        SUPABASE_URL=BASE_URL,
        SUPABASE_ANON_KEY=ANON_KEY,
        SUPABASE_SERVICE_ROLE_KEY=SERVICE_KEY,
    )


@pytest.fixture
def app(fake_supabase, test_settings):
    """App wired to the fake backend, with a service-role key."""
    return create_app(settings=test_settings, backend=fake_supabase.backend())


@pytest.fixture
def app_without_service_role(fake_supabase, test_settings):
    return create_app(settings=test_settings, backend=fake_supabase.backend(service_role_key=""))


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {USER_TOKEN}"}
