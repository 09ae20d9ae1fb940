# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""Unit tests for AuthUser."""

import pytest

from franchise_comms.core.identity import AuthUser


class TestAuthUser:
    def test_from_payload(self):
        user = AuthUser.from_payload(
            {
                "id": "u1",
                "email": "a@b.test",
                "created_at": "2024-01-01T00:00:00Z",
                "user_metadata": {"name": "Ann"},
            },
            access_token="tok",
        )
        assert user.id == "u1"
        assert user.email == "a@b.test"
        assert user.access_token == "tok"
        assert user.display_name == "Ann"

    def test_empty_id_rejected(self):
        with pytest.raises(ValueError):
            AuthUser(id="")

    def test_null_metadata(self):
        user = AuthUser.from_payload({"id": "u1", "user_metadata": None})
        assert user.user_metadata == {}
        assert user.display_name == ""
        assert user.avatar_url is None

    def test_display_name_falls_back_to_full_name(self):
        user = AuthUser(id="u1", user_metadata={"full_name": "Ann Example"})
        assert user.display_name == "Ann Example"

    def test_token_not_in_repr(self):
        user = AuthUser(id="u1", email="a@b.test", access_token="secret-token")
        assert "secret-token" not in repr(user)


class TestAuthorSummary:
    def test_uses_metadata_name(self):
        user = AuthUser(id="u1", email="ann@b.test", user_metadata={"name": "Ann"})
        assert user.author_summary() == {"id": "u1", "email": "ann@b.test", "name": "Ann"}

    def test_falls_back_to_email_local_part(self):
        user = AuthUser(id="u1", email="ann@b.test")
        assert user.author_summary()["name"] == "ann"

    def test_anonymous_without_email(self):
        user = AuthUser(id="u1")
        assert user.author_summary() == {"id": "u1", "email": None, "name": "Anonymous"}
