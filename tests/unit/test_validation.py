# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""Unit tests for request input validation."""

import pytest

from franchise_comms.core.errors import BadRequestError
from franchise_comms.api.validation import (
    is_loose_uuid,
    validate_comment_body,
    validate_due_date,
    validate_location_status,
    validate_new_post,
    validate_new_request,
    validate_optional_uuid,
    validate_page,
    validate_post_type_filter,
    validate_reaction,
    validate_request_filters,
    validate_tenant_name,
    validate_tenant_slug,
    validate_uuid,
)

POST_ID = "6f1c2b7e-3d4a-4c5b-9e8f-0a1b2c3d4e5f"


class TestUUID:
    def test_plain_uuid(self):
        assert is_loose_uuid(POST_ID)

    def test_uppercase_uuid(self):
        assert is_loose_uuid(POST_ID.upper())

    def test_prefixed_uuid(self):
        assert is_loose_uuid(f"post-{POST_ID}")

    @pytest.mark.parametrize(
        "value",
        ["not-a-uuid", "", "123", None, 42, f"{POST_ID}x", f"{POST_ID}\n", f"post-{POST_ID}\n"],
    )
    def test_rejects(self, value):
        assert not is_loose_uuid(value)

    def test_validate_uuid_message_names_field(self):
        with pytest.raises(BadRequestError) as exc_info:
            validate_uuid("nope", "postId")
        assert exc_info.value.message == "postId must be a valid UUID format"
        assert exc_info.value.status_code == 400

    def test_optional_uuid(self):
        assert validate_optional_uuid(None, "parent_comment_id") is None
        assert validate_optional_uuid("", "parent_comment_id") is None
        assert validate_optional_uuid(POST_ID, "parent_comment_id") == POST_ID
        with pytest.raises(BadRequestError):
            validate_optional_uuid("bad", "parent_comment_id")


class TestTenantInput:
    def test_name_is_trimmed(self):
        assert validate_tenant_name("  Acme  ") == "Acme"

    @pytest.mark.parametrize("name", [None, "", "A", "  A  ", 12])
    def test_short_name(self, name):
        with pytest.raises(BadRequestError) as exc_info:
            validate_tenant_name(name)
        assert exc_info.value.message == "name must be at least 2 characters"

    @pytest.mark.parametrize("slug", ["acme", "acme-east-2", "a1"])
    def test_valid_slug(self, slug):
        assert validate_tenant_slug(slug) == slug

    @pytest.mark.parametrize(
        "slug", [None, "a", "Acme", "acme_east", "acme east", "acme!", "acme\n", " acme"],
    )
    def test_invalid_slug(self, slug):
        with pytest.raises(BadRequestError) as exc_info:
            validate_tenant_slug(slug)
        assert "lowercase letters, numbers, and hyphens" in exc_info.value.message


class TestReactionInput:
    def test_valid(self):
        assert validate_reaction("like", "add") == ("like", "add")
        assert validate_reaction("needs_attention", "remove") == ("needs_attention", "remove")

    def test_missing_type_checked_first(self):
        with pytest.raises(BadRequestError) as exc_info:
            validate_reaction(None, None)
        assert exc_info.value.message == "type is required and must be a string"

    def test_missing_action(self):
        with pytest.raises(BadRequestError) as exc_info:
            validate_reaction("like", "")
        assert exc_info.value.message == "action is required and must be a string"

    def test_unknown_type(self):
        with pytest.raises(BadRequestError) as exc_info:
            validate_reaction("love", "add")
        assert exc_info.value.message == "type must be one of: like, acknowledge, needs_attention"

    def test_unknown_action(self):
        with pytest.raises(BadRequestError) as exc_info:
            validate_reaction("like", "toggle")
        assert exc_info.value.message == "action must be one of: add, remove"


class TestCommentInput:
    def test_body_trimmed(self):
        assert validate_comment_body("  hello ") == "hello"

    @pytest.mark.parametrize("body", [None, "", "   ", 5])
    def test_empty_body(self, body):
        with pytest.raises(BadRequestError) as exc_info:
            validate_comment_body(body)
        assert exc_info.value.message == "body is required and must be a non-empty string"


class TestPageParams:
    def test_defaults(self):
        assert validate_page(None, None) == (20, 0)
        assert validate_page("", "") == (20, 0)

    def test_explicit(self):
        assert validate_page("100", "40") == (100, 40)

    @pytest.mark.parametrize("limit", ["0", "101", "-5", "ten", "1.5"])
    def test_limit_out_of_range(self, limit):
        with pytest.raises(BadRequestError) as exc_info:
            validate_page(limit, None)
        assert exc_info.value.message == "limit parameter must be between 1 and 100"

    @pytest.mark.parametrize("offset", ["-1", "abc"])
    def test_negative_offset(self, offset):
        with pytest.raises(BadRequestError) as exc_info:
            validate_page("10", offset)
        assert exc_info.value.message == "offset parameter must be a non-negative number"

    def test_post_type_filter(self):
        assert validate_post_type_filter(None) is None
        assert validate_post_type_filter("announcement") == "announcement"
        with pytest.raises(BadRequestError) as exc_info:
            validate_post_type_filter("memo")
        assert exc_info.value.message == (
            "type parameter must be one of: message, announcement, request, performance_update"
        )


class TestNewPost:
    def test_valid(self):
        validate_new_post(
            "Hello", "announcement", {"type": "global"},
            title="Weekly update", due_date="2026-03-01T09:00:00Z",
        )

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"body": "", "post_type": "message", "targeting": {"type": "global"}}, "body is required"),
            ({"body": "Hi", "post_type": None, "targeting": {"type": "global"}}, "post_type is required"),
            ({"body": "Hi", "post_type": "message", "targeting": None}, "targeting is required"),
            ({"body": "Hi", "post_type": "message", "targeting": "global"}, "targeting must be an object"),
            (
                {"body": "Hi", "post_type": "memo", "targeting": {"type": "global"}},
                "post_type must be one of: message, announcement, request, performance_update",
            ),
            (
                {"body": "Hi", "post_type": "message", "targeting": {"type": "global"}, "title": "x" * 501},
                "title must not exceed 500 characters",
            ),
            (
                {"body": "Hi", "post_type": "message", "targeting": {"type": "global"}, "due_date": "tomorrow"},
                "due_date must be in ISO 8601 format",
            ),
        ],
    )
    def test_rejects(self, kwargs, message):
        with pytest.raises(BadRequestError) as exc_info:
            validate_new_post(**kwargs)
        assert exc_info.value.message == message

    def test_due_date_prefix_match(self):
        assert validate_due_date("2026-03-01T09:00:00.000+02:00") == "2026-03-01T09:00:00.000+02:00"
        assert validate_due_date(None) is None


class TestNewRequest:
    FIELDS = [
        {"name": "Sales", "type": "number", "required": True},
        {"name": "Region", "type": "select", "required": False, "options": ["N", "S"]},
    ]

    def test_valid(self):
        validate_new_request(POST_ID, "Monthly sales", self.FIELDS, "2026-03-01T09:00:00Z")

    @pytest.mark.parametrize(
        "args, message",
        [
            ((None, "T", FIELDS), "post_id is required"),
            ((POST_ID, "", FIELDS), "title is required"),
            ((POST_ID, "T", None), "fields array is required"),
            ((POST_ID, "T", {"name": "x"}), "fields array is required"),
            (("nope", "T", FIELDS), "post_id must be a valid UUID format"),
            (
                (POST_ID, "T", [{"name": "x", "type": "text"}]),
                "Each field must have name, type, and required properties",
            ),
            (
                (POST_ID, "T", [{"name": "x", "type": "color", "required": True}]),
                "Invalid field type. Must be one of: text, number, date, file, select",
            ),
            (
                (POST_ID, "T", [{"name": "x", "type": "select", "required": True}]),
                "Select fields must have an options array",
            ),
        ],
    )
    def test_rejects(self, args, message):
        with pytest.raises(BadRequestError) as exc_info:
            validate_new_request(*args)
        assert exc_info.value.message == message


class TestListFilters:
    def test_request_filters(self):
        assert validate_request_filters(None, None) == (None, None)
        assert validate_request_filters("closed", "assigned") == ("closed", "assigned")

    def test_bad_request_status(self):
        with pytest.raises(BadRequestError) as exc_info:
            validate_request_filters("open", None)
        assert exc_info.value.message == 'Invalid status parameter. Must be "active" or "closed"'

    def test_bad_request_role(self):
        with pytest.raises(BadRequestError) as exc_info:
            validate_request_filters(None, "owner")
        assert exc_info.value.message == 'Invalid role parameter. Must be "created" or "assigned"'

    def test_location_status(self):
        assert validate_location_status("inactive") == "inactive"
        with pytest.raises(BadRequestError) as exc_info:
            validate_location_status("closed")
        assert exc_info.value.message == 'status parameter must be "active" or "inactive"'
