"""Integration tests for complete validation scenarios.

Tests cover:
- Happy path: a blog author with posts, from definition to clean data
- Incoming request payloads with typecasting and stripping
- Schemas assembled incrementally with the builder API
"""

from datetime import datetime

import pytest

from dotschema import Schema, ValidationFailed


@pytest.fixture
def author():
    post = Schema({
        "title": {"type": str, "required": True, "length": {"min": 1, "max": 80}},
        "published": {"type": datetime, "required": True},
        "keywords": [{"type": str, "match": r"^[a-z]+$"}],
    })
    return Schema({
        "name": {"type": str, "required": True},
        "email": {"type": str, "required": True, "match": r"^[^@]+@[^@]+$"},
        "role": {"type": str, "enum": ["admin", "editor"]},
        "posts": [post],
    })


class TestHappyPath:
    """Test the complete flow from raw payload to trusted data."""

    def test_happy_path(self, author):
        """Should typecast, strip and accept a valid payload."""
        payload = {
            "name": "Ada",
            "email": "ada@example.com",
            "role": "editor",
            "session": "abc",
            "posts": [
                {"title": "Notes", "published": "2020-05-01T10:00:00", "keywords": "math,engines", "views": 3},
            ],
        }

        data = author.assert_valid(payload, typecast=True)

        assert data == {
            "name": "Ada",
            "email": "ada@example.com",
            "role": "editor",
            "posts": [
                {"title": "Notes", "published": datetime(2020, 5, 1, 10, 0), "keywords": ["math", "engines"]},
            ],
        }
        assert author.validate(data) == []

    def test_all_problems_reported_in_declaration_order(self, author):
        """Should report one error per failing path, in order."""
        payload = {
            "email": "not-an-email",
            "role": "owner",
            "posts": [
                {"title": "", "published": datetime(2020, 1, 1), "keywords": ["ok", "Not OK"]},
                {"published": "yesterday"},
            ],
        }

        errors = author.validate(payload)

        assert [(e.path, e.validator) for e in errors] == [
            ("name", "required"),
            ("email", "match"),
            ("role", "enum"),
            ("posts.0.title", "length"),
            ("posts.1.title", "required"),
            ("posts.1.published", "type"),
            ("posts.0.keywords.1", "match"),
        ]

    def test_assert_valid_raises_first_error(self, author):
        """Should raise with the first error."""
        with pytest.raises(ValidationFailed) as exc_info:
            author.assert_valid({"email": "ada@example.com"})

        assert str(exc_info.value) == "name is required"


class TestBuilderApi:
    """Test schemas assembled with path() and property builders."""

    def test_incremental_schema(self):
        """Should validate a schema declared path by path."""
        schema = Schema()
        schema.path("user.name").type(str).required()
        schema.path("user.emails").each({"type": str, "match": "@"})
        schema.path("user.color").use(hex=lambda value, ctx, arg: value.startswith("0x"))
        schema.message("hex", lambda path, arg: f"{path} must be hexadecimal")

        errors = schema.validate({"user": {"emails": ["a@b", "nope"], "color": "red"}})

        assert [e.message for e in errors] == [
            "user.name is required",
            "user.emails.1 must match @",
            "user.color must be hexadecimal",
        ]

    def test_reusing_one_schema_in_two_parents(self):
        """Should mount the same schema in several places."""
        address = Schema({"city": {"type": str, "required": True}})
        order = Schema({"billing": address, "shipping": address})

        errors = order.validate({"billing": {"city": "Oslo"}, "shipping": {}})

        assert [e.path for e in errors] == ["shipping.city"]
