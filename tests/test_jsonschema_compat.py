"""Unit tests for building schemas from JSON Schema documents."""

import jsonschema
import pytest

from dotschema.errors import SchemaDefinitionError
from dotschema.jsonschema_compat import from_json_schema


@pytest.fixture
def vendor_schema():
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "type": "object",
        "properties": {
            "legal_name": {"type": "string", "minLength": 1, "maxLength": 100},
            "country": {"type": "string", "enum": ["US", "CA"]},
            "tax_id": {"type": "string", "pattern": "^[0-9]{9}$"},
            "employees": {"type": "integer"},
            "nickname": {"type": ["string", "null"]},
            "contact": {
                "type": "object",
                "properties": {
                    "email": {"type": "string", "format": "email"},
                    "phone": {"type": "string"},
                },
                "required": ["email"],
            },
            "tags": {"type": "array", "items": {"type": "string"}, "maxItems": 2},
        },
        "required": ["legal_name", "contact"],
    }


class TestCompilation:
    """Test translating JSON Schema keywords into paths and rules."""

    def test_paths(self, vendor_schema):
        """Should declare a path for every property and array element."""
        schema = from_json_schema(vendor_schema)

        assert list(schema) == [
            "legal_name",
            "country",
            "tax_id",
            "employees",
            "nickname",
            "contact",
            "contact.email",
            "contact.phone",
            "tags",
            "tags.$",
        ]

    def test_rules(self, vendor_schema):
        """Should register the corresponding validators."""
        schema = from_json_schema(vendor_schema)

        assert list(schema.paths["legal_name"].registry) == ["required", "type", "length"]
        assert schema.paths["legal_name"].registry["length"].arg == {"min": 1, "max": 100}
        assert schema.paths["country"].registry["enum"].arg == ["US", "CA"]
        assert schema.paths["employees"].declared_type == "number"
        assert schema.paths["nickname"].declared_type == "string"
        assert "required" not in schema.paths["nickname"].registry
        assert schema.paths["tags"].registry["length"].arg == {"min": None, "max": 2}

    def test_const(self):
        """Should translate const into a one-value enum."""
        schema = from_json_schema({"type": "object", "properties": {"v": {"const": 1}}})

        assert schema.paths["v"].registry["enum"].arg == [1]

    def test_tuple_items(self):
        """Should translate items arrays into positional paths."""
        schema = from_json_schema({
            "type": "object",
            "properties": {"point": {"type": "array", "items": [{"type": "number"}, {"type": "number"}]}},
        })

        assert list(schema) == ["point", "point.0", "point.1"]

    def test_options_are_passed_on(self):
        """Should create the schema with the given options."""
        schema = from_json_schema({"type": "object"}, typecast=True, strip=False)

        assert schema.options.typecast is True
        assert schema.options.strip is False


class TestValidation:
    """Test validating data with a translated schema."""

    def test_valid_data(self, vendor_schema):
        """Should accept valid data."""
        schema = from_json_schema(vendor_schema)
        data = {"legal_name": "Acme", "contact": {"email": "a@acme.test"}, "tags": ["x"], "nickname": None}

        assert schema.validate(data) == []

    def test_errors(self, vendor_schema):
        """Should report required, nested and constraint errors in path order."""
        schema = from_json_schema(vendor_schema)
        data = {"country": "MX", "tax_id": "12", "contact": {}, "tags": ["a", "b", "c"]}

        errors = schema.validate(data)

        assert [(e.path, e.validator) for e in errors] == [
            ("legal_name", "required"),
            ("country", "enum"),
            ("tax_id", "match"),
            ("contact.email", "required"),
            ("tags", "length"),
        ]

    def test_typecast(self, vendor_schema):
        """Should typecast with the translated types."""
        schema = from_json_schema(vendor_schema, typecast=True)
        data = {"legal_name": "Acme", "employees": "12", "contact": {"email": "e"}}

        assert schema.validate(data) == []
        assert data["employees"] == 12


class TestInvalidDocuments:
    """Test rejection of unusable documents."""

    def test_invalid_json_schema(self):
        """Should raise jsonschema.SchemaError for malformed documents."""
        with pytest.raises(jsonschema.SchemaError):
            from_json_schema({"type": "object", "properties": {"a": {"type": "nonsense"}}})

    def test_non_object_root(self):
        """Should reject roots that do not describe objects."""
        with pytest.raises(SchemaDefinitionError):
            from_json_schema({"type": "string"})
