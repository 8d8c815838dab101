"""Build a Schema from a JSON Schema document.

Only the structural subset of JSON Schema that maps onto dotschema rules is
translated:

- ``properties`` / ``required`` / ``items`` (object and tuple form)
- ``type`` (``null`` members of a type list make the field optional)
- ``minLength`` / ``maxLength`` / ``minItems`` / ``maxItems`` -> ``length``
- ``enum`` / ``const`` -> ``enum``
- ``pattern`` -> ``match``

Other keywords are skipped with a DEBUG log line. The document itself is
checked against the Draft 7 meta-schema first.

Usage:
    >>> schema = from_json_schema({
    ...     "type": "object",
    ...     "properties": {"name": {"type": "string", "minLength": 1}},
    ...     "required": ["name"],
    ... })
    >>> schema.validate({})[0].message
    'name is required'
"""

import logging
from typing import Any, Dict, Optional

from jsonschema import Draft7Validator

from dotschema import dot
from dotschema.errors import SchemaDefinitionError
from dotschema.schema import Schema
from dotschema.types import TypeName

logger = logging.getLogger(__name__)

# JSON Schema type -> dotschema type name
JSON_TYPES: Dict[str, str] = {
    "string": TypeName.STRING.value,
    "number": TypeName.NUMBER.value,
    "integer": TypeName.NUMBER.value,
    "boolean": TypeName.BOOLEAN.value,
    "array": TypeName.ARRAY.value,
    "object": TypeName.OBJECT.value,
}

# Keywords translated (or deliberately ignored as annotations)
HANDLED_KEYWORDS = frozenset({
    "type",
    "properties",
    "required",
    "items",
    "minLength",
    "maxLength",
    "minItems",
    "maxItems",
    "enum",
    "const",
    "pattern",
    "$schema",
    "$id",
    "title",
    "description",
    "default",
    "examples",
})


def from_json_schema(document: Dict[str, Any], *, typecast: bool = False, strip: bool = True) -> Schema:
    """Compile a JSON Schema (Draft 7) object document into a Schema.

    Args:
        document: A JSON Schema whose root describes an object
        typecast: Passed on to the Schema
        strip: Passed on to the Schema

    Raises:
        jsonschema.SchemaError: If the document is not a valid JSON Schema
        SchemaDefinitionError: If the root does not describe an object
    """
    Draft7Validator.check_schema(document)

    root_type = _resolve_type(document)
    if root_type not in (None, TypeName.OBJECT.value):
        raise SchemaDefinitionError(f"Root of a JSON Schema must describe an object, got '{root_type}'")

    schema = Schema(typecast=typecast, strip=strip)
    _compile_properties(schema, document, prefix="")
    logger.debug("Compiled JSON Schema into %d paths", len(schema.paths))
    return schema


def _compile_properties(schema: Schema, document: Dict[str, Any], prefix: str) -> None:
    required = set(document.get("required", []))
    for name, sub in document.get("properties", {}).items():
        _compile_property(schema, sub, dot.join(prefix, name), name in required)


def _compile_property(schema: Schema, document: Any, path: str, required: bool) -> None:
    prop = schema.path(path)
    if required:
        prop.required()

    # Boolean schemas (true/false) carry no rules we can express
    if not isinstance(document, dict):
        return

    skipped = sorted(set(document) - HANDLED_KEYWORDS)
    if skipped:
        logger.debug("Skipping unsupported JSON Schema keywords at '%s': %s", path, skipped)

    kind = _resolve_type(document)
    if kind is not None:
        prop.type(kind)

    bounds = _length_bounds(document)
    if bounds:
        prop.length(bounds)

    if "enum" in document:
        prop.enum(document["enum"])
    elif "const" in document:
        prop.enum([document["const"]])

    if "pattern" in document:
        prop.match(document["pattern"])

    if "properties" in document:
        if kind is None:
            prop.type(TypeName.OBJECT)
        _compile_properties(schema, document, path)

    items = document.get("items")
    if isinstance(items, list):
        for index, item in enumerate(items):
            _compile_property(schema, item, dot.join(path, index), False)
    elif items is not None:
        _compile_property(schema, items, dot.join(path, dot.EACH), False)


def _resolve_type(document: Any) -> Optional[str]:
    """Map ``type`` onto a single dotschema type name, if there is one."""
    if not isinstance(document, dict):
        return None
    kind = document.get("type")
    if isinstance(kind, list):
        candidates = [k for k in kind if k != "null"]
        if len(set(JSON_TYPES.get(k) for k in candidates)) != 1:
            return None
        kind = candidates[0]
    if kind is None:
        return None
    return JSON_TYPES.get(kind)


def _length_bounds(document: Dict[str, Any]) -> Dict[str, int]:
    bounds: Dict[str, int] = {}
    for keyword, bound in (("minLength", "min"), ("minItems", "min"), ("maxLength", "max"), ("maxItems", "max")):
        if keyword in document:
            bounds[bound] = int(document[keyword])
    return bounds


__all__ = [
    "JSON_TYPES",
    "from_json_schema",
]
