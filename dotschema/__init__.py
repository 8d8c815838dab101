"""dotschema: validate nested objects against declarative, dot-path schemas.

dotschema checks incoming data (e.g. deserialized JSON) before it is trusted
by application logic:
- Flat or deeply nested schema definitions compiled into dot paths
- Array element rules (``path.$``) and mounted sub-schemas
- Built-in validators (required, type, length, enum, match, nonempty) and
  custom named validators with their own messages
- Optional typecasting into declared types and stripping of unknown fields

Basic usage:
    >>> from dotschema import Schema
    >>> user = Schema({
    ...     "name": {"type": str, "required": True},
    ...     "age": {"type": int},
    ...     "tags": [str],
    ... })
    >>> user.validate({"name": "Ada", "age": "36"}, typecast=True)
    []
    >>> [e.path for e in user.validate({"tags": ["a", 2]})]
    ['name', 'tags.1']
"""

__version__ = "0.1.0"
__author__ = "dotschema contributors"

# Version info
VERSION = (0, 1, 0)

# Core exports
from dotschema.errors import FieldError, SchemaDefinitionError, UnknownValidatorError, ValidationFailed
from dotschema.jsonschema_compat import from_json_schema
from dotschema.property import Property
from dotschema.schema import Schema
from dotschema.types import SchemaOptions, TypeName, ValidatorName

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "Schema",
    "Property",
    "FieldError",
    "ValidationFailed",
    "SchemaDefinitionError",
    "UnknownValidatorError",
    "SchemaOptions",
    "TypeName",
    "ValidatorName",
    "from_json_schema",
]
