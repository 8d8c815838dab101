"""Core type definitions for dotschema.

This module defines the fundamental types shared by the schema compiler and
the validation engine:
- TypeName: Names returned by the type classifier and accepted by ``type()``
- ValidatorName: Names of the built-in validators
- SchemaOptions: Validation options (typecasting, stripping)
"""

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional


class TypeName(str, Enum):
    """Type names produced by ``dotschema.typeof.type_of``.

    Values not covered by one of these names classify as the name of their
    class.
    """
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    DATE = "date"
    REGEXP = "regexp"
    FUNCTION = "function"
    BYTES = "bytes"
    NULL = "null"


class ValidatorName(str, Enum):
    """Names of the built-in validators.

    ``required`` and ``type`` are always evaluated before the others.
    """
    REQUIRED = "required"
    NONEMPTY = "nonempty"
    TYPE = "type"
    LENGTH = "length"
    ENUM = "enum"
    MATCH = "match"


# Message key used when no message is registered for a validator
DEFAULT_MESSAGE_KEY = "default"


@dataclass(frozen=True)
class SchemaOptions:
    """Options controlling a validation pass.

    Attributes:
        typecast: Coerce values into their declared type before validating
        strip: Remove fields not covered by a declared path

    Examples:
        >>> opts = SchemaOptions()
        >>> opts.merge(typecast=True)
        SchemaOptions(typecast=True, strip=True)
        >>> opts.merge(strip=None)
        SchemaOptions(typecast=False, strip=True)
    """
    typecast: bool = False
    strip: bool = True

    def merge(self, typecast: Optional[bool] = None, strip: Optional[bool] = None) -> "SchemaOptions":
        """Return a copy with the given (non-None) overrides applied."""
        overrides: Dict[str, bool] = {}
        if typecast is not None:
            overrides["typecast"] = bool(typecast)
        if strip is not None:
            overrides["strip"] = bool(strip)
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchemaOptions":
        """Create SchemaOptions from dict, ignoring unknown keys."""
        return cls(
            typecast=bool(data.get("typecast", False)),
            strip=bool(data.get("strip", True)),
        )


__all__ = [
    "TypeName",
    "ValidatorName",
    "DEFAULT_MESSAGE_KEY",
    "SchemaOptions",
]
