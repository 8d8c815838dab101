"""Error types for dotschema.

Validation failures are values: each failing path produces one FieldError,
and ``Schema.validate`` returns them as an ordered list. The only exception
raised for invalid *data* is ValidationFailed, from ``Schema.assert_valid``.

Problems with the schema *definition* itself raise SchemaDefinitionError.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class FieldError:
    """A single validation failure.

    Attributes:
        path: Concrete dot-notation path of the failing value (e.g., "posts.0.title")
        validator: Name of the validator that failed (e.g., "required", "hex")
        message: Human-readable error description
        arg: Optional - the argument the validator was registered with

    Examples:
        >>> err = FieldError(path="name", validator="required", message="name is required", arg=True)
        >>> err.path
        'name'
        >>> str(err)
        'name is required'
    """
    path: str
    validator: str
    message: str
    arg: Optional[Any] = None

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "path": self.path,
            "validator": self.validator,
            "message": self.message,
        }
        if self.arg is not None:
            result["arg"] = self.arg
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldError":
        """Create FieldError from dict."""
        return cls(
            path=data["path"],
            validator=data["validator"],
            message=data["message"],
            arg=data.get("arg"),
        )


class ValidationFailed(Exception):
    """Raised by ``Schema.assert_valid`` when an object has validation errors.

    The exception message is the message of the first error.

    Attributes:
        errors: All validation errors, in path declaration order
        path: Path of the first error
    """

    def __init__(self, errors: List[FieldError]):
        if not errors:
            raise ValueError("ValidationFailed requires at least one error")
        self.errors = list(errors)
        self.path = errors[0].path
        super().__init__(errors[0].message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "message": str(self),
            "path": self.path,
            "errors": [e.to_dict() for e in self.errors],
        }


class SchemaDefinitionError(Exception):
    """Raised when a schema definition or configuration is malformed."""


class UnknownValidatorError(SchemaDefinitionError):
    """Raised when a property refers to a validator that is not registered.

    Attributes:
        name: The unregistered validator name
        path: Path of the property that refers to it
    """

    def __init__(self, name: str, path: str):
        self.name = name
        self.path = path
        super().__init__(f"No validator named '{name}' is registered (used by '{path}')")


__all__ = [
    "FieldError",
    "ValidationFailed",
    "SchemaDefinitionError",
    "UnknownValidatorError",
]
