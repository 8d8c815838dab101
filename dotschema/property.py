"""Property: the validation rules bound to one schema path.

A Property is returned whenever you call ``schema.path()``, and is created
internally for every path of a definition passed to the Schema constructor.
Rules are declared with chainable builder methods:

    >>> from dotschema import Schema
    >>> schema = Schema()
    >>> prop = schema.path("email").type(str).required().match(r"@")
    >>> prop.validate("someone@example.com") is None
    True
    >>> prop.validate(None).message
    'email is required'

The validator, message and typecaster tables are *shared* with the Schema
that created the property: overriding ``schema.message("required", ...)``
after the property exists changes the message this property reports.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from typing_extensions import Self

from dotschema import dot
from dotschema.errors import FieldError, SchemaDefinitionError, UnknownValidatorError
from dotschema.typecast import Typecaster, typecast as coerce
from dotschema.typeof import TypeMarker, normalize_type
from dotschema.types import DEFAULT_MESSAGE_KEY, ValidatorName
from dotschema.validators import Message, Validator, format_message

if TYPE_CHECKING:
    from dotschema.schema import Schema

# Validators evaluated before every other registered validator
_FIRST = (ValidatorName.REQUIRED.value, ValidatorName.TYPE.value)

# Keys of a rule literal that map onto builder methods
RULE_KEYS = frozenset({
    "type",
    "required",
    "nonempty",
    "length",
    "enum",
    "match",
    "each",
    "elements",
    "use",
    "schema",
})


@dataclass(frozen=True)
class Binding:
    """A validator registered on a property.

    Attributes:
        arg: Argument passed to the validator on every call
        fn: Optional - property-local override of the schema-level validator
    """
    arg: Any = None
    fn: Optional[Validator] = None


class Property:
    """Validation rules for a single dot path.

    Attributes:
        name: Fully-qualified path (e.g., "author.posts.$.title")
        registry: Validator name -> Binding, in registration order
        declared_type: Normalized type given to ``type()``, used for typecasting
        validators: Shared validator table of the owning schema
        messages: Shared message table of the owning schema
        typecasters: Shared typecaster table of the owning schema
    """

    def __init__(
        self,
        name: str,
        schema: "Schema",
        validators: Optional[Dict[str, Validator]] = None,
        messages: Optional[Dict[str, Message]] = None,
        typecasters: Optional[Dict[str, Typecaster]] = None,
    ):
        self.name = name
        self.registry: Dict[str, Binding] = {}
        self.declared_type: Optional[TypeMarker] = None
        self._schema = schema
        self.validators = schema.validators if validators is None else validators
        self.messages = schema.messages if messages is None else messages
        self.typecasters = schema.typecasters if typecasters is None else typecasters

    def __repr__(self) -> str:
        return f"Property({self.name!r}, validators={list(self.registry)!r})"

    def required(self, flag: bool = True) -> Self:
        """Register a presence check. ``required(False)`` always passes."""
        return self._register(ValidatorName.REQUIRED.value, flag)

    def nonempty(self, flag: bool = True) -> Self:
        """Register a check that strings, arrays and objects are not empty."""
        return self._register(ValidatorName.NONEMPTY.value, flag)

    def type(self, marker: Any) -> Self:
        """Register a type check and record the type for typecasting.

        Args:
            marker: A class (``str``, ``int``, ``list``, ``datetime``, any
                custom class...), a TypeName or a type-name string
        """
        try:
            normalized = normalize_type(marker)
        except TypeError as e:
            raise SchemaDefinitionError(f"Invalid type for '{self.name}': {marker!r}") from e
        self.declared_type = normalized
        return self._register(ValidatorName.TYPE.value, normalized)

    def length(self, rules: Optional[Mapping] = None, **bounds: Any) -> Self:
        """Register a bounds check on ``len(value)``.

        Examples:
            >>> prop.length(min=8, max=255)  # doctest: +SKIP
            >>> prop.length({"max": 10})  # doctest: +SKIP
        """
        if rules is not None and not isinstance(rules, Mapping):
            raise SchemaDefinitionError(
                f"Invalid length rule for '{self.name}': expected a mapping with min/max, got {rules!r}"
            )
        merged: Dict[str, Any] = dict(rules or {})
        merged.update(bounds)
        unknown = set(merged) - {"min", "max"}
        if unknown:
            raise SchemaDefinitionError(
                f"Invalid length rule for '{self.name}': unknown keys {sorted(unknown)}"
            )
        for key, bound in merged.items():
            if bound is not None and (isinstance(bound, bool) or not isinstance(bound, int)):
                raise SchemaDefinitionError(
                    f"Invalid length rule for '{self.name}': {key} must be an integer, got {bound!r}"
                )
        return self._register(ValidatorName.LENGTH.value, {"min": merged.get("min"), "max": merged.get("max")})

    def enum(self, values: Iterable[Any]) -> Self:
        """Register a membership check against ``values``.

        Raises:
            SchemaDefinitionError: If ``values`` is a string, a mapping or
                not iterable
        """
        if isinstance(values, (str, bytes, bytearray, Mapping)) or not isinstance(values, Iterable):
            raise SchemaDefinitionError(
                f"Invalid enum rule for '{self.name}': expected a list of values, got {values!r}"
            )
        return self._register(ValidatorName.ENUM.value, list(values))

    def match(self, pattern: Any) -> Self:
        """Register a regular expression check (string or compiled pattern)."""
        return self._register(ValidatorName.MATCH.value, pattern)

    def rule(self, name: str, arg: Any = True) -> Self:
        """Register the schema-level validator ``name`` with ``arg``."""
        return self._register(name, arg)

    def use(self, fns: Optional[Mapping] = None, **kwargs: Validator) -> Self:
        """Register custom validators by name.

        Each function overrides the schema-level validator of the same name,
        for this property only. Messages are looked up by the same name, see
        ``Schema.message``.

        Examples:
            >>> schema.message("hex", lambda path, arg: f"{path} must be hexadecimal")  # doctest: +SKIP
            >>> prop.use(hex=lambda value, ctx, arg: value.startswith("0x"))  # doctest: +SKIP
        """
        if fns is not None and not isinstance(fns, Mapping):
            raise SchemaDefinitionError(f"use() for '{self.name}' expects a mapping of name -> function")
        named: Dict[str, Callable] = dict(fns or {})
        named.update(kwargs)
        for name, fn in named.items():
            if not callable(fn):
                raise SchemaDefinitionError(f"Validator '{name}' for '{self.name}' is not callable")
            self._register(name, None, fn)
        return self

    def each(self, rules: Any) -> Self:
        """Declare the rules every array element at this path must satisfy.

        Accepts anything ``Schema.path`` accepts: a type marker, a rule dict,
        a nested definition, a list or a Schema.
        """
        self._schema.path(dot.join(self.name, dot.EACH), rules)
        return self

    def elements(self, rules: Iterable[Any]) -> Self:
        """Declare rules for the elements of a tuple-like array, by position."""
        for index, rule in enumerate(rules):
            self._schema.path(dot.join(self.name, index), rule)
        return self

    def schema(self, schema: "Schema") -> Self:
        """Mount ``schema`` at this path."""
        self._schema.path(self.name, schema)
        return self

    def path(self, *args: Any) -> "Property":
        """Proxy for ``Schema.path``, to chain property declarations."""
        return self._schema.path(*args)

    def typecast(self, value: Any) -> Any:
        """Coerce ``value`` into the declared type; unchanged without one."""
        if self.declared_type is None:
            return value
        return coerce(value, self.declared_type, self.typecasters)

    def validate(self, value: Any, ctx: Any = None, path: Optional[str] = None) -> Optional[FieldError]:
        """Validate ``value``, returning the first error or ``None``.

        ``required`` runs first and ``type`` second; a ``None`` value that
        passes ``required`` is valid without running anything else. Other
        validators run in registration order until one fails.

        Args:
            value: The value to validate
            ctx: The object containing the value, passed on to validators
            path: Concrete path reported in errors (defaults to ``name``)

        Raises:
            UnknownValidatorError: If a registered name has no function
        """
        path = self.name if path is None else path

        error = self._run(ValidatorName.REQUIRED.value, value, ctx, path)
        if error is not None:
            return error

        if value is None:
            return None

        error = self._run(ValidatorName.TYPE.value, value, ctx, path)
        if error is not None:
            return error

        for name in list(self.registry):
            if name in _FIRST:
                continue
            error = self._run(name, value, ctx, path)
            if error is not None:
                return error

        return None

    def rebase(self, name: str, schema: "Schema") -> "Property":
        """Copy this property to ``name`` on ``schema``, keeping its tables."""
        prop = Property(name, schema, self.validators, self.messages, self.typecasters)
        prop.registry = dict(self.registry)
        prop.declared_type = self.declared_type
        return prop

    def _run(self, name: str, value: Any, ctx: Any, path: str) -> Optional[FieldError]:
        binding = self.registry.get(name)
        if binding is None:
            return None
        validator = binding.fn or self.validators.get(name)
        if validator is None:
            raise UnknownValidatorError(name, path)
        if not validator(value, ctx, binding.arg):
            return self._error(name, binding.arg, path)
        return None

    def _register(self, name: str, arg: Any = None, fn: Optional[Validator] = None) -> Self:
        self.registry[name] = Binding(arg=arg, fn=fn)
        return self

    def _error(self, name: str, arg: Any, path: str) -> FieldError:
        if name in self.messages:
            message = self.messages[name]
        else:
            message = self.messages[DEFAULT_MESSAGE_KEY]
        return FieldError(path=path, validator=name, message=format_message(message, path, arg), arg=arg)


__all__ = [
    "Binding",
    "Property",
    "RULE_KEYS",
]
