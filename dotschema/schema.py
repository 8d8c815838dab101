"""Schema: a compiled, flat collection of properties.

A Schema is built from a literal definition mapping field names to rules:

    >>> from datetime import datetime
    >>> post = Schema({
    ...     "title": {"type": str, "required": True, "length": {"min": 1, "max": 255}},
    ...     "published": {"type": datetime, "required": True},
    ...     "keywords": [{"type": str}],
    ... })
    >>> author = Schema({
    ...     "name": {"type": str, "required": True},
    ...     "posts": [post],
    ... })
    >>> list(author)
    ['name', 'posts', 'posts.$', 'posts.$.title', 'posts.$.published', 'posts.$.keywords', 'posts.$.keywords.$']

Compilation flattens the definition once: nested literals and mounted
schemas become dot paths (``$`` marking "each array element") in a single
ordered ``paths`` mapping. Validation walks that mapping; it never recurses
into another Schema.

    >>> [e.to_dict() for e in author.validate({"name": "Ada", "posts": [{"published": datetime.now()}]})]
    [{'path': 'posts.0.title', 'validator': 'required', 'message': 'posts.0.title is required', 'arg': True}]
"""

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Dict, Iterator, List, Optional, Union

from typing_extensions import Self

from dotschema import dot
from dotschema.errors import FieldError, SchemaDefinitionError, ValidationFailed
from dotschema.property import RULE_KEYS, Property
from dotschema.typecast import TYPECASTERS, Typecaster
from dotschema.typeof import is_type_marker, normalize_type, type_name
from dotschema.types import SchemaOptions, TypeName
from dotschema.validators import MESSAGES, VALIDATORS, Message, Validator

logger = logging.getLogger(__name__)


class Schema:
    """A set of dot paths, each bound to a Property.

    Attributes:
        paths: Path -> Property, flat and in declaration order
        validators: Validator name -> function, shared with every property
        messages: Validator name -> message template or function, shared
        typecasters: Type name -> typecaster, shared
        options: Default options for ``validate`` and ``assert_valid``

    Args:
        definition: Optional - mapping of field name to rules
        typecast: Typecast values before validation (default False)
        strip: Strip fields not declared in the schema (default True)
    """

    def __init__(
        self,
        definition: Optional[Mapping] = None,
        *,
        typecast: bool = False,
        strip: bool = True,
    ):
        self.options = SchemaOptions(typecast=typecast, strip=strip)
        self.paths: Dict[str, Property] = {}
        self.validators: Dict[str, Validator] = dict(VALIDATORS)
        self.messages: Dict[str, Message] = dict(MESSAGES)
        self.typecasters: Dict[str, Typecaster] = dict(TYPECASTERS)

        if definition is None:
            return
        if not isinstance(definition, Mapping):
            raise SchemaDefinitionError(
                f"Schema definition must be a mapping, got {type(definition).__name__}"
            )
        for key, rules in definition.items():
            self.path(key, rules)
        logger.debug("Compiled schema with %d paths", len(self.paths))

    def __contains__(self, path: object) -> bool:
        return path in self.paths

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

    def __repr__(self) -> str:
        return f"Schema(paths={list(self.paths)!r})"

    def path(self, name: str, rules: Any = None) -> Property:
        """Get or define the property at ``name``.

        Called with only a name, returns the property, creating an empty one
        if the path is not declared yet. With ``rules``, compiles them onto
        the property the same way the constructor compiles a definition:

        - a Schema is mounted at the path
        - a Property replaces whatever was declared at the path
        - a list types the path as an array; one element declares the rules
          of every element, several declare tuple elements by position
        - a mapping whose keys are all rule names (``type``, ``required``,
          ``length``, ... or a validator registered on this schema) is
          applied as rules; any other mapping is a nested definition
        - anything else is a type marker

        Declaring ``a.b.c`` also declares ``a`` and ``a.b``.

        Examples:
            >>> schema = Schema()
            >>> schema.path("name").type(str).required()
            Property('name', validators=['type', 'required'])
            >>> schema.path("tags", [str])
            Property('tags', validators=['type'])
            >>> list(schema)
            ['name', 'tags', 'tags.$']
        """
        segments = dot.split(name)
        if not segments:
            raise SchemaDefinitionError("Schema paths must not be empty")

        if len(segments) > 1:
            parent = self.path(dot.join(*segments[:-1]))
            if segments[-1] == dot.EACH and parent.declared_type is None:
                parent.type(TypeName.ARRAY)

        if isinstance(rules, Schema):
            return self._mount(name, rules)

        if isinstance(rules, Property):
            self.paths[name] = rules
            return rules

        prop = self.paths.get(name)
        if prop is None:
            prop = Property(name, self)
            self.paths[name] = prop

        if rules is None:
            return prop

        if isinstance(rules, (list, tuple)):
            self._compile_array(prop, rules)
        elif isinstance(rules, Mapping):
            if self._is_rule_object(rules):
                self._apply_rules(prop, rules)
            else:
                self._compile_nested(prop, rules)
        elif is_type_marker(rules):
            prop.type(rules)
        else:
            raise SchemaDefinitionError(f"Invalid rules for '{name}': {rules!r}")

        return prop

    def validate(
        self,
        obj: Any,
        *,
        typecast: Optional[bool] = None,
        strip: Optional[bool] = None,
    ) -> List[FieldError]:
        """Validate ``obj`` against every declared path.

        Every path is checked, even after earlier failures; each concrete
        path produces at most one error. Stripping and typecasting rewrite
        ``obj`` in place.

        Args:
            obj: The object to validate
            typecast: Optional - override the schema's ``typecast`` option
            strip: Optional - override the schema's ``strip`` option

        Returns:
            FieldErrors in path declaration order (empty if valid)

        Examples:
            >>> schema = Schema({"name": {"type": str, "required": True}})
            >>> errors = schema.validate({})
            >>> errors[0].message, errors[0].path
            ('name is required', 'name')
        """
        options = self.options.merge(typecast=typecast, strip=strip)

        # Typecast first so mappings produced by typecasting are stripped too
        if options.typecast:
            self.typecast(obj)
        if options.strip:
            self.strip(obj)

        errors: List[FieldError] = []
        for path, prop in list(self.paths.items()):
            for key, value in dot.expand(obj, path):
                error = prop.validate(value, obj, key)
                if error is not None:
                    errors.append(error)

        if errors:
            logger.debug("Validation failed with %d error(s): %s", len(errors), [e.path for e in errors])
        return errors

    def assert_valid(
        self,
        obj: Any,
        *,
        typecast: Optional[bool] = None,
        strip: Optional[bool] = None,
    ) -> Any:
        """Validate ``obj`` and raise if it is invalid.

        Returns:
            ``obj``, typecast and stripped according to the options

        Raises:
            ValidationFailed: With the first error's message; all errors are
                available on ``.errors``

        Examples:
            >>> Schema({"name": str}).assert_valid({"name": 1})
            Traceback (most recent call last):
            ...
            dotschema.errors.ValidationFailed: name must be of type string
        """
        errors = self.validate(obj, typecast=typecast, strip=strip)
        if errors:
            raise ValidationFailed(errors)
        return obj

    def typecast(self, obj: Any) -> None:
        """Coerce every declared value of ``obj`` into its declared type, in place.

        Paths are visited in declaration order, so an array is typecast
        (tuples become lists) before its elements are written back.
        Values that cannot be written back, such as elements of a tuple
        whose path has no ``array`` type, are left unchanged.
        """
        for path, prop in list(self.paths.items()):
            for key, value in dot.expand(obj, path):
                if value is None:
                    continue
                cast = prop.typecast(value)
                if cast is not value:
                    dot.set(obj, key, cast)

    def strip(self, obj: Any, prefix: str = "") -> None:
        """Remove mapping keys of ``obj`` not covered by a declared path.

        Recurses into values whose path has declared sub-paths. A declared
        leaf (e.g. a ``dict`` typed field) keeps its contents.
        """
        if isinstance(obj, (list, tuple)):
            each_path = dot.join(prefix, dot.EACH)
            for index, item in enumerate(obj):
                element_path = each_path if each_path in self.paths else dot.join(prefix, index)
                if element_path in self.paths and self._has_children(element_path):
                    self.strip(item, element_path)
            return

        if not isinstance(obj, MutableMapping):
            return

        for key in list(obj):
            path = dot.join(prefix, key)
            if path not in self.paths:
                del obj[key]
                continue
            if self._has_children(path):
                self.strip(obj[key], path)

    def message(self, name: Union[str, Mapping], message: Optional[Message] = None) -> Self:
        """Override default error messages.

        Examples:
            >>> schema = Schema()
            >>> schema.message("hex", lambda path, arg: f"{path} must be hexadecimal")
            Schema(paths=[])
            >>> schema.message({"required": "{path} is missing"})
            Schema(paths=[])
        """
        self._merge(self.messages, name, message, "message")
        return self

    def validator(self, name: Union[str, Mapping], fn: Optional[Validator] = None) -> Self:
        """Override default validators, or register new ones by name.

        Examples:
            >>> schema = Schema()
            >>> schema.validator("required", lambda value, ctx, arg: value is not None)
            Schema(paths=[])
        """
        self._merge(self.validators, name, fn, "validator")
        return self

    def typecaster(self, name: Union[str, type, Mapping], fn: Optional[Typecaster] = None) -> Self:
        """Override default typecasters, or register ones for custom types.

        Names may be type names or classes; classes are registered under
        their class name.

        Examples:
            >>> from decimal import Decimal
            >>> class Money(Decimal): pass
            >>> Schema().typecaster(Money, Money)
            Schema(paths=[])
        """
        if isinstance(name, Mapping):
            name = {_typecaster_key(key): value for key, value in name.items()}
        elif name is not None:
            name = _typecaster_key(name)
        self._merge(self.typecasters, name, fn, "typecaster")
        return self

    def _mount(self, name: str, schema: "Schema") -> Property:
        if schema is self:
            raise SchemaDefinitionError(f"Cannot mount a schema inside itself (at '{name}')")
        prop = self.path(name)
        if prop.declared_type is None:
            prop.type(TypeName.OBJECT)
        for sub_path, sub_prop in schema.paths.items():
            full_path = dot.join(name, sub_path)
            self.paths[full_path] = sub_prop.rebase(full_path, self)
        logger.debug("Mounted %d paths at '%s'", len(schema.paths), name)
        return prop

    def _compile_array(self, prop: Property, rules: Any) -> None:
        if not rules:
            raise SchemaDefinitionError(f"Array rules for '{prop.name}' must not be empty")
        prop.type(TypeName.ARRAY)
        if len(rules) == 1:
            prop.each(rules[0])
        else:
            prop.elements(rules)

    def _compile_nested(self, prop: Property, definition: Mapping) -> None:
        if prop.declared_type is None:
            prop.type(TypeName.OBJECT)
        for key, rules in definition.items():
            self.path(dot.join(prop.name, key), rules)

    def _is_rule_object(self, rules: Mapping) -> bool:
        return all(
            isinstance(key, str) and (key in RULE_KEYS or key in self.validators)
            for key in rules
        )

    def _apply_rules(self, prop: Property, rules: Mapping) -> None:
        for key, arg in rules.items():
            if key in RULE_KEYS:
                getattr(prop, key)(arg)
            else:
                prop.rule(key, arg)

    def _has_children(self, path: str) -> bool:
        prefix = path + dot.SEPARATOR
        return any(p.startswith(prefix) for p in self.paths)

    @staticmethod
    def _merge(table: Dict[str, Any], name: Any, value: Any, kind: str) -> None:
        if isinstance(name, Mapping):
            table.update(name)
            return
        if not isinstance(name, str) or value is None:
            raise SchemaDefinitionError(f"{kind}() expects a name and a value, or a mapping")
        table[name] = value


def _typecaster_key(name: Any) -> str:
    try:
        return type_name(normalize_type(name))
    except TypeError as e:
        raise SchemaDefinitionError(f"Invalid typecaster name: {name!r}") from e


__all__ = [
    "Schema",
]
