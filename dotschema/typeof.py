"""Runtime type classification.

``type_of`` maps a Python value onto the small, JSON-flavoured vocabulary of
TypeName values, so that ``{"type": "number"}`` accepts both ints and floats
but not booleans.

Values outside the vocabulary classify as their class name, so a custom type
can be referred to either by the class (an ``isinstance`` check) or by its
name as a string.

``normalize_type`` turns the markers accepted in schema definitions (builtin
classes, TypeName members, type-name strings, arbitrary classes) into either
a type-name string or, for classes outside the vocabulary, the class itself.
"""

import datetime
import decimal
import numbers
import re
import types
from collections.abc import Mapping
from typing import Any, Dict, Union

from dotschema.types import TypeName

TypeMarker = Union[str, type]

_CLASS_NAMES: Dict[type, str] = {
    str: TypeName.STRING.value,
    bool: TypeName.BOOLEAN.value,
    int: TypeName.NUMBER.value,
    float: TypeName.NUMBER.value,
    decimal.Decimal: TypeName.NUMBER.value,
    list: TypeName.ARRAY.value,
    tuple: TypeName.ARRAY.value,
    dict: TypeName.OBJECT.value,
    datetime.datetime: TypeName.DATE.value,
    datetime.date: TypeName.DATE.value,
    re.Pattern: TypeName.REGEXP.value,
    bytes: TypeName.BYTES.value,
    bytearray: TypeName.BYTES.value,
    type(None): TypeName.NULL.value,
    types.FunctionType: TypeName.FUNCTION.value,
}

_ALIASES: Dict[str, str] = {
    "str": TypeName.STRING.value,
    "int": TypeName.NUMBER.value,
    "integer": TypeName.NUMBER.value,
    "float": TypeName.NUMBER.value,
    "bool": TypeName.BOOLEAN.value,
    "list": TypeName.ARRAY.value,
    "tuple": TypeName.ARRAY.value,
    "dict": TypeName.OBJECT.value,
    "datetime": TypeName.DATE.value,
    "none": TypeName.NULL.value,
}

_TYPE_NAMES = frozenset(t.value for t in TypeName)


def type_of(value: Any) -> str:
    """Classify ``value``.

    Examples:
        >>> type_of("abc"), type_of(3), type_of(True), type_of(None)
        ('string', 'number', 'boolean', 'null')
        >>> type_of([1, 2]), type_of({"a": 1})
        ('array', 'object')
    """
    if value is None:
        return TypeName.NULL.value
    if isinstance(value, bool):
        return TypeName.BOOLEAN.value
    if isinstance(value, numbers.Number):
        return TypeName.NUMBER.value
    if isinstance(value, str):
        return TypeName.STRING.value
    if isinstance(value, (bytes, bytearray)):
        return TypeName.BYTES.value
    if isinstance(value, (list, tuple)):
        return TypeName.ARRAY.value
    if isinstance(value, Mapping):
        return TypeName.OBJECT.value
    if isinstance(value, (datetime.date, datetime.datetime)):
        return TypeName.DATE.value
    if isinstance(value, re.Pattern):
        return TypeName.REGEXP.value
    if callable(value):
        return TypeName.FUNCTION.value
    return type(value).__name__


def normalize_type(marker: Any) -> TypeMarker:
    """Normalize a type marker from a schema definition.

    Returns a type-name string for anything in the TypeName vocabulary (or an
    unknown name given as a string), and the class itself for other classes.

    Raises:
        TypeError: If ``marker`` is neither a string nor a class

    Examples:
        >>> normalize_type(int), normalize_type("Integer"), normalize_type(TypeName.DATE)
        ('number', 'number', 'date')
    """
    if isinstance(marker, TypeName):
        return marker.value
    if isinstance(marker, str):
        name = marker.lower()
        if name in _TYPE_NAMES:
            return name
        return _ALIASES.get(name, marker)
    if isinstance(marker, type):
        return _CLASS_NAMES.get(marker, marker)
    raise TypeError(f"Invalid type marker: {marker!r}")


def type_name(marker: TypeMarker) -> str:
    """Return the display (and typecaster lookup) name of a normalized marker."""
    if isinstance(marker, type):
        return marker.__name__
    return marker


def is_type_marker(value: Any) -> bool:
    """Whether ``value`` can be used as a bare type marker in a definition."""
    return isinstance(value, (str, type))


__all__ = [
    "TypeMarker",
    "type_of",
    "normalize_type",
    "type_name",
    "is_type_marker",
]
