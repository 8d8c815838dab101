"""Best-effort value coercion.

Each typecaster converts a raw value (typically a string from a form, a query
string or loosely typed JSON) into one of the TypeName types. A typecaster
never raises for unconvertible input; it returns the value unchanged, so the
problem surfaces later as a ``type`` validation error.

Typecasters are looked up by type name. Custom classes are looked up by their
class name, e.g. ``schema.typecaster("Money", Money.parse)``.
"""

import datetime
import json
import logging
import re
from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional

from dateutil import parser as date_parser

from dotschema.typeof import TypeMarker, normalize_type, type_name
from dotschema.types import TypeName

logger = logging.getLogger(__name__)

Typecaster = Callable[[Any], Any]

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off", ""})


def to_string(value: Any) -> Any:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return str(value)


def to_number(value: Any) -> Any:
    """Convert to int when the input is integral, float otherwise."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return value
    return value


def to_boolean(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return value


def to_date(value: Any) -> Any:
    """Parse date strings with dateutil; numbers are POSIX timestamps (UTC)."""
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        try:
            return datetime.datetime.fromtimestamp(value, tz=datetime.timezone.utc)
        except (OverflowError, OSError, ValueError):
            return value
    if isinstance(value, str):
        try:
            return date_parser.parse(value)
        except (ValueError, OverflowError):
            return value
    return value


def to_array(value: Any) -> Any:
    """Split comma separated strings; wrap other scalars in a list."""
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    if isinstance(value, str):
        if not value:
            return []
        return [part.strip() for part in value.split(",")]
    return [value]


def to_object(value: Any) -> Any:
    """Decode JSON object strings; anything else is returned unchanged."""
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except ValueError:
            return value
        if isinstance(decoded, Mapping):
            return decoded
    return value


def to_regexp(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return re.compile(value)
        except re.error:
            return value
    return value


# Default typecasters, keyed by type name. Copied into every Schema.
TYPECASTERS: Dict[str, Typecaster] = {
    TypeName.STRING.value: to_string,
    TypeName.NUMBER.value: to_number,
    TypeName.BOOLEAN.value: to_boolean,
    TypeName.DATE.value: to_date,
    TypeName.ARRAY.value: to_array,
    TypeName.OBJECT.value: to_object,
    TypeName.REGEXP.value: to_regexp,
}


def typecast(value: Any, marker: Any, typecasters: Optional[Dict[str, Typecaster]] = None) -> Any:
    """Coerce ``value`` into the type denoted by ``marker``.

    Args:
        value: The raw value
        marker: A type marker (see ``dotschema.typeof.normalize_type``)
        typecasters: Table to look the typecaster up in (defaults to TYPECASTERS)

    Returns:
        The coerced value, or ``value`` unchanged when no typecaster is
        registered for the type or the conversion fails

    Examples:
        >>> typecast("42", int)
        42
        >>> typecast("a, b", "array")
        ['a', 'b']
        >>> typecast("not a number", "number")
        'not a number'
    """
    if value is None:
        return value
    table = TYPECASTERS if typecasters is None else typecasters
    normalized: TypeMarker = normalize_type(marker)
    name = type_name(normalized)
    caster = table.get(name)
    if caster is None:
        logger.debug("No typecaster registered for type '%s', value left unchanged", name)
        return value
    return caster(value)


__all__ = [
    "Typecaster",
    "TYPECASTERS",
    "typecast",
    "to_string",
    "to_number",
    "to_boolean",
    "to_date",
    "to_array",
    "to_object",
    "to_regexp",
]
