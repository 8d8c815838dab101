"""Built-in validators and their default messages.

Every validator has the signature ``fn(value, ctx, arg) -> bool`` where
``value`` is the value being validated, ``ctx`` is the whole object passed to
``Schema.validate`` and ``arg`` is the argument the validator was registered
with on the property (e.g. ``{"min": 1, "max": 10}`` for ``length``).

A message is either a string template, formatted with ``path`` and ``arg``,
or a function of ``(path, arg)`` returning the final string.
"""

import re
from collections.abc import Mapping
from typing import Any, Callable, Dict, Union

from dotschema.typeof import type_name, type_of
from dotschema.types import DEFAULT_MESSAGE_KEY, ValidatorName

Validator = Callable[[Any, Any, Any], bool]
Message = Union[str, Callable[[str, Any], str]]


def required(value: Any, ctx: Any, flag: Any) -> bool:
    """Validates presence; ``flag=False`` always passes."""
    if flag is False:
        return True
    return value is not None


def nonempty(value: Any, ctx: Any, flag: Any) -> bool:
    """Validates that strings, arrays and objects have at least one item."""
    if flag is False:
        return True
    kind = type_of(value)
    if kind in ("string", "array", "bytes", "object"):
        return len(value) > 0
    return value is not None


def type_(value: Any, ctx: Any, marker: Any) -> bool:
    """Validates the type name of ``value``, or ``isinstance`` for classes."""
    if isinstance(marker, type):
        return isinstance(value, marker)
    return type_of(value) == marker


def length(value: Any, ctx: Any, rules: Mapping) -> bool:
    """Validates ``len(value)`` against optional ``min`` and ``max`` bounds."""
    try:
        size = len(value)
    except TypeError:
        return False
    minimum = rules.get("min")
    maximum = rules.get("max")
    if minimum is not None and size < minimum:
        return False
    if maximum is not None and size > maximum:
        return False
    return True


def enum(value: Any, ctx: Any, allowed: Any) -> bool:
    return value in allowed


def match(value: Any, ctx: Any, pattern: Any) -> bool:
    """Validates that ``pattern`` is found in ``value`` (``re.search``)."""
    if not isinstance(value, str):
        value = str(value)
    if isinstance(pattern, re.Pattern):
        return pattern.search(value) is not None
    return re.search(pattern, value) is not None


def _length_message(path: str, rules: Mapping) -> str:
    minimum = rules.get("min")
    maximum = rules.get("max")
    if minimum is not None and maximum is not None:
        return f"{path} must have a length between {minimum} and {maximum}"
    if minimum is not None:
        return f"{path} must have a minimum length of {minimum}"
    return f"{path} must have a maximum length of {maximum}"


def _enum_message(path: str, allowed: Any) -> str:
    return f"{path} must be either {' or '.join(str(v) for v in allowed)}"


def _match_message(path: str, pattern: Any) -> str:
    if isinstance(pattern, re.Pattern):
        pattern = pattern.pattern
    return f"{path} must match {pattern}"


# Default validators, copied into every Schema
VALIDATORS: Dict[str, Validator] = {
    ValidatorName.REQUIRED.value: required,
    ValidatorName.NONEMPTY.value: nonempty,
    ValidatorName.TYPE.value: type_,
    ValidatorName.LENGTH.value: length,
    ValidatorName.ENUM.value: enum,
    ValidatorName.MATCH.value: match,
}

# Default messages, copied into every Schema
MESSAGES: Dict[str, Message] = {
    ValidatorName.REQUIRED.value: "{path} is required",
    ValidatorName.NONEMPTY.value: "{path} must not be empty",
    ValidatorName.TYPE.value: lambda path, marker: f"{path} must be of type {type_name(marker)}",
    ValidatorName.LENGTH.value: _length_message,
    ValidatorName.ENUM.value: _enum_message,
    ValidatorName.MATCH.value: _match_message,
    DEFAULT_MESSAGE_KEY: "Validation failed for {path}",
}


_PLACEHOLDER = re.compile(r"\{(path|arg)\}")


def format_message(message: Message, path: str, arg: Any) -> str:
    """Render ``message`` for the given path and validator argument.

    Only ``{path}`` and ``{arg}`` are substituted in string messages; any
    other braces are kept as written.
    """
    if callable(message):
        return message(path, arg)
    values = {"path": path, "arg": arg}
    return _PLACEHOLDER.sub(lambda m: str(values[m.group(1)]), message)


__all__ = [
    "Validator",
    "Message",
    "VALIDATORS",
    "MESSAGES",
    "format_message",
    "required",
    "nonempty",
    "type_",
    "length",
    "enum",
    "match",
]
