"""Dot-path access into nested mappings and sequences.

Paths are strings such as ``"author.posts.0.title"``. Each segment indexes a
mapping by key or a list by integer position. Reads never create intermediate
structure: a missing segment reads as ``None`` and makes writes a no-op.

The segment ``$`` stands for "every element of the array at this point" and
is only meaningful to ``expand``.
"""

from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from typing import Any, Iterator, List, Tuple

EACH = "$"
SEPARATOR = "."

_MISSING = object()


def split(path: str) -> List[str]:
    """Split ``path`` into segments; the empty path has no segments."""
    if not path:
        return []
    return path.split(SEPARATOR)


def join(*parts: Any) -> str:
    """Join path segments, skipping empty ones.

    >>> join("posts", 0, "title")
    'posts.0.title'
    >>> join("", "name")
    'name'
    """
    return SEPARATOR.join(str(p) for p in parts if p is not None and p != "")


def _child(container: Any, segment: str) -> Any:
    if isinstance(container, Mapping):
        return container.get(segment, _MISSING)
    if isinstance(container, Sequence) and not isinstance(container, (str, bytes, bytearray)):
        try:
            index = int(segment)
        except ValueError:
            return _MISSING
        if 0 <= index < len(container):
            return container[index]
    return _MISSING


def _walk(obj: Any, segments: List[str]) -> Any:
    current = obj
    for segment in segments:
        current = _child(current, segment)
        if current is _MISSING:
            return _MISSING
    return current


def get(obj: Any, path: str) -> Any:
    """Read the value at ``path``, or ``None`` when any segment is missing.

    >>> get({"a": {"b": [10, 20]}}, "a.b.1")
    20
    >>> get({"a": {}}, "a.b.c") is None
    True
    """
    value = _walk(obj, split(path))
    return None if value is _MISSING else value


def has(obj: Any, path: str) -> bool:
    """Whether every segment of ``path`` exists (the value may be ``None``)."""
    return _walk(obj, split(path)) is not _MISSING


def set(obj: Any, path: str, value: Any) -> None:
    """Write ``value`` at ``path``; a no-op if the parent does not exist.

    Tuples and other immutable containers are read-only.

    >>> data = {"a": {"b": 1}}
    >>> set(data, "a.b", 2); data
    {'a': {'b': 2}}
    >>> set(data, "x.y", 3); data
    {'a': {'b': 2}}
    """
    segments = split(path)
    if not segments:
        return
    parent = _walk(obj, segments[:-1])
    key = segments[-1]
    if isinstance(parent, MutableMapping):
        parent[key] = value
    elif isinstance(parent, MutableSequence):
        try:
            index = int(key)
        except ValueError:
            return
        if 0 <= index < len(parent):
            parent[index] = value


def delete(obj: Any, path: str) -> None:
    """Remove the mapping key at ``path``; a no-op if it does not exist."""
    segments = split(path)
    if not segments:
        return
    parent = _walk(obj, segments[:-1])
    if isinstance(parent, MutableMapping):
        parent.pop(segments[-1], None)


def expand(obj: Any, path: str) -> Iterator[Tuple[str, Any]]:
    """Yield ``(concrete_path, value)`` for every location ``path`` denotes.

    A path without ``$`` yields exactly one pair (the value may be ``None``).
    Each ``$`` segment fans out over the indexes of the array found there;
    when that array is missing or is not an array, nothing is yielded.

    >>> list(expand({"tags": ["a", "b"]}, "tags.$"))
    [('tags.0', 'a'), ('tags.1', 'b')]
    >>> list(expand({}, "tags.$"))
    []
    """
    segments = split(path)
    if EACH not in segments:
        yield path, get(obj, path)
        return

    position = segments.index(EACH)
    prefix = segments[:position]
    rest = segments[position + 1:]
    container = _walk(obj, prefix)
    if not isinstance(container, (list, tuple)):
        return
    for index in range(len(container)):
        yield from expand(obj, join(*prefix, index, *rest))


__all__ = [
    "EACH",
    "SEPARATOR",
    "split",
    "join",
    "get",
    "has",
    "set",
    "delete",
    "expand",
]
