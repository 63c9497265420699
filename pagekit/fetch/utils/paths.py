"""Dotted-path lookup into decoded JSON documents."""

from __future__ import annotations

from typing import Any

_ABSENT = object()


def get_path(document: Any, path: str, default: Any = None) -> Any:
    """Follow a dotted path through dicts and lists.

    Keys containing dots cannot be addressed this way, except that a key
    equal to the whole path is tried first (``@odata.nextLink``). Numeric
    segments index into lists. An empty path returns the document itself.

    Examples:
        >>> get_path({"data": {"items": [1, 2]}}, "data.items")
        [1, 2]
        >>> get_path({"@odata.nextLink": "u"}, "@odata.nextLink")
        'u'
    """
    if not path:
        return document
    if isinstance(document, dict) and path in document:
        return document[path]

    current = document
    for segment in path.split("."):
        if isinstance(current, dict):
            current = current.get(segment, _ABSENT)
        elif isinstance(current, list) and segment.lstrip("-").isdigit():
            index = int(segment)
            current = current[index] if -len(current) <= index < len(current) else _ABSENT
        else:
            return default
        if current is _ABSENT:
            return default
    return current
