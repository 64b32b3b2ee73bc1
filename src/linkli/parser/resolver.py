"""Resolve JSON Pointer references inside a schema document.

Link ``href`` templates name their parameters with percent-encoded JSON
pointers (``{(%23%2Fdefinitions%2Fapp%2Fdefinitions%2Fid)}``), and definitions
frequently point at each other with ``{"$ref": "#/..."}``.  This module
navigates both.

Only **internal** references (``#/...`` or a bare ``/...`` pointer) are
supported.  External file or URL references raise
:class:`~linkli.exceptions.SchemaError`.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import unquote

from linkli.exceptions import SchemaError


def resolve_pointer(document: dict[str, Any], pointer: str) -> Any:
    """Return the value *pointer* designates in *document*.

    ``$ref`` chains at the target are followed until a concrete value is
    reached.  A chain that loops back on itself returns the ``$ref`` dict
    at the cycle point.

    Args:
        document: The root schema document.
        pointer: A JSON pointer such as ``#/definitions/app/definitions/id``.
            Percent-encoded pointers are decoded first.

    Returns:
        The referenced value.

    Raises:
        SchemaError: If the pointer is external or any segment is missing.

    Example::

        resolve_pointer(doc, "%23%2Fdefinitions%2Fapp")
        # same as resolve_pointer(doc, "#/definitions/app")
    """
    seen: set[str] = set()
    target = _resolve_once(document, unquote(pointer))
    while isinstance(target, dict) and isinstance(target.get("$ref"), str):
        ref = target["$ref"]
        if ref in seen:
            return target
        seen.add(ref)
        target = _resolve_once(document, ref)
    return target


def pointer_segments(pointer: str) -> list[str]:
    """Split a JSON pointer into unescaped segments.

    Handles RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``).

    Raises:
        SchemaError: If the pointer is not an internal reference.
    """
    pointer = unquote(pointer)
    if pointer.startswith("#"):
        pointer = pointer[1:]
    if pointer == "":
        return []
    if not pointer.startswith("/"):
        raise SchemaError(
            f"External $ref not supported: {pointer}. "
            "Only internal references (#/...) are handled."
        )
    return [
        segment.replace("~1", "/").replace("~0", "~")
        for segment in pointer[1:].split("/")
    ]


def _resolve_once(document: dict[str, Any], ref: str) -> Any:
    """Navigate *document* along a single pointer, without following ``$ref``."""
    current: Any = document
    for segment in pointer_segments(ref):
        if isinstance(current, dict):
            if segment not in current:
                raise SchemaError(
                    f"Cannot resolve '{ref}': key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SchemaError(
                    f"Cannot resolve '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SchemaError(
                f"Cannot resolve '{ref}': cannot navigate into {type(current).__name__}"
            )
    return current
