"""Bind positional arguments to a link and build the concrete request.

:func:`resolve` is pure: it checks arity, substitutes path parameters in
declared order, and serializes the trailing body argument when the link has
one.  Nothing is sent from here.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Sequence
from urllib.parse import quote, urlencode

from linkli.exceptions import ArityError
from linkli.models import HttpRequest, LinkDefinition

FORM_ENC_TYPE = "application/x-www-form-urlencoded"


def resolve(
    link: LinkDefinition,
    args: Sequence[Any],
    default_headers: Optional[Mapping[str, str]] = None,
    display_name: Optional[str] = None,
) -> HttpRequest:
    """Build the request for invoking *link* with *args*.

    When the link has a body, the last element of *args* is the body
    payload and the preceding elements bind to path placeholders.

    Args:
        link: The link to invoke.
        args: Positional arguments, one per declared parameter.
        default_headers: Headers sent with every request.
        display_name: Name used in error messages (defaults to the link slug).

    Returns:
        The request descriptor.

    Raises:
        ArityError: If ``len(args)`` differs from the link's arity.
    """
    check_arity(link, args, display_name)

    if link.has_body:
        path_args, body = list(args[:-1]), args[-1]
    else:
        path_args, body = list(args), None

    headers = dict(default_headers or {})
    content: Optional[bytes] = None
    if link.has_body and body is not None:
        content, content_type = encode_body(body, link.enc_type)
        headers["Content-Type"] = content_type

    return HttpRequest(
        method=link.method,
        path=format_path(link, path_args),
        headers=headers,
        body=content,
    )


def check_arity(
    link: LinkDefinition,
    args: Sequence[Any],
    display_name: Optional[str] = None,
) -> None:
    """Raise :class:`ArityError` unless ``len(args) == link.arity``."""
    if len(args) != link.arity:
        raise ArityError(display_name or link.name, link.arity, len(args))


def format_path(link: LinkDefinition, path_args: Sequence[Any]) -> str:
    """Fill the link's URL template, escaping each argument as a path segment."""
    parts: list[str] = []
    for segment in link.segments:
        if segment.parameter is not None:
            parts.append(quote(str(path_args[segment.parameter]), safe=""))
        else:
            parts.append(segment.literal or "")
    return "".join(parts)


def encode_body(body: Any, enc_type: str = "application/json") -> tuple[bytes, str]:
    """Serialize *body* for the wire.

    Form-encoded links get ``application/x-www-form-urlencoded``; every other
    link is sent as JSON.

    Returns:
        ``(content, content_type)``.
    """
    if enc_type == FORM_ENC_TYPE:
        if isinstance(body, Mapping):
            return urlencode(body, doseq=True).encode("utf-8"), FORM_ENC_TYPE
        return str(body).encode("utf-8"), FORM_ENC_TYPE
    return json.dumps(body).encode("utf-8"), "application/json"
