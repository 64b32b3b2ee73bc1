"""Exception hierarchy for linkli.

All exceptions inherit from :class:`LinkliError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`linkli.exit_codes`.
The top-level error handler in :func:`linkli.app.main` catches
``LinkliError`` and exits with the appropriate code.

Subclass hierarchy::

    LinkliError (exit 1)
    +-- InvalidUsageError   (exit 2)
    |   +-- ArityError      (exit 2)
    +-- ServerError         (exit 5)
    |   +-- AuthError       (exit 3)
    |   +-- NotFoundError   (exit 4)
    +-- TransportError      (exit 6)
    +-- SchemaError         (exit 7)
    +-- ParseError          (exit 8)
    +-- ConfigError         (exit 1)

None of these are recovered inside the invocation engine; they propagate
unchanged to the client call or command run that triggered them.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from linkli.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_PARSE_ERROR,
    EXIT_SCHEMA_ERROR,
    EXIT_SERVER_ERROR,
    EXIT_TRANSPORT_ERROR,
)


class LinkliError(Exception):
    """Base exception for all linkli errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(LinkliError):
    """Raised for unknown commands or otherwise invalid CLI input."""

    exit_code = EXIT_INVALID_USAGE


class ArityError(InvalidUsageError):
    """Raised when a link is invoked with the wrong number of arguments.

    Always raised before any network I/O takes place.

    Args:
        link_name: Display name of the link (``resource:link``).
        expected: Number of arguments the link declares.
        actual: Number of arguments the caller supplied.
    """

    def __init__(self, link_name: str, expected: int, actual: int):
        self.link_name = link_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"wrong number of arguments for {link_name} "
            f"({actual} for {expected})"
        )


class ServerError(LinkliError):
    """Raised when the API answers with a non-2xx status.

    The response is kept intact so callers can inspect server-provided
    error details.

    Args:
        status_code: The HTTP status code.
        headers: The response headers.
        body: The raw response body.
        message: Optional override for the generated message.
    """

    exit_code = EXIT_SERVER_ERROR

    def __init__(
        self,
        status_code: int,
        headers: Optional[Mapping[str, str]] = None,
        body: bytes = b"",
        message: Optional[str] = None,
    ):
        self.status_code = status_code
        self.headers = dict(headers or {})
        self.body = body
        super().__init__(message or _describe_error(status_code, body))

    @property
    def data(self) -> Any:
        """The error body decoded as JSON, or ``None`` when it is not JSON."""
        if not self.body:
            return None
        try:
            return json.loads(self.body)
        except ValueError:
            return None


class AuthError(ServerError):
    """Raised when the API answers HTTP 401 or 403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(ServerError):
    """Raised when the API answers HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class TransportError(LinkliError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused)."""

    exit_code = EXIT_TRANSPORT_ERROR


class SchemaError(LinkliError):
    """Raised when the API schema cannot be loaded or its links are malformed."""

    exit_code = EXIT_SCHEMA_ERROR


class ParseError(LinkliError):
    """Raised when a response declared as JSON cannot be decoded.

    Args:
        content_type: The ``Content-Type`` the response declared.
        body: The raw body that failed to decode.
    """

    exit_code = EXIT_PARSE_ERROR

    def __init__(self, content_type: str, body: bytes, detail: str = ""):
        self.content_type = content_type
        self.body = body
        message = f"Could not decode {content_type} response body"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class ConfigError(LinkliError):
    """Raised for configuration problems (invalid project config, malformed headers)."""

    exit_code = EXIT_GENERIC_FAILURE


def _describe_error(status_code: int, body: bytes) -> str:
    """Build ``HTTP <status>: <message>`` from an error body."""
    prefix = f"HTTP {status_code}"
    msg = ""
    try:
        detail = json.loads(body) if body else None
        if isinstance(detail, dict):
            msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
        elif detail is not None:
            msg = str(detail)
    except ValueError:
        msg = body[:200].decode("utf-8", errors="replace")
    return f"{prefix}: {msg}" if msg else prefix
