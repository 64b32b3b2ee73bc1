"""Send requests through the transport and interpret the responses.

:class:`RequestExecutor` classifies each response by status code (any 2xx
is success; everything else raises a
:class:`~linkli.exceptions.ServerError` subclass carrying the response) and
decodes bodies by content type.  It never retries.
"""

from __future__ import annotations

import json
import re
from typing import Any

from linkli.client.transport import Transport
from linkli.exceptions import AuthError, NotFoundError, ParseError, ServerError
from linkli.models import HttpRequest, HttpResponse
from linkli.output import get_output

# application/json, application/schema+json, application/vnd.heroku+json; version=3
_JSON_CONTENT_TYPE = re.compile(r"^\s*application/(?:[\w.+-]*[+.])?json\s*(?:;|$)", re.I)


def is_json_content_type(content_type: str | None) -> bool:
    """Return ``True`` when *content_type* declares a JSON body."""
    return bool(content_type and _JSON_CONTENT_TYPE.match(content_type))


class RequestExecutor:
    """Issue requests through a :class:`~linkli.client.transport.Transport`.

    Args:
        transport: The injected transport collaborator.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def execute(self, request: HttpRequest) -> HttpResponse:
        """Send *request* and return the response when it is a 2xx.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On any other non-2xx status.
            TransportError: Propagated from the transport unchanged.
        """
        output = get_output()
        method = request.method.value
        output.debug(f"{method} {request.path}")
        for name, value in request.headers.items():
            if name.lower() in ("range", "content-type"):
                output.debug(f"  {name}: {value}")

        response = self._transport.send(
            method, request.path, request.headers, request.body
        )
        output.debug(f"HTTP {response.status_code} ({len(response.content)} bytes)")

        if not response.is_success:
            raise _error_for(response)
        return response

    def decode(self, response: HttpResponse) -> Any:
        """Return the response body in its natural form.

        JSON content types are deserialized; any other body is passed
        through as raw bytes.  Empty bodies yield ``None``.

        Raises:
            ParseError: If a JSON content type carries an undecodable body.
        """
        if not response.content:
            return None
        content_type = response.content_type
        if is_json_content_type(content_type):
            try:
                return json.loads(response.content)
            except ValueError as exc:
                raise ParseError(content_type, response.content, str(exc)) from exc
        return response.content


def _error_for(response: HttpResponse) -> ServerError:
    """Map a non-2xx response to the matching :class:`ServerError` subclass."""
    status = response.status_code
    if status in (401, 403):
        cls: type[ServerError] = AuthError
    elif status == 404:
        cls = NotFoundError
    else:
        cls = ServerError
    return cls(status, response.headers, response.content)
