"""Transport collaborator -- the only code that touches the network.

The invocation engine never opens sockets itself.  It hands a fully built
request to a :class:`Transport` and receives an
:class:`~linkli.models.HttpResponse` back.  Anything that satisfies the
protocol can be injected: :class:`HttpxTransport` for real traffic, or a
recording fake in tests.

Connection pooling, TLS, timeouts and any socket-level retry policy belong
to the transport.  Failures must be raised as
:class:`~linkli.exceptions.TransportError`.
"""

from __future__ import annotations

from typing import Mapping, Optional, Protocol

import httpx

from linkli import __version__
from linkli.exceptions import TransportError
from linkli.models import ClientConfig, HttpResponse


class Transport(Protocol):
    """Send one request and return the raw response."""

    def send(
        self,
        method: str,
        path: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ) -> HttpResponse:
        ...


class HttpxTransport:
    """:class:`Transport` backed by :class:`httpx.Client`.

    The underlying client is created on first use, or when entering the
    context manager, and closed on exit.  The path component of
    ``config.base_url`` prefixes every request path.

    Args:
        config: Base URL, timeout, SSL and user-agent settings.
        client: Optional pre-built :class:`httpx.Client` (e.g. one using an
            :class:`httpx.MockTransport`); it is used as-is.

    Example::

        with HttpxTransport(ClientConfig(base_url="https://api.example.com")) as t:
            response = t.send("GET", "/apps", {"Accept": "application/json"}, None)
    """

    def __init__(
        self,
        config: ClientConfig,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._config = config
        self._client = client

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> HttpxTransport:
        self._ensure_client()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Transport protocol
    # ------------------------------------------------------------------ #

    def send(
        self,
        method: str,
        path: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ) -> HttpResponse:
        """Send the request and collect status, headers and body.

        Raises:
            TransportError: On connection, DNS, TLS or timeout failures.
        """
        client = self._ensure_client()
        try:
            response = client.request(
                method,
                path,
                headers=dict(headers),
                content=body,
            )
        except httpx.TimeoutException as exc:
            raise TransportError(f"Request timed out: {method} {path}: {exc}") from exc
        except httpx.RequestError as exc:
            raise TransportError(f"Connection failed: {method} {path}: {exc}") from exc

        return HttpResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            content=response.content,
        )

    def _ensure_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
                follow_redirects=True,
                headers={"User-Agent": self._config.user_agent or f"linkli/{__version__}"},
            )
        return self._client
