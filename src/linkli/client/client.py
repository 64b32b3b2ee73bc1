"""Resource-level client facade: one callable per schema link.

The client is an explicit registry built once from an
:class:`~linkli.models.ApiSchema`::

    Client
    +-- ResourceClient("app")
    |   +-- LinkCallable("app:list")
    |   +-- LinkCallable("app:info")
    +-- ResourceClient("addon")
        +-- ...

Callers look links up by name rather than through generated attributes::

    client = client_from_schema(document, "https://api.example.com")
    apps = client.resource("app").link("list")()
    app = client["app"]["info"]("my-app")
    client.call("app", "update", "my-app", {"name": "renamed"})
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional

from linkli.client.executor import RequestExecutor
from linkli.client.pagination import drain, iter_items
from linkli.client.resolver import resolve
from linkli.client.transport import HttpxTransport, Transport
from linkli.exceptions import InvalidUsageError
from linkli.models import (
    ApiSchema,
    ClientConfig,
    HttpRequest,
    LinkDefinition,
    ResourceSchema,
)
from linkli.parser import extract_schema


class LinkCallable:
    """Invoke one link: resolve, send, and drain every page.

    Args:
        resource_name: Name of the owning resource.
        link: The link definition.
        executor: Executor shared by the client's links.
        default_headers: Headers added to every request.
    """

    def __init__(
        self,
        resource_name: str,
        link: LinkDefinition,
        executor: RequestExecutor,
        default_headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.resource_name = resource_name
        self.link = link
        self._executor = executor
        self._default_headers = dict(default_headers or {})

    @property
    def name(self) -> str:
        """Qualified name, ``<resource>:<link>``."""
        return f"{self.resource_name}:{self.link.name}"

    def __call__(self, *args: Any) -> Any:
        """Invoke the link with its declared parameters in order.

        Returns:
            The decoded JSON value (all pages concatenated for range
            responses), raw bytes for non-JSON bodies, or ``None`` when the
            response has no body.

        Raises:
            ArityError: Before any I/O, on an argument count mismatch.
            ServerError: On a non-2xx response, including mid-pagination.
            TransportError: When the transport fails.
            ParseError: When a JSON response cannot be decoded.
        """
        return drain(self.link, self.build_request(*args), self._executor)

    def iterate(self, *args: Any) -> Iterator[Any]:
        """Yield result items lazily, fetching further pages as needed."""
        request = self.build_request(*args)
        return iter_items(self.link, request, self._executor)

    def build_request(self, *args: Any) -> HttpRequest:
        """Return the request this call would send, without sending it."""
        return resolve(self.link, args, self._default_headers, self.name)

    def __repr__(self) -> str:
        return f"<LinkCallable {self.name} {self.link.method.value} {self.link.href}>"


class ResourceClient:
    """The links of one resource, keyed by link name."""

    def __init__(
        self,
        resource: ResourceSchema,
        executor: RequestExecutor,
        default_headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.schema = resource
        self.links: dict[str, LinkCallable] = {
            link.name: LinkCallable(resource.name, link, executor, default_headers)
            for link in resource.links
        }

    @property
    def name(self) -> str:
        return self.schema.name

    def link(self, name: str) -> LinkCallable:
        """Return the callable for link *name*.

        Raises:
            InvalidUsageError: If the resource has no such link.
        """
        try:
            return self.links[name]
        except KeyError:
            raise InvalidUsageError(
                f"Resource '{self.name}' has no link called '{name}'"
            ) from None

    __getitem__ = link

    def __contains__(self, name: object) -> bool:
        return name in self.links

    def __iter__(self) -> Iterator[LinkCallable]:
        return iter(self.links.values())


class Client:
    """Programmatic client exposing every link of an API schema.

    Args:
        schema: The extracted schema index.
        transport: Transport used for every request.
        config: Client settings; only ``default_headers`` is read here, the
            remaining fields configure the transport.
    """

    def __init__(
        self,
        schema: ApiSchema,
        transport: Transport,
        config: Optional[ClientConfig] = None,
    ) -> None:
        self.schema = schema
        self.transport = transport
        headers = config.default_headers if config else {"Accept": "application/json"}
        executor = RequestExecutor(transport)
        self.resources: dict[str, ResourceClient] = {
            name: ResourceClient(resource, executor, headers)
            for name, resource in schema.resources.items()
        }

    def resource(self, name: str) -> ResourceClient:
        """Return the client for resource *name*.

        Raises:
            InvalidUsageError: If the schema has no such resource.
        """
        try:
            return self.resources[name]
        except KeyError:
            raise InvalidUsageError(f"There is no resource called '{name}'") from None

    __getitem__ = resource

    def __contains__(self, name: object) -> bool:
        return name in self.resources

    def call(self, resource: str, link: str, *args: Any) -> Any:
        """Invoke ``resource:link`` with *args*."""
        return self.resource(resource).link(link)(*args)

    def close(self) -> None:
        """Close the transport when it supports closing."""
        close = getattr(self.transport, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def client_from_schema(
    document: dict[str, Any],
    base_url: str,
    headers: Optional[Mapping[str, str]] = None,
    transport: Optional[Transport] = None,
    config: Optional[ClientConfig] = None,
) -> Client:
    """Build a :class:`Client` from a raw schema document.

    Args:
        document: The raw hyper-schema document.
        base_url: Root URL of the API.
        headers: Extra default headers, merged over ``Accept: application/json``.
        transport: Transport to use; an :class:`HttpxTransport` for
            *base_url* is created when omitted.
        config: Full settings; *base_url* and *headers* are layered on top.

    Returns:
        The ready-to-use client.
    """
    config = (config or ClientConfig(base_url=base_url)).model_copy(deep=True)
    config.base_url = base_url
    if headers:
        config.default_headers.update(headers)
    return Client(
        extract_schema(document),
        transport if transport is not None else HttpxTransport(config),
        config,
    )
