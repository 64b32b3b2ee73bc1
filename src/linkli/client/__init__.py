"""Link-invocation engine for linkli.

Resolves a link's URL template against caller-supplied arguments, sends the
request through an injected transport, and interprets the response,
including transparent range pagination.

Modules:
    :mod:`~linkli.client.resolver` -- arity check, path and body construction.
    :mod:`~linkli.client.transport` -- :class:`Transport` protocol and the
    :mod:`httpx`-backed :class:`HttpxTransport`.
    :mod:`~linkli.client.executor` -- status classification and body decoding.
    :mod:`~linkli.client.pagination` -- ``Next-Range`` draining.
    :mod:`~linkli.client.client` -- the :class:`Client` registry.

Example::

    from linkli.client import client_from_schema

    client = client_from_schema(document, "https://api.example.com")
    apps = client.call("app", "list")
"""

from linkli.client.client import Client, LinkCallable, ResourceClient, client_from_schema
from linkli.client.executor import RequestExecutor
from linkli.client.transport import HttpxTransport, Transport

__all__ = [
    "Client",
    "ResourceClient",
    "LinkCallable",
    "client_from_schema",
    "RequestExecutor",
    "HttpxTransport",
    "Transport",
]
