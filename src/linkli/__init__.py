"""linkli -- API clients and CLI commands generated from hyper-schema links.

Given a JSON-Schema-like description of a resource-oriented HTTP API
(resources, ``links`` describing operations, and parameter/property
definitions), linkli produces a programmatic client with one callable per
link, and a set of CLI commands mirroring those links.

Typical usage::

    from linkli import client_from_schema, load_schema

    client = client_from_schema(load_schema("schema.json"), "https://api.example.com")
    apps = client.call("app", "list")

or from the shell::

    linkli --schema schema.json app:list

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: Settings resolution from flags, environment and project config.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stderr diagnostics with Rich support.
"""

__version__ = "0.1.0"

from linkli.client import Client, client_from_schema  # noqa: E402
from linkli.generator import CLI, Command, cli_from_schema  # noqa: E402
from linkli.parser import extract_schema, load_schema  # noqa: E402

__all__ = [
    "CLI",
    "Client",
    "Command",
    "cli_from_schema",
    "client_from_schema",
    "extract_schema",
    "load_schema",
]
