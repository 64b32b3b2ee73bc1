"""Command registry: list, describe and dispatch every link as a command.

:class:`CLI` holds one :class:`~linkli.generator.command.Command` per link of
every resource and turns a flat argument list into a command invocation::

    cli                     -> command listing
    cli help                -> command listing
    cli help app:info       -> usage of app:info
    cli app:info my-app     -> run app:info with ("my-app",)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence, TextIO

from linkli.client.client import Client, client_from_schema
from linkli.client.transport import Transport
from linkli.exceptions import InvalidUsageError
from linkli.generator.command import Command
from linkli.models import ClientConfig


class CLI:
    """Dispatch command-line arguments to link commands.

    Args:
        name: Name of the executable, shown in usage text.
        commands: The commands to expose.
        output: Sink for listings and usage text.
    """

    def __init__(self, name: str, commands: Iterable[Command], output: TextIO) -> None:
        self.name = name
        self.output = output
        self.commands: dict[str, Command] = {c.name: c for c in commands}

    def run(self, *argv: str) -> None:
        """Run the command named by ``argv[0]`` with the remaining arguments.

        Raises:
            InvalidUsageError: If no command has that name.
            ArityError: If the command receives the wrong number of arguments.
        """
        if not argv or argv[0] == "help":
            topic = argv[1] if len(argv) > 1 else None
            if topic is None:
                self.usage()
            else:
                self.command(topic).usage()
            return

        command = self.command(argv[0])
        command.run(*parse_arguments(command, argv[1:]))

    def command(self, name: str) -> Command:
        """Return the command called *name*.

        Raises:
            InvalidUsageError: If there is no such command.
        """
        try:
            return self.commands[name]
        except KeyError:
            raise InvalidUsageError(f"There is no command called '{name}'.") from None

    def usage(self) -> None:
        """Write the list of commands, sorted by name, with their descriptions."""
        self.output.write(
            f"Usage: {self.name} <command> [<parameter> [...]] [<body>]\n"
            "\n"
            f'Help topics, type "{self.name} help <topic>" for more details:\n'
            "\n"
        )
        commands = sorted(self.commands.values(), key=lambda c: c.name)
        width = max((len(c.name) for c in commands), default=0)
        for command in commands:
            self.output.write(f"  {command.name.ljust(width)}    {command.description}\n")


def parse_arguments(command: Command, args: Sequence[str]) -> list[Any]:
    """Convert command-line strings into call arguments.

    Path parameters stay strings.  When the link takes a body and every
    argument is present, the last one is decoded by :func:`parse_body`.
    Wrong counts are passed through untouched so that
    :meth:`Command.run` reports the arity error.
    """
    values: list[Any] = list(args)
    if command.link.has_body and len(values) == command.link.arity:
        values[-1] = parse_body(values[-1])
    return values


def parse_body(raw: str) -> Any:
    """Decode a body argument.

    A leading ``@`` reads the body from the named file.  The text is then
    parsed as JSON when possible and otherwise sent as a plain string.

    Raises:
        InvalidUsageError: If an ``@file`` reference does not exist.
    """
    if raw.startswith("@"):
        file_path = Path(raw[1:])
        if not file_path.is_file():
            raise InvalidUsageError(f"Body file not found: {file_path}")
        raw = file_path.read_text(encoding="utf-8")
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def build_commands(cli_name: str, client: Client, output: TextIO) -> list[Command]:
    """Create a :class:`Command` for every link of every resource in *client*."""
    commands: list[Command] = []
    for resource in client.schema.resources.values():
        for link in resource.links:
            commands.append(
                Command(cli_name, resource.name, link, client, output)
            )
    return commands


def cli_from_schema(
    cli_name: str,
    output: TextIO,
    document: dict[str, Any],
    base_url: str,
    headers: Optional[Mapping[str, str]] = None,
    transport: Optional[Transport] = None,
    config: Optional[ClientConfig] = None,
) -> CLI:
    """Build a :class:`CLI` exposing every link of *document*.

    Args:
        cli_name: Name of the executable.
        output: Sink for command results and usage text.
        document: The raw hyper-schema document.
        base_url: Root URL of the API.
        headers: Extra default request headers.
        transport: Transport override (an httpx transport by default).
        config: Full client settings.
    """
    client = client_from_schema(document, base_url, headers, transport, config)
    return CLI(cli_name, build_commands(cli_name, client, output), output)
