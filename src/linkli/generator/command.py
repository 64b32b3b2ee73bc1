"""CLI adapter wrapping a single schema link.

A :class:`Command` checks positional-argument arity, renders usage text from
the link's schema, invokes the matching client callable, and writes the
final (possibly multi-page) result to an output sink.  Results are written
only after every page has been fetched, so a failure never leaves partial
output behind.
"""

from __future__ import annotations

import json
from typing import Any, TextIO

from linkli.client.client import Client, LinkCallable
from linkli.client.resolver import check_arity
from linkli.models import LinkDefinition


class Command:
    """One CLI command, named ``<resource>:<link>``.

    Args:
        cli_name: Name of the executable, used in usage text.
        resource_name: Name of the resource owning the link.
        link: The link this command invokes.
        client: Client holding the callable for the link.
        output: Sink the result is written to.
    """

    def __init__(
        self,
        cli_name: str,
        resource_name: str,
        link: LinkDefinition,
        client: Client,
        output: TextIO,
    ) -> None:
        self.cli_name = cli_name
        self.resource_name = resource_name
        self.link = link
        self.client = client
        self.output = output

    @property
    def name(self) -> str:
        return f"{self.resource_name}:{self.link.name}"

    @property
    def description(self) -> str:
        """The link's description, or ``"<METHOD> <href>"`` when it has none."""
        if self.link.description:
            return self.link.description
        return f"{self.link.method.value} {_display_href(self.link)}"

    def run(self, *args: Any) -> None:
        """Invoke the link with *args* and write the result.

        Structured results are written as JSON, text is written as-is, and
        an empty successful response writes nothing.

        Raises:
            ArityError: Before any request, on an argument count mismatch.
        """
        check_arity(self.link, args, self.name)
        result = self._callable()(*args)
        if result is None:
            return
        if isinstance(result, bytes):
            self.output.write(result.decode("utf-8", errors="replace"))
        elif isinstance(result, str):
            self.output.write(result)
        else:
            self.output.write(json.dumps(result))

    def usage(self) -> None:
        """Write the usage line and description block."""
        parameters = "".join(f" <{name}>" for name in self.link.parameter_names)
        self.output.write(
            f"Usage: {self.cli_name} {self.name}{parameters}\n"
            "\n"
            "Description:\n"
            f"  {self.description}\n"
        )

    def _callable(self) -> LinkCallable:
        return self.client.resource(self.resource_name).link(self.link.name)


def _display_href(link: LinkDefinition) -> str:
    """Render the URL template with ``{name}`` placeholders."""
    parts = []
    for segment in link.segments:
        if segment.parameter is not None:
            parts.append("{" + link.parameters[segment.parameter].name + "}")
        else:
            parts.append(segment.literal or "")
    return "".join(parts)
