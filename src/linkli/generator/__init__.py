"""Command generator -- one CLI command per schema link.

Public API:

* :class:`~linkli.generator.command.Command` -- wraps a single link with
  arity checking, usage text and result writing.
* :class:`~linkli.generator.cli.CLI` -- lists and dispatches commands.
* :func:`~linkli.generator.cli.cli_from_schema` -- build a :class:`CLI` from a
  raw schema document.
"""

from linkli.generator.cli import CLI, build_commands, cli_from_schema
from linkli.generator.command import Command

__all__ = ["CLI", "Command", "build_commands", "cli_from_schema"]
