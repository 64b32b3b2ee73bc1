"""Typer application and CLI entry point for linkli.

The ``linkli`` executable loads a hyper-schema document, builds a client and
one command per link, and dispatches the remaining arguments::

    linkli --schema schema.json                  # list commands
    linkli --schema schema.json help app:info    # command usage
    linkli --schema schema.json app:info my-app  # invoke a link

Settings are resolved by :func:`~linkli.config.resolve_config`. Errors derived
from :class:`~linkli.exceptions.LinkliError` are printed to stderr and end
the process with the error's exit code.

See Also:
    :mod:`linkli.generator.cli`: The command registry this module drives.
    :mod:`linkli.output`: Diagnostics initialised in :func:`linkli_command`.
"""

from __future__ import annotations

import signal
import sys
from typing import Any, List, Optional

import typer

from linkli import __version__
from linkli.exceptions import InvalidUsageError, LinkliError
from linkli.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="linkli",
    help="Invoke API links described by a hyper-schema document.",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"linkli {__version__}")
        raise typer.Exit()


@app.command(
    context_settings={"allow_interspersed_args": False},
)
def linkli_command(
    args: Optional[List[str]] = typer.Argument(
        None,
        help="Command name followed by its parameters, or 'help [<command>]'.",
        show_default=False,
    ),
    schema: Optional[str] = typer.Option(
        None, "--schema", "-s", help="Schema file, URL, or '-' for stdin."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", "-u", help="Root URL of the API."
    ),
    header: Optional[List[str]] = typer.Option(
        None, "--header", "-H", help="Extra request header, 'Name: value'. Repeatable."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log requests and pages to stderr."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Invoke API links described by a hyper-schema document.

    Initialises the global :class:`~linkli.output.OutputManager` from CLI
    flags, resolves settings, and hands *args* to the command registry.
    """
    from linkli.output import OutputManager, error, set_output

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))

    try:
        run_cli(list(args or []), schema, base_url, list(header or []))
    except LinkliError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)


def run_cli(
    argv: list[str],
    schema: Optional[str] = None,
    base_url: Optional[str] = None,
    headers: Optional[list[str]] = None,
) -> None:
    """Load the schema and run one command, writing results to stdout.

    Raises:
        InvalidUsageError: If no schema source is configured.
        LinkliError: Any error raised while loading or invoking.
    """
    from linkli.client.transport import HttpxTransport
    from linkli.config import build_client_config, resolve_config
    from linkli.generator import cli_from_schema
    from linkli.output import debug
    from linkli.parser import load_schema
    from linkli.parser.loader import validate_schema_document

    resolved = resolve_config(schema, base_url, headers)
    if not resolved.schema_source:
        raise InvalidUsageError(
            "No schema configured. Pass --schema or set LINKLI_SCHEMA."
        )

    debug(f"Loading schema from {resolved.schema_source}")
    document = load_schema(resolved.schema_source)
    validate_schema_document(document)
    config = build_client_config(resolved, document)
    debug(f"Base URL: {config.base_url}")

    with HttpxTransport(config) as transport:
        cli = cli_from_schema(
            "linkli",
            sys.stdout,
            document,
            config.base_url,
            transport=transport,
            config=config,
        )
        cli.run(*argv)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``linkli`` console script.

    Unexpected exceptions are reported on stderr and exit with
    :data:`~linkli.exit_codes.EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from linkli.output import error

        error(f"Unexpected error: {exc!r}")
        sys.exit(EXIT_GENERIC_FAILURE)
