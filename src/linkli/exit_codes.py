"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~linkli.exceptions.LinkliError` subclass.
Shell wrappers can inspect the exit code to determine the failure class
without parsing stderr.

Example::

    $ linkli app:info my-app
    $ echo $?
    4   # EXIT_NOT_FOUND -- the API answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with the wrong arguments or an unknown name."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the request's credentials (HTTP 401 / 403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The API answered with any other non-2xx status."""

EXIT_TRANSPORT_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_SCHEMA_ERROR = 7
"""The API schema could not be loaded or does not describe valid links."""

EXIT_PARSE_ERROR = 8
"""A response declared a JSON content type but its body was not valid JSON."""
