"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~scyllaclient.exceptions.ScyllaClientError` subclass.
Shell wrappers and monitoring scripts can inspect the exit code to tell a
node that is down apart from a node that answered with an error.

Example::

    $ scyllaclient get /storage_service/host_id
    $ echo $?
    6   # EXIT_CONNECTION_ERROR -- the API server was unreachable
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_REMOTE_ERROR = 5
"""The API server answered with a non-success HTTP status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_DECODE_ERROR = 7
"""The response payload did not match the requested shape."""
