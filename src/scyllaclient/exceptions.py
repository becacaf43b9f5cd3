"""Exception hierarchy for scyllaclient.

All exceptions inherit from :class:`ScyllaClientError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`scyllaclient.exit_codes`. The CLI entry point in
:func:`scyllaclient.app.main` catches ``ScyllaClientError`` and exits with
the matching code; library callers catch the specific subclasses.

Subclass hierarchy::

    ScyllaClientError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- RemoteError         (exit 5)
    +-- ConnectivityError   (exit 6)
    +-- DecodeError         (exit 7)
    +-- ConfigError         (exit 1)

A malformed address inside an address-keyed map is *not* an
exception: the decoder logs a warning and skips the entry.
"""

from __future__ import annotations

from scyllaclient.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_REMOTE_ERROR,
)


class ScyllaClientError(Exception):
    """Base exception for all scyllaclient errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ScyllaClientError):
    """Raised for invalid CLI arguments (bad ``--param`` syntax, unknown shape)."""

    exit_code = EXIT_INVALID_USAGE


class RemoteError(ScyllaClientError):
    """Raised when the API server answers with a non-2xx status.

    The message is built from the ``"message"`` field of the JSON error
    body when the server supplies one.

    Attributes:
        method: HTTP method of the failed request.
        path: Endpoint path of the failed request.
        status_code: HTTP status returned by the server.
        remote_message: The server-supplied message, or ``None``.
    """

    exit_code = EXIT_REMOTE_ERROR

    def __init__(
        self,
        method: str,
        path: str,
        status_code: int,
        remote_message: str | None = None,
    ):
        self.method = method
        self.path = path
        self.status_code = status_code
        self.remote_message = remote_message
        detail = remote_message if remote_message else f"HTTP {status_code}"
        super().__init__(
            f"Scylla API server HTTP {method} to URL '{path}' failed: {detail}"
        )


class ConnectivityError(ScyllaClientError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Never retried internally.
    """

    exit_code = EXIT_CONNECTION_ERROR


class DecodeError(ScyllaClientError):
    """Raised when a payload does not match the shape it is decoded into.

    Attributes:
        path: Endpoint path the payload came from (may be empty when the
            decoder is used directly).
        expected: Description of the expected shape.
    """

    exit_code = EXIT_DECODE_ERROR

    def __init__(self, path: str, expected: str, detail: str | None = None):
        self.path = path
        self.expected = expected
        msg = f"Unexpected payload from '{path}': expected {expected}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class ConfigError(ScyllaClientError):
    """Raised for configuration problems (invalid config JSON, bad port value)."""

    exit_code = EXIT_GENERIC_FAILURE
