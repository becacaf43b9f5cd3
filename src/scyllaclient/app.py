"""Typer application and CLI entry point for scyllaclient.

The CLI is a thin shell over :class:`~scyllaclient.client.APIClient` for
poking at a node's API by hand or from monitoring scripts::

    scyllaclient get /storage_service/host_id --shape string
    scyllaclient get /storage_service/load_map --shape map-str-double-pairs --ttl 10
    scyllaclient post /storage_service/keyspace_flush/ks1 -P cf=t1
    scyllaclient config show

Responses cached with ``--ttl`` persist in the user's cache directory
between invocations. Errors are printed to stderr and mapped to the exit
codes in :mod:`scyllaclient.exit_codes`.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any, Callable, Optional

import typer

from scyllaclient import __version__
from scyllaclient.decoding import Shape
from scyllaclient.exceptions import InvalidUsageError, ScyllaClientError
from scyllaclient.exit_codes import EXIT_GENERIC_FAILURE
from scyllaclient.params import QueryParams

app = typer.Typer(
    name="scyllaclient",
    help="Query a Scylla node's HTTP administrative API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

config_app = typer.Typer(no_args_is_help=True)
app.add_typer(config_app, name="config", help="Configuration management.")

_SNAPSHOT_HEADERS = ["Snapshot", "Keyspace", "Table", "Total", "Live"]


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"scyllaclient {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    url: Optional[str] = typer.Option(
        None, "--url", help="API base URL, e.g. http://10.0.0.5:10000."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Install the output manager and logging level, and stash shared options."""
    from scyllaclient.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    ctx.ensure_object(dict)
    ctx.obj["url"] = url


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def parse_params(values: Optional[list[str]]) -> QueryParams:
    """Turn repeated ``name=value`` options into :data:`QueryParams`.

    Raises:
        InvalidUsageError: If an item has no ``=``.
    """
    params: QueryParams = {}
    for item in values or []:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise InvalidUsageError(f"Invalid parameter {item!r}: expected name=value")
        params.setdefault(name, []).append(value)
    return params


def _open_client(ctx: typer.Context):
    from scyllaclient.cache import ResponseCache
    from scyllaclient.client import APIClient
    from scyllaclient.config import get_cache_dir, resolve_config

    config = resolve_config(url=ctx.obj.get("url") if ctx.obj else None)
    directory = config.cache.directory or str(get_cache_dir() / "responses")
    return APIClient(config, cache=ResponseCache(directory))


def _run(action: Callable[[], Any]) -> Any:
    """Run *action*, turning scyllaclient errors into a clean exit."""
    from scyllaclient.output import error

    try:
        return action()
    except ScyllaClientError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc


def _show(value: Any, shape: Shape) -> None:
    from scyllaclient.output import OutputFormat, format_value, get_output, print_table

    if shape == Shape.SNAPSHOTS and value and get_output().format != OutputFormat.JSON:
        rows = [
            [d.snapshot, d.keyspace, d.column_family, str(d.total), str(d.live)]
            for details in value.values()
            for d in details
        ]
        print_table(_SNAPSHOT_HEADERS, rows, title="Snapshots")
        return
    format_value(value)


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


@app.command("get")
def get_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Endpoint path, e.g. /storage_service/host_id."),
    shape: Shape = typer.Option(
        Shape.RAW, "--shape", "-s", case_sensitive=False, help="Expected response shape."
    ),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-P", help="Query parameter as name=value (repeatable)."
    ),
    ttl: Optional[float] = typer.Option(
        None, "--ttl", help="Accept a cached response up to this many seconds old."
    ),
) -> None:
    """Fetch an endpoint and print the decoded value.

    Example::

        scyllaclient get /column_family/ -s json-array --json
    """
    from scyllaclient.output import debug

    def action() -> None:
        params = parse_params(param)
        with _open_client(ctx) as client:
            effective_ttl = ttl if ttl is not None else client.config.cache.default_ttl
            debug(f"GET {path} shape={shape.value} ttl={effective_ttl}")
            value = client.fetch(path, params or None, effective_ttl, shape)
        _show(value, shape)

    _run(action)


@app.command("post")
def post_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Endpoint path."),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-P", help="Query parameter as name=value (repeatable)."
    ),
    body: Optional[str] = typer.Option(None, "--body", help="Plain-text request body."),
) -> None:
    """Send a POST and print the response body."""
    from scyllaclient.output import print_data

    def action() -> None:
        params = parse_params(param)
        with _open_client(ctx) as client:
            text = client.post(path, params or None, body).text
        if text:
            print_data(text)

    _run(action)


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Endpoint path."),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-P", help="Query parameter as name=value (repeatable)."
    ),
) -> None:
    """Send a DELETE."""
    from scyllaclient.output import info

    def action() -> None:
        params = parse_params(param)
        with _open_client(ctx) as client:
            client.delete(path, params or None)
        info(f"Deleted {path}")

    _run(action)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration (file, environment and --url merged)."""
    from scyllaclient.config import config_path, resolve_config
    from scyllaclient.output import format_value, info

    def action() -> None:
        config = resolve_config(url=ctx.obj.get("url") if ctx.obj else None)
        info(f"Config file: {config_path()}")
        format_value(config.model_dump(mode="json"))

    _run(action)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """Console-script entry point.

    :class:`~scyllaclient.exceptions.ScyllaClientError` raised outside a
    command exits with the error's ``exit_code``; anything else exits
    with :data:`EXIT_GENERIC_FAILURE`.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except Exception as exc:
        from scyllaclient.output import error

        if isinstance(exc, ScyllaClientError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
