"""Shared test fixtures for scyllaclient.

Provides a controllable clock for TTL tests, a cache rooted in
``tmp_path``, a factory for :class:`APIClient` instances wired to an
:class:`httpx.MockTransport`, and isolation of config/output state.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from scyllaclient.cache import ResponseCache
from scyllaclient.client import APIClient, HttpTransport
from scyllaclient.models import ClientConfig
from scyllaclient.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager holds references to sys.stdout/sys.stderr taken at
    creation time, which go stale once CliRunner restores the streams.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Clock and cache
# ---------------------------------------------------------------------------


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(tmp_path: Path, clock: FakeClock) -> ResponseCache:
    """A ResponseCache in tmp_path driven by the fake clock."""
    c = ResponseCache(tmp_path / "cache", clock=clock)
    yield c
    c.close()


# ---------------------------------------------------------------------------
# API client wired to a mock transport
# ---------------------------------------------------------------------------


class FakeNode:
    """Serves canned responses per path and records every request.

    ``routes`` maps a path to either a JSON-serialisable body, a raw
    ``str`` body, or an :class:`httpx.Response`.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def calls(self, path: str) -> int:
        return sum(1 for r in self.requests if r.url.path == path)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": f"Not found: {request.url.path}"})
        if isinstance(route, httpx.Response):
            return route
        if isinstance(route, str):
            return httpx.Response(200, text=route)
        return httpx.Response(200, text=json.dumps(route))


@pytest.fixture
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture
def make_client(
    node: FakeNode, cache: ResponseCache
) -> Callable[..., APIClient]:
    """Factory for an open APIClient talking to the ``node`` fixture."""
    clients: list[APIClient] = []

    def _make() -> APIClient:
        config = ClientConfig(api_address="scylla-test", api_port=10000)
        transport = HttpTransport(config, transport=httpx.MockTransport(node))
        client = APIClient(config, transport=transport, cache=cache)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG directories into tmp_path and clear SCYLLACLIENT_* variables."""
    monkeypatch.setattr("scyllaclient.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache-home"))
    for var in [
        "SCYLLACLIENT_URL",
        "SCYLLACLIENT_API_ADDRESS",
        "SCYLLACLIENT_API_PORT",
    ]:
        monkeypatch.delenv(var, raising=False)
    return tmp_path
