"""scyllaclient -- typed client for the Scylla node HTTP administrative API.

This package talks to the REST API a Scylla node exposes for management
and monitoring, and turns its loosely-shaped JSON responses into typed
Python values: scalars, lists, sets, several map shapes, integer arrays,
histogram buckets and snapshot tables.

Typical usage::

    from scyllaclient import APIClient

    with APIClient() as client:
        live = client.get_list_str_value("/gossiper/endpoint/live/")
        load = client.get_map_str_double_pairs("/storage_service/load_map", ttl=5)

Modules:
    cache: Time-bounded response cache keyed by endpoint and query params.
    decoding: Shape catalogue and the JSON payload decoder.
    client: HTTP transport and the :class:`APIClient` orchestrator.
    params: Query-parameter helpers.
    models: Pydantic configuration models.
    config: Configuration file and environment resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer CLI for ad-hoc endpoint inspection.
"""

__version__ = "0.1.0"

from scyllaclient.client.api_client import APIClient  # noqa: E402
from scyllaclient.decoding import Shape  # noqa: E402

__all__ = ["APIClient", "Shape", "__version__"]
