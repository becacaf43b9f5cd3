"""Typed access to the node API: cache, transport and decoder combined.

:class:`APIClient` answers "the value of shape S at endpoint E with params
P, no older than D seconds". Each call runs through the same steps:

1. An empty endpoint path returns the shape's empty value without any
   request (``""`` for text shapes, ``None`` otherwise).
2. With ``ttl > 0`` the cache is consulted. Object shapes (``HISTOGRAM``,
   ``JSON_OBJECT``) look for a cached JSON object, every other shape for
   cached body text.
3. On a miss the body is fetched and, when ``ttl > 0``, stored.
4. The body is decoded into the requested shape.

A ``ttl`` of zero or less bypasses the cache completely: no key is
built and nothing is read or stored.
"""

from __future__ import annotations

import ipaddress
import json
import logging
from typing import Any, Optional

import httpx

from scyllaclient.cache import ResponseCache
from scyllaclient.client.transport import HttpTransport
from scyllaclient.decoding import Shape, decode
from scyllaclient.exceptions import DecodeError
from scyllaclient.models import ClientConfig, SnapshotDetail
from scyllaclient.params import QueryParams

logger = logging.getLogger(__name__)

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


class APIClient:
    """Client for a node's HTTP administrative API.

    Owns one :class:`~scyllaclient.cache.ResponseCache`, shared by every
    call made through this instance (and safe to share across threads).

    Args:
        config: Connection settings. Defaults to :class:`ClientConfig()`.
        transport: Optional pre-built :class:`HttpTransport`.
        cache: Optional pre-built :class:`ResponseCache`. When omitted one
            is created in ``config.cache.directory``.

    Example::

        with APIClient(ClientConfig(api_address="10.0.0.5")) as client:
            ops = client.get_map_str_long_pairs("/storage_service/ownership/")
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[HttpTransport] = None,
        cache: Optional[ResponseCache] = None,
    ) -> None:
        self._config = config or ClientConfig()
        self._transport = transport if transport is not None else HttpTransport(self._config)
        self._cache = cache if cache is not None else ResponseCache(self._config.cache.directory)

    @property
    def config(self) -> ClientConfig:
        """Connection settings in effect for this client."""
        return self._config

    @property
    def cache(self) -> ResponseCache:
        """The response cache owned by this client."""
        return self._cache

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> APIClient:
        self._transport.open()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport and the cache."""
        self._transport.close()
        self._cache.close()

    # ------------------------------------------------------------------ #
    # Generic fetch
    # ------------------------------------------------------------------ #

    def fetch(
        self,
        path: str,
        params: Optional[QueryParams] = None,
        ttl: float = 0,
        shape: Shape = Shape.RAW,
    ) -> Any:
        """Fetch *path* and decode the response into *shape*.

        Args:
            path: Endpoint path.
            params: Ordered multi-valued query parameters.
            ttl: Maximum age in seconds of a cached response; ``<= 0``
                disables caching for this call.
            shape: Expected response layout.

        Returns:
            The decoded value.

        Raises:
            RemoteError: On a non-2xx status.
            ConnectivityError: When the API server is unreachable.
            DecodeError: When the payload does not match *shape*.
        """
        if path == "":
            return shape.empty_value
        if shape.uses_json_object:
            payload: Any = self._json_object(path, params, ttl)
        else:
            payload = self._raw(path, params, ttl)
        return decode(payload, shape, path)

    def _raw(self, path: str, params: Optional[QueryParams], ttl: float) -> str:
        key = self._cache.key(path, params, ttl)
        entry = self._cache.get(key, ttl)
        if entry is not None and entry.raw_value is not None:
            logger.debug("Cache hit: %s", key)
            return entry.raw_value
        body = self._transport.get(path, params).text
        self._cache.put(key, body)
        return body

    def _json_object(
        self, path: str, params: Optional[QueryParams], ttl: float
    ) -> dict[str, Any]:
        key = self._cache.key(path, params, ttl)
        entry = self._cache.get(key, ttl)
        if entry is not None and entry.json_value is not None:
            logger.debug("Cache hit: %s", key)
            return entry.json_value
        text = self._transport.get(path, params).text
        try:
            obj = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DecodeError(path, "a JSON object", str(exc)) from exc
        if not isinstance(obj, dict):
            raise DecodeError(path, "a JSON object", f"got {type(obj).__name__}")
        self._cache.put(key, obj)
        return obj

    # ------------------------------------------------------------------ #
    # Scalars
    # ------------------------------------------------------------------ #

    def get_raw_value(self, path: str, params: Optional[QueryParams] = None, ttl: float = 0) -> str:
        """Return the response body text as received."""
        return self.fetch(path, params, ttl, Shape.RAW)

    def get_string_value(self, path: str, params: Optional[QueryParams] = None, ttl: float = 0) -> str:
        """Return the body with one surrounding pair of double quotes removed."""
        return self.fetch(path, params, ttl, Shape.STRING)

    def get_int_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[int]:
        return self.fetch(path, params, ttl, Shape.INT)

    def get_long_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[int]:
        return self.fetch(path, params, ttl, Shape.LONG)

    def get_double_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[float]:
        return self.fetch(path, params, ttl, Shape.DOUBLE)

    def get_boolean_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[bool]:
        """Return ``True`` only when the body is ``true`` (any case)."""
        return self.fetch(path, params, ttl, Shape.BOOLEAN)

    # ------------------------------------------------------------------ #
    # Sequences
    # ------------------------------------------------------------------ #

    def get_list_str_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[list[str]]:
        return self.fetch(path, params, ttl, Shape.LIST_STR)

    def get_set_str_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[set[str]]:
        return self.fetch(path, params, ttl, Shape.SET_STR)

    def get_int_arr_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[tuple[int, ...]]:
        return self.fetch(path, params, ttl, Shape.INT_ARRAY)

    def get_long_arr_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[tuple[int, ...]]:
        return self.fetch(path, params, ttl, Shape.LONG_ARRAY)

    def get_list_address_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[list[IPAddress]]:
        """Return the addresses in a string array, skipping unparseable ones."""
        return self.fetch(path, params, ttl, Shape.LIST_ADDRESS)

    def get_list_map_str_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[list[dict[str, str]]]:
        return self.fetch(path, params, ttl, Shape.LIST_MAP_STR)

    def get_estimated_histogram(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[tuple[int, ...]]:
        """Return the ``buckets`` of an estimated histogram (empty if absent)."""
        return self.fetch(path, params, ttl, Shape.HISTOGRAM)

    # ------------------------------------------------------------------ #
    # Maps
    # ------------------------------------------------------------------ #

    def get_map_str_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[dict[str, str]]:
        return self.fetch(path, params, ttl, Shape.MAP_STR)

    def get_reverse_map_str_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[dict[str, str]]:
        """Return a ``value -> key`` map; on duplicate values the last key wins."""
        return self.fetch(path, params, ttl, Shape.REVERSE_MAP_STR)

    def get_map_str_list_str_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[dict[str, list[str]]]:
        return self.fetch(path, params, ttl, Shape.MAP_STR_LIST_STR)

    def get_map_list_str_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[dict[tuple[str, ...], list[str]]]:
        """Return a map keyed by string lists (as tuples), e.g. token ranges to endpoints."""
        return self.fetch(path, params, ttl, Shape.MAP_LIST_STR)

    def get_map_str_long_pairs(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[dict[str, int]]:
        """Decode unlabelled string/number pair objects; non-positive values are dropped."""
        return self.fetch(path, params, ttl, Shape.MAP_STR_LONG_PAIRS)

    def get_map_str_double_pairs(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[dict[str, float]]:
        """Decode unlabelled string/number pair objects; all values are kept."""
        return self.fetch(path, params, ttl, Shape.MAP_STR_DOUBLE_PAIRS)

    def get_map_str_long_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[dict[str, int]]:
        return self.fetch(path, params, ttl, Shape.MAP_STR_LONG)

    def get_map_str_int_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[dict[str, int]]:
        return self.fetch(path, params, ttl, Shape.MAP_STR_INT)

    def get_map_address_float_value(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[dict[IPAddress, float]]:
        """Return an address-keyed map; entries with unparseable addresses are
        skipped and logged."""
        return self.fetch(path, params, ttl, Shape.MAP_ADDRESS_FLOAT)

    def get_snapshot_details(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[dict[str, list[SnapshotDetail]]]:
        return self.fetch(path, params, ttl, Shape.SNAPSHOTS)

    # ------------------------------------------------------------------ #
    # Raw JSON
    # ------------------------------------------------------------------ #

    def get_json_array(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[list[Any]]:
        return self.fetch(path, params, ttl, Shape.JSON_ARRAY)

    def get_json_obj(
        self, path: str, params: Optional[QueryParams] = None, ttl: float = 0
    ) -> Optional[dict[str, Any]]:
        return self.fetch(path, params, ttl, Shape.JSON_OBJECT)

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def post(
        self,
        path: str,
        params: Optional[QueryParams] = None,
        body: Optional[Any] = None,
        content_type: str = "text/plain",
    ) -> httpx.Response:
        """Send a POST; raises on a non-2xx status."""
        return self._transport.post(path, params, body, content_type)

    def post_get_val(self, path: str, params: Optional[QueryParams] = None) -> str:
        """Send a POST and return the response body text."""
        return self.post(path, params).text

    def post_int(self, path: str, params: Optional[QueryParams] = None) -> int:
        """Send a POST and return the response body as an integer."""
        return decode(self.post_get_val(path, params), Shape.INT, path)

    def delete(self, path: str, params: Optional[QueryParams] = None) -> None:
        """Send a DELETE; raises on a non-2xx status."""
        self._transport.delete(path, params)
