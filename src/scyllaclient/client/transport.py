"""Synchronous HTTP transport for the node API.

:class:`HttpTransport` wraps :class:`httpx.Client` and is the only place
that touches the network. It expands multi-valued query parameters into
repeated ``name=value`` pairs, and maps failures onto two distinct
exceptions:

- :class:`~scyllaclient.exceptions.RemoteError` -- the server answered with
  a non-2xx status. The message comes from the ``"message"`` field of the
  JSON error body.
- :class:`~scyllaclient.exceptions.ConnectivityError` -- the request never
  got an answer (connection refused, DNS failure, timeout).

There is no retry: every failure surfaces to the caller on the first
attempt.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from scyllaclient.exceptions import ConnectivityError, RemoteError
from scyllaclient.models import ClientConfig
from scyllaclient.params import QueryParams, iter_pairs

logger = logging.getLogger(__name__)


class HttpTransport:
    """Blocking transport for the node's HTTP API.

    The underlying connection pool is created on first use (or by
    :meth:`open` / entering the context manager) and released by
    :meth:`close`.

    Args:
        config: Connection settings (base URL, timeout, SSL verification).
        transport: Optional :class:`httpx.BaseTransport`, used by tests to
            plug in an :class:`httpx.MockTransport`.

    Example::

        with HttpTransport(ClientConfig(api_address="10.0.0.5")) as http:
            body = http.get("/storage_service/host_id").text
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> HttpTransport:
        self.open()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def open(self) -> None:
        """Create the underlying :class:`httpx.Client` if not already open."""
        if self._client is not None:
            return
        self._client = httpx.Client(
            base_url=self._config.base_url,
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            transport=self._transport,
        )

    def close(self) -> None:
        """Close the underlying client."""
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def get(self, path: str, params: Optional[QueryParams] = None) -> httpx.Response:
        """Send a GET request and return the successful response.

        Raises:
            RemoteError: On a non-2xx status.
            ConnectivityError: On network / timeout errors.
        """
        return self.request("GET", path, params)

    def post(
        self,
        path: str,
        params: Optional[QueryParams] = None,
        body: Optional[Any] = None,
        content_type: str = "text/plain",
    ) -> httpx.Response:
        """Send a POST request with an optional body of *content_type*.

        A ``dict`` or ``list`` body is sent as JSON regardless of
        *content_type*; anything else is sent as its string form.
        """
        return self.request("POST", path, params, body=body, content_type=content_type)

    def delete(self, path: str, params: Optional[QueryParams] = None) -> httpx.Response:
        """Send a DELETE request."""
        return self.request("DELETE", path, params)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[QueryParams] = None,
        body: Optional[Any] = None,
        content_type: str = "text/plain",
    ) -> httpx.Response:
        """Send a request and map failures onto scyllaclient exceptions.

        Args:
            method: HTTP method.
            path: Endpoint path, appended to the configured base URL.
            params: Ordered multi-valued query parameters.
            body: Optional request body.
            content_type: Content type of a non-JSON body.

        Returns:
            The :class:`httpx.Response` (always 2xx).

        Raises:
            RemoteError: On a non-2xx status.
            ConnectivityError: On network / timeout errors.
        """
        if self._client is None:
            self.open()

        kwargs: dict[str, Any] = {
            "method": method,
            "url": path,
            "params": iter_pairs(params),
            "headers": {"Accept": "application/json"},
        }
        if isinstance(body, (dict, list)):
            kwargs["json"] = body
        elif body is not None:
            kwargs["content"] = str(body)
            kwargs["headers"]["Content-Type"] = content_type

        logger.debug("%s %s params=%s", method, path, kwargs["params"])
        try:
            response = self._client.request(**kwargs)
        except httpx.TransportError as exc:
            raise ConnectivityError(
                f"Unable to connect to Scylla API server: {exc}"
            ) from exc

        logger.debug("%s %s -> HTTP %s", method, path, response.status_code)
        if not response.is_success:
            raise RemoteError(method, path, response.status_code, _error_message(response))
        return response


def _error_message(response: httpx.Response) -> Optional[str]:
    """Extract the ``"message"`` field from an error body, if there is one."""
    try:
        detail = response.json()
    except ValueError:
        return None
    if isinstance(detail, dict):
        message = detail.get("message")
        if isinstance(message, str) and message:
            return message
    return None
