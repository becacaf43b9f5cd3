"""HTTP client module for scyllaclient.

Classes:
    :class:`HttpTransport` -- blocking transport backed by :class:`httpx.Client`
    that maps failures onto the scyllaclient exception hierarchy.
    :class:`APIClient` -- combines the transport, the response cache and
    the decoder behind one method per response shape.

Example::

    from scyllaclient.client import APIClient

    with APIClient() as client:
        tokens = client.get_list_str_value("/storage_service/tokens")
"""

from scyllaclient.client.api_client import APIClient
from scyllaclient.client.transport import HttpTransport

__all__ = ["APIClient", "HttpTransport"]
