"""Time-bounded response caching for scyllaclient.

This package provides :class:`ResponseCache`, which maps a cache key built
from an endpoint path and its query parameters to the most recent
:class:`~scyllaclient.models.CacheEntry` fetched for it. Validity is decided
at lookup time against the TTL the caller asks for, so the same entry can
be fresh for one caller and stale for another.

The cache is owned by an :class:`~scyllaclient.client.api_client.APIClient`
instance; there is no process-wide cache.
"""

from scyllaclient.cache.cache import ResponseCache

__all__ = ["ResponseCache"]
