"""Response cache backed by :mod:`diskcache`.

Entries are stored without a store-level expiry: a TTL of ``<= 0`` turns
caching off for a request, and a positive TTL is compared against the
entry's ``fetched_at`` timestamp on every lookup. Stale entries stay in the
store until the next eligible fetch for the same key replaces them, and
eviction is disabled, so the store grows with the number of distinct
``(path, params)`` combinations ever cached.

Cache keys are readable strings, ``path`` or ``path?name=value&...``, with
parameters in the caller's iteration order.

Concurrent access is delegated to :class:`diskcache.Cache`, which is safe
for multiple threads. Lookups and stores are not atomic with respect to
each other: two concurrent misses on one key both fetch and the last store
wins.
"""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional
from urllib.parse import urlencode

import diskcache

from scyllaclient.models import CacheEntry
from scyllaclient.params import iter_pairs

logger = logging.getLogger(__name__)


class ResponseCache:
    """Key to :class:`~scyllaclient.models.CacheEntry` store with per-lookup TTL.

    Args:
        directory: Directory for the backing :class:`diskcache.Cache`.
            When ``None`` a private temporary directory is created and
            removed again by :meth:`close`.
        clock: Returns the current time in epoch seconds. Tests pass a
            fake clock to step past TTL windows.

    Example::

        cache = ResponseCache()
        key = cache.key("/storage_service/host_id", None, ttl=5)
        cache.put(key, '"e9a3-..."')
        entry = cache.get(key, ttl=5)
    """

    def __init__(
        self,
        directory: str | Path | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._clock = clock
        self._owns_directory = directory is None
        self._cache = diskcache.Cache(
            None if directory is None else str(directory),
            eviction_policy="none",
        )

    def __enter__(self) -> ResponseCache:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._cache)

    @staticmethod
    def key(
        path: str,
        params: Optional[Mapping[str, Iterable[str]]],
        ttl: float,
    ) -> Optional[str]:
        """Build the cache key for *path* and *params*.

        Returns:
            ``None`` when *ttl* is not positive (caching disabled for the
            request), otherwise ``path`` followed by the url-encoded
            parameter pairs in iteration order.
        """
        if ttl <= 0:
            return None
        pairs = iter_pairs(params)
        if not pairs:
            return path
        return f"{path}?{urlencode(pairs)}"

    def get(self, key: Optional[str], ttl: float) -> Optional[CacheEntry]:
        """Return the entry for *key* if it is no older than *ttl* seconds.

        Returns:
            The :class:`~scyllaclient.models.CacheEntry`, or ``None`` when
            *key* is ``None``, nothing is stored, or the entry is stale.
        """
        if key is None:
            return None
        entry: Optional[CacheEntry] = self._cache.get(key)
        if entry is None:
            return None
        if not entry.valid(ttl, self._clock()):
            logger.debug("Cache entry for %s is stale", key)
            return None
        return entry

    def put(self, key: Optional[str], value: str | dict[str, Any]) -> None:
        """Store *value* under *key* with a fresh timestamp.

        A ``str`` is stored in raw form, a ``dict`` in JSON-object form.
        Any existing entry for the key is replaced. A ``None`` key is a
        no-op.
        """
        if key is None:
            return
        now = self._clock()
        if isinstance(value, str):
            entry = CacheEntry(raw_value=value, fetched_at=now)
        else:
            entry = CacheEntry(json_value=value, fetched_at=now)
        self._cache.set(key, entry)
        logger.debug("Cached %s", key)

    def clear(self) -> None:
        """Remove all entries from the cache."""
        self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics: ``size`` (entries) and ``directory``."""
        return {
            "size": len(self._cache),
            "directory": self._cache.directory,
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache`.

        A cache created without a directory lives in a private temporary
        directory, which is removed here.
        """
        self._cache.close()
        if self._owns_directory:
            shutil.rmtree(self._cache.directory, ignore_errors=True)
