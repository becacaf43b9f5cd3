"""Canonical Pydantic models shared across all scyllaclient modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`CacheConfig` and :class:`ClientConfig`.

**Value models** -- produced at runtime by the cache and the decoder:
    :class:`CacheEntry` and :class:`SnapshotDetail`.
"""

from __future__ import annotations

import time
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# --- Config ---


class CacheConfig(BaseModel):
    """Response cache settings stored in :class:`ClientConfig`."""

    directory: Optional[str] = Field(
        default=None,
        description="Directory for the cache store; a private temp dir when unset",
    )
    default_ttl: float = Field(
        default=0.0,
        description="TTL in seconds used by the CLI when --ttl is not given; <= 0 disables caching",
    )


class ClientConfig(BaseModel):
    """Connection settings for the node's HTTP API.

    Loaded by :func:`~scyllaclient.config.resolve_config`, which layers
    environment variables and explicit overrides on top of the config
    file. See that function for the full precedence chain.

    Example::

        ClientConfig(api_address="10.0.0.5", api_port=10000, timeout=5)
    """

    api_address: str = Field(default="localhost", description="API server host")
    api_port: int = Field(default=10000, description="API server port")
    scheme: str = Field(default="http", description="URL scheme: http or https")
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    cache: CacheConfig = Field(default_factory=CacheConfig)

    @property
    def base_url(self) -> str:
        """Root URL every endpoint path is appended to."""
        return f"{self.scheme}://{self.api_address}:{self.api_port}"


# --- Runtime values ---


class CacheEntry(BaseModel):
    """A fetched value and the moment it was fetched.

    Exactly one of :attr:`raw_value` and :attr:`json_value` is set: the
    entry remembers which access form (plain body text or parsed JSON
    object) it was stored for. Entries are immutable; a refresh replaces
    the whole entry.
    """

    model_config = ConfigDict(frozen=True)

    raw_value: Optional[str] = None
    json_value: Optional[dict[str, Any]] = None
    fetched_at: float = Field(default_factory=time.time)

    @model_validator(mode="after")
    def _exactly_one_value(self) -> CacheEntry:
        if (self.raw_value is None) == (self.json_value is None):
            raise ValueError("exactly one of raw_value and json_value must be set")
        return self

    @property
    def value(self) -> str | dict[str, Any]:
        """The stored value in whichever form the entry holds."""
        return self.raw_value if self.raw_value is not None else self.json_value

    def valid(self, ttl: float, now: float) -> bool:
        """Return True while the entry is no older than *ttl* seconds at *now*."""
        return now - self.fetched_at <= ttl


class SnapshotDetail(BaseModel):
    """One row of a snapshot listing: a table captured by a named snapshot."""

    snapshot: str
    keyspace: str
    column_family: str
    total: int = Field(description="Bytes on disk including data shared with live sstables")
    live: int = Field(description="Bytes that exist only in the snapshot")
