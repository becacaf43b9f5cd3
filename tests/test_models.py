"""Tests for scyllaclient.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from scyllaclient.models import CacheConfig, CacheEntry, ClientConfig


class TestClientConfig:
    def test_defaults(self) -> None:
        config = ClientConfig()
        assert config.base_url == "http://localhost:10000"
        assert config.cache == CacheConfig()
        assert config.cache.default_ttl == 0.0

    def test_base_url(self) -> None:
        config = ClientConfig(api_address="10.0.0.5", api_port=10001, scheme="https")
        assert config.base_url == "https://10.0.0.5:10001"


class TestCacheEntry:
    def test_raw_entry(self) -> None:
        entry = CacheEntry(raw_value="x", fetched_at=10.0)
        assert entry.value == "x"

    def test_json_entry(self) -> None:
        entry = CacheEntry(json_value={"buckets": []}, fetched_at=10.0)
        assert entry.value == {"buckets": []}

    def test_needs_exactly_one_value(self) -> None:
        with pytest.raises(ValidationError):
            CacheEntry()
        with pytest.raises(ValidationError):
            CacheEntry(raw_value="x", json_value={})

    def test_frozen(self) -> None:
        entry = CacheEntry(raw_value="x")
        with pytest.raises(ValidationError):
            entry.raw_value = "y"

    def test_valid_is_inclusive(self) -> None:
        entry = CacheEntry(raw_value="x", fetched_at=100.0)
        assert entry.valid(5, 105.0) is True
        assert entry.valid(5, 105.5) is False
        assert entry.valid(0, 100.0) is True
