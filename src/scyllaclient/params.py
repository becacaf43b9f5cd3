"""Query-parameter helpers.

Endpoint query parameters are held in a :data:`QueryParams` mapping: an
insertion-ordered ``dict`` from parameter name to the list of values sent
for it. The helpers below add a parameter only when it carries
information, and report whether they did so, so callers can chain
conditional additions::

    params: QueryParams = {}
    set_query_param(params, "cf", table)
    if not set_bool_query_param(params, "split_output", split):
        ...
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

QueryParams = dict[str, list[str]]
"""Ordered multi-valued query parameters: name -> values, in send order."""


def set_query_param(
    params: Optional[QueryParams],
    key: Optional[str],
    value: Optional[str],
) -> bool:
    """Append *value* under *key* when both are present and *value* is non-empty.

    Returns:
        ``True`` if the parameter was added.
    """
    if params is None or key is None or not value:
        return False
    params.setdefault(key, []).append(value)
    return True


def set_bool_query_param(
    params: Optional[QueryParams],
    key: Optional[str],
    flag: bool,
) -> bool:
    """Append ``"true"`` under *key* only when *flag* is set.

    A false flag adds nothing; the API treats an absent flag as false.

    Returns:
        ``True`` if the parameter was added.
    """
    if params is None or key is None or not flag:
        return False
    params.setdefault(key, []).append("true")
    return True


def iter_pairs(params: Optional[Mapping[str, Iterable[str]]]) -> list[tuple[str, str]]:
    """Flatten *params* into ``(name, value)`` pairs in iteration order."""
    if not params:
        return []
    return [(name, value) for name, values in params.items() for value in values]


def join(items: Optional[Iterable[Optional[str]]], joiner: str = ",") -> str:
    """Join the non-empty strings in *items* with *joiner*.

    ``None`` items and empty strings are skipped, and a ``None`` iterable
    yields ``""``. Used to build comma-separated list parameters such as
    keyspace or table names.
    """
    if items is None:
        return ""
    return joiner.join(item for item in items if item)


def map_to_string(
    mapping: Optional[Mapping[str, str]],
    pair_join: str = "=",
    joiner: str = ",",
) -> str:
    """Render *mapping* as ``k1=v1,k2=v2`` (separators configurable)."""
    if not mapping:
        return ""
    return joiner.join(f"{k}{pair_join}{v}" for k, v in mapping.items())
