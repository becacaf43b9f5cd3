"""Payload decoder: one entry point, one routine per :class:`Shape`.

Most map shapes come from the API as an array of ``{"key": ..., "value": ...}``
objects. Those share a single iteration routine, :func:`_decode_pairs`,
driven by a declarative :class:`PairRule` that says how to read the key and
the value, whether the mapping is reversed, and whether an element missing
one of the two fields is skipped or rejected.

Two shapes do not name their fields at all. Their elements are objects with
one string field and one numeric field under arbitrary names; the string is
the key and the number is the value. :func:`_classify_fields` tells them
apart by JSON value kind, never by field name or order.

Scalar shapes read the body as text. ``STRING`` removes one leading and one
trailing double quote and performs no other unescaping, so a string with
embedded escaped quotes comes back with its backslashes intact.
"""

from __future__ import annotations

import ipaddress
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from scyllaclient.decoding.shapes import Shape
from scyllaclient.exceptions import DecodeError
from scyllaclient.models import SnapshotDetail

logger = logging.getLogger(__name__)

_QUOTES = re.compile(r'^"|"$')

_SKIP = object()
"""Returned by a key reader to drop the current element without failing."""

Reader = Callable[[Any, str], Any]


def strip_quotes(raw: str) -> str:
    """Drop one leading and one trailing ``"`` from *raw*, if present."""
    return _QUOTES.sub("", raw)


def decode(payload: Any, shape: Shape, path: str = "") -> Any:
    """Decode *payload* into the Python value described by *shape*.

    Args:
        payload: The response body text, or an already-parsed JSON value.
            Scalar shapes require text.
        shape: The expected layout.
        path: Endpoint the payload came from; used in error messages.

    Returns:
        The decoded value. See :class:`Shape` for the type per shape.

    Raises:
        DecodeError: If the payload is not valid JSON or does not match
            *shape*.
    """
    if shape.is_scalar:
        if not isinstance(payload, str):
            raise DecodeError(path, "a text body")
        return _SCALAR_DECODERS[shape](payload, path)
    if isinstance(payload, (str, bytes)):
        payload = _parse(payload, path)
    return _DECODERS[shape](payload, path)


# ------------------------------------------------------------------ #
# Element readers
# ------------------------------------------------------------------ #


def _parse(text: str | bytes, path: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(path, "a JSON document", str(exc)) from exc


def _is_number(value: Any) -> bool:
    # bool is an int subclass but a JSON true/false is not a number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _array(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise DecodeError(path, "a JSON array", f"got {type(value).__name__}")
    return value


def _object(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(path, "a JSON object", f"got {type(value).__name__}")
    return value


def _string(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(path, "a string", f"got {value!r}")
    return value


def _integer(value: Any, path: str) -> int:
    if not _is_number(value):
        raise DecodeError(path, "a number", f"got {value!r}")
    return int(value)


def _string_list(value: Any, path: str) -> list[str]:
    return [_string(item, path) for item in _array(value, path)]


def _string_tuple(value: Any, path: str) -> tuple[str, ...]:
    return tuple(_string_list(value, path))


def _float_text(value: Any, path: str) -> float:
    if _is_number(value):
        return float(value)
    try:
        return float(_string(value, path))
    except ValueError as exc:
        raise DecodeError(path, "a float", f"got {value!r}") from exc


def _address(value: Any, path: str) -> Any:
    text = _string(value, path)
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        logger.warning("Bad formatted address %r in response from %s", text, path)
        return _SKIP


# ------------------------------------------------------------------ #
# Scalars
# ------------------------------------------------------------------ #


def _to_int(raw: str, path: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise DecodeError(path, "an integer", f"got {raw!r}") from exc


def _to_float(raw: str, path: str) -> float:
    try:
        return float(raw)
    except ValueError as exc:
        raise DecodeError(path, "a number", f"got {raw!r}") from exc


_SCALAR_DECODERS: dict[Shape, Reader] = {
    Shape.RAW: lambda raw, path: raw,
    Shape.STRING: lambda raw, path: strip_quotes(raw),
    Shape.INT: _to_int,
    Shape.LONG: _to_int,
    Shape.DOUBLE: _to_float,
    Shape.BOOLEAN: lambda raw, path: raw.strip().lower() == "true",
}


# ------------------------------------------------------------------ #
# Key/value pair arrays
# ------------------------------------------------------------------ #


@dataclass(frozen=True)
class PairRule:
    """How an array of ``{"key": ..., "value": ...}`` objects becomes a dict.

    Attributes:
        key: Reads the ``"key"`` field. May return the skip marker to drop
            the element.
        value: Reads the ``"value"`` field.
        reverse: Map value to key instead of key to value. On duplicate
            values the last element wins.
        required: Reject elements missing either field instead of
            skipping them.
    """

    key: Reader
    value: Reader
    reverse: bool = False
    required: bool = False


def _decode_pairs(payload: Any, path: str, rule: PairRule) -> dict[Any, Any]:
    result: dict[Any, Any] = {}
    for element in _array(payload, path):
        obj = _object(element, path)
        if "key" not in obj or "value" not in obj:
            if rule.required:
                raise DecodeError(path, "objects with 'key' and 'value' fields")
            continue
        key = rule.key(obj["key"], path)
        if key is _SKIP:
            continue
        value = rule.value(obj["value"], path)
        if rule.reverse:
            result[value] = key
        else:
            result[key] = value
    return result


MAP_STR_RULE = PairRule(key=_string, value=_string)
REVERSE_MAP_STR_RULE = PairRule(key=_string, value=_string, reverse=True)
MAP_STR_LIST_STR_RULE = PairRule(key=_string, value=_string_list)
MAP_LIST_STR_RULE = PairRule(key=_string_tuple, value=_string_list)
MAP_STR_INT_RULE = PairRule(key=_string, value=_integer, required=True)
MAP_ADDRESS_FLOAT_RULE = PairRule(key=_address, value=_float_text, required=True)
SNAPSHOT_RULE = PairRule(key=_string, value=_array)


def _pairs(rule: PairRule) -> Reader:
    return lambda payload, path: _decode_pairs(payload, path, rule)


# ------------------------------------------------------------------ #
# Unlabelled string/number pair objects
# ------------------------------------------------------------------ #


def _classify_fields(element: Any, path: str) -> tuple[str, Any]:
    """Return ``(key, number)`` read from an object by value kind.

    The first pass sorts every field into strings and numbers; the second
    assigns the last string as the key and the last number as the value.
    A missing string gives ``""``; a missing number gives ``None``.
    """
    strings: list[str] = []
    numbers: list[Any] = []
    for name, value in _object(element, path).items():
        if isinstance(value, str):
            strings.append(value)
        elif _is_number(value):
            numbers.append(value)
        else:
            raise DecodeError(
                path, "string or number fields", f"field {name!r} is {value!r}"
            )
    key = strings[-1] if strings else ""
    number = numbers[-1] if numbers else None
    return key, number


def _decode_long_pairs(payload: Any, path: str) -> dict[str, int]:
    result: dict[str, int] = {}
    for element in _array(payload, path):
        key, number = _classify_fields(element, path)
        value = int(number) if number is not None else -1
        if value > 0 and key:
            result[key] = value
    return result


def _decode_double_pairs(payload: Any, path: str) -> dict[str, float]:
    # Unlike the long variant, non-positive values are kept.
    result: dict[str, float] = {}
    for element in _array(payload, path):
        key, number = _classify_fields(element, path)
        value = float(number) if number is not None else -1.0
        if key:
            result[key] = value
    return result


# ------------------------------------------------------------------ #
# Remaining shapes
# ------------------------------------------------------------------ #


def _decode_addresses(payload: Any, path: str) -> list[Any]:
    addresses = []
    for item in _array(payload, path):
        address = _address(item, path)
        if address is not _SKIP:
            addresses.append(address)
    return addresses


def _decode_histogram(payload: Any, path: str) -> tuple[int, ...]:
    buckets = _object(payload, path).get("buckets")
    if buckets is None:
        return ()
    return tuple(_integer(b, path) for b in _array(buckets, path))


def _decode_snapshots(payload: Any, path: str) -> dict[str, list[SnapshotDetail]]:
    snapshots: dict[str, list[SnapshotDetail]] = {}
    for name, rows in _decode_pairs(payload, path, SNAPSHOT_RULE).items():
        details = []
        for row in rows:
            row = _object(row, path)
            if "ks" not in row or "cf" not in row:
                continue
            details.append(
                SnapshotDetail(
                    snapshot=name,
                    keyspace=_string(row["ks"], path),
                    column_family=_string(row["cf"], path),
                    total=_integer(row.get("total"), path),
                    live=_integer(row.get("live"), path),
                )
            )
        snapshots[name] = details
    return snapshots


_DECODERS: dict[Shape, Reader] = {
    Shape.LIST_STR: _string_list,
    Shape.SET_STR: lambda payload, path: set(_string_list(payload, path)),
    Shape.INT_ARRAY: lambda payload, path: tuple(
        _integer(n, path) for n in _array(payload, path)
    ),
    Shape.LONG_ARRAY: lambda payload, path: tuple(
        _integer(n, path) for n in _array(payload, path)
    ),
    Shape.MAP_STR: _pairs(MAP_STR_RULE),
    Shape.REVERSE_MAP_STR: _pairs(REVERSE_MAP_STR_RULE),
    Shape.MAP_STR_LIST_STR: _pairs(MAP_STR_LIST_STR_RULE),
    Shape.MAP_LIST_STR: _pairs(MAP_LIST_STR_RULE),
    Shape.MAP_STR_LONG_PAIRS: _decode_long_pairs,
    Shape.MAP_STR_DOUBLE_PAIRS: _decode_double_pairs,
    Shape.MAP_STR_LONG: _pairs(MAP_STR_INT_RULE),
    Shape.MAP_STR_INT: _pairs(MAP_STR_INT_RULE),
    Shape.MAP_ADDRESS_FLOAT: _pairs(MAP_ADDRESS_FLOAT_RULE),
    Shape.LIST_ADDRESS: _decode_addresses,
    Shape.LIST_MAP_STR: lambda payload, path: [
        _decode_pairs(inner, path, MAP_STR_RULE) for inner in _array(payload, path)
    ],
    Shape.HISTOGRAM: _decode_histogram,
    Shape.SNAPSHOTS: _decode_snapshots,
    Shape.JSON_ARRAY: _array,
    Shape.JSON_OBJECT: _object,
}
