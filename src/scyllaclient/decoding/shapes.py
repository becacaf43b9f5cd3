"""The closed catalogue of payload shapes understood by the decoder."""

from __future__ import annotations

from enum import Enum


class Shape(str, Enum):
    """Expected layout of an endpoint's response and the value it decodes to.

    Scalar shapes (``RAW`` through ``BOOLEAN``) read the body as text.
    ``HISTOGRAM`` and ``JSON_OBJECT`` read a top-level JSON object; every
    other shape reads a top-level JSON array.
    """

    RAW = "raw"
    STRING = "string"
    INT = "int"
    LONG = "long"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    LIST_STR = "list-str"
    SET_STR = "set-str"
    INT_ARRAY = "int-array"
    LONG_ARRAY = "long-array"
    MAP_STR = "map-str"
    REVERSE_MAP_STR = "reverse-map-str"
    MAP_STR_LIST_STR = "map-str-list-str"
    MAP_LIST_STR = "map-list-str"
    MAP_STR_LONG_PAIRS = "map-str-long-pairs"
    MAP_STR_DOUBLE_PAIRS = "map-str-double-pairs"
    MAP_STR_LONG = "map-str-long"
    MAP_STR_INT = "map-str-int"
    MAP_ADDRESS_FLOAT = "map-address-float"
    LIST_ADDRESS = "list-address"
    LIST_MAP_STR = "list-map-str"
    HISTOGRAM = "histogram"
    SNAPSHOTS = "snapshots"
    JSON_ARRAY = "json-array"
    JSON_OBJECT = "json-object"

    @property
    def is_scalar(self) -> bool:
        """Whether the body is read as plain text rather than JSON."""
        return self in _SCALARS

    @property
    def uses_json_object(self) -> bool:
        """Whether the shape is read (and cached) as a parsed JSON object."""
        return self in (Shape.HISTOGRAM, Shape.JSON_OBJECT)

    @property
    def empty_value(self) -> object:
        """Value returned for an empty endpoint path."""
        return "" if self in (Shape.RAW, Shape.STRING) else None


_SCALARS = frozenset(
    {Shape.RAW, Shape.STRING, Shape.INT, Shape.LONG, Shape.DOUBLE, Shape.BOOLEAN}
)
