"""Decoding of API payloads into typed Python values.

The API answers with a handful of loosely-specified JSON layouts. Callers
name the layout they expect with a :class:`Shape` and :func:`decode` turns
the payload into the matching Python value, raising
:class:`~scyllaclient.exceptions.DecodeError` when the payload does not fit.
"""

from scyllaclient.decoding.decoder import PairRule, decode, strip_quotes
from scyllaclient.decoding.shapes import Shape

__all__ = ["PairRule", "Shape", "decode", "strip_quotes"]
