"""
Purpose: Encoded-polyline codec (the de-facto Google format).
What it does:

- decode: compact ASCII string -> list of (lat, lng)
- encode: list of (lat, lng) -> compact ASCII string

Format, per coordinate value:
- scale by 10**precision (1e5 by default) and round half away from zero
- delta against the previous value of the same axis
- zig-zag the signed delta (left shift, invert if negative)
- split into 5-bit groups, low group first; every group except the last has
  bit 0x20 set; add 63 to land in printable ASCII

Values alternate lat, lng. Nothing here has side effects.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Tuple

from .errors import MalformedGeometryError

LatLng = Tuple[float, float]

DEFAULT_PRECISION = 5

_OFFSET = 63
_CONTINUATION = 0x20
_CHUNK_MASK = 0x1F


def _read_values(encoded: str) -> List[int]:
    """Splits the stream into signed integer deltas."""
    values: List[int] = []
    shift = 0
    result = 0
    in_group = False

    for position, char in enumerate(encoded):
        byte = ord(char) - _OFFSET
        if byte < 0 or byte > 0x3F:
            raise MalformedGeometryError(
                f"Invalid polyline character {char!r} at position {position}"
            )

        result |= (byte & _CHUNK_MASK) << shift
        shift += 5
        in_group = True

        if not byte & _CONTINUATION:
            values.append(~(result >> 1) if result & 1 else result >> 1)
            shift = 0
            result = 0
            in_group = False

    if in_group:
        raise MalformedGeometryError("Polyline ends in the middle of a value")
    return values


def decode(encoded: str, *, precision: int = DEFAULT_PRECISION) -> List[LatLng]:
    """
    Decode an encoded polyline into (lat, lng) pairs.

    Raises MalformedGeometryError if the stream stops mid-group, leaves a
    latitude without its longitude, or contains characters outside the
    encoding alphabet.
    """
    if encoded is None:
        raise MalformedGeometryError("Route geometry is missing")

    values = _read_values(encoded)
    if len(values) % 2:
        raise MalformedGeometryError("Polyline ends with a latitude but no longitude")

    factor = 10 ** precision
    lat = 0
    lng = 0
    points: List[LatLng] = []
    for i in range(0, len(values), 2):
        lat += values[i]
        lng += values[i + 1]
        points.append((lat / factor, lng / factor))
    return points


def _round_half_away(value: float) -> int:
    rounded = int(math.floor(abs(value) + 0.5))
    return -rounded if value < 0 else rounded


def _write_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else value << 1
    chunks = []
    while value >= _CONTINUATION:
        chunks.append(chr((_CONTINUATION | (value & _CHUNK_MASK)) + _OFFSET))
        value >>= 5
    chunks.append(chr(value + _OFFSET))
    return "".join(chunks)


def encode(points: Iterable[LatLng], *, precision: int = DEFAULT_PRECISION) -> str:
    """
    Encode (lat, lng) pairs. Only needed for fixtures and round-trip checks;
    the session itself is a consumer of the format.
    """
    factor = 10 ** precision
    previous_lat = 0
    previous_lng = 0
    parts: List[str] = []
    for lat, lng in points:
        lat_i = _round_half_away(lat * factor)
        lng_i = _round_half_away(lng * factor)
        parts.append(_write_value(lat_i - previous_lat))
        parts.append(_write_value(lng_i - previous_lng))
        previous_lat = lat_i
        previous_lng = lng_i
    return "".join(parts)
