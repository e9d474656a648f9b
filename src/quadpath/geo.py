"""Approximate distance between nearby geographic coordinates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence

EARTH_RADIUS_M = 6371e3


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float


def _component(coord: Any, name: str) -> float:
    value = getattr(coord, name)
    # Map API objects expose lat()/lng() as methods.
    if callable(value):
        value = value()
    return float(value)


def _lat_lng(coord: LatLng | Sequence[float] | Any) -> tuple[float, float]:
    if hasattr(coord, "lat") and hasattr(coord, "lng"):
        return _component(coord, "lat"), _component(coord, "lng")
    try:
        lat, lng = coord
    except (TypeError, ValueError) as exc:
        raise ValueError("Coordinates must expose lat/lng or be a (lat, lng) pair.") from exc
    return float(lat), float(lng)


def distance(coord1: LatLng | Sequence[float] | Any, coord2: LatLng | Sequence[float] | Any) -> float:
    """Return the distance in meters between two coordinates given in degrees.

    Uses the equirectangular approximation, which is only accurate over
    short distances.
    """

    lat1, lng1 = (math.radians(v) for v in _lat_lng(coord1))
    lat2, lng2 = (math.radians(v) for v in _lat_lng(coord2))
    x = (lng2 - lng1) * math.cos((lat1 + lat2) / 2)
    y = lat2 - lat1
    return math.sqrt(x * x + y * y) * EARTH_RADIUS_M


__all__ = ["EARTH_RADIUS_M", "LatLng", "distance"]
