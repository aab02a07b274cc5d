"""
Purpose: Domain models for the route-planning session.
What it does:
- Defines core data structures:
- Waypoint (id, label, latitude, longitude)
- RouteStep (instruction, road_name, distance_m, duration_s)
- RouteView (path, distance_m, duration_s, steps)

Rule: No HTTP calls, no state machine logic. Models only.
"""
from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from typing import List, Tuple

from routing.errors import InvalidWaypointError

# Internal coordinate type: (lat, lng)
LatLng = Tuple[float, float]


def validate_coordinates(lat: float, lng: float) -> LatLng:
    """
    Input-layer check for a coordinate pair. The store itself never validates;
    forms, the CLI and the geocoder call this before appending.
    """
    try:
        lat = float(lat)
        lng = float(lng)
    except (TypeError, ValueError):
        raise InvalidWaypointError("Please enter valid numeric coordinates.")

    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidWaypointError("Please enter valid numeric coordinates.")
    if lat < -90 or lat > 90:
        raise InvalidWaypointError("Latitude must be between -90 and 90 degrees.")
    if lng < -180 or lng > 180:
        raise InvalidWaypointError("Longitude must be between -180 and 180 degrees.")
    return lat, lng


@dataclass(frozen=True)
class Waypoint:
    """
    A named point the route must pass through.
    Frozen: label and coordinates change only by remove + re-add.
    """
    id: str
    label: str
    latitude: float
    longitude: float

    @classmethod
    def new(cls, label: str, lat: float, lng: float) -> Waypoint:
        return cls(
            id=uuid.uuid4().hex,
            label=label,
            latitude=lat,
            longitude=lng,
        )

    @property
    def location(self) -> LatLng:
        return (self.latitude, self.longitude)

    def to_provider(self) -> Tuple[float, float]:
        """Provider convention is (longitude, latitude)."""
        return (self.longitude, self.latitude)


@dataclass(frozen=True)
class RouteStep:
    """
    One turn-by-turn instruction. An empty road_name means the road is unnamed.
    """
    instruction: str
    road_name: str
    distance_m: float
    duration_s: float


@dataclass(frozen=True)
class RouteView:
    """
    The decoded, ready-to-render result of one routing computation.
    Superseded wholesale by the next successful computation.
    """
    path: Tuple[LatLng, ...]
    distance_m: float
    duration_s: float
    steps: Tuple[RouteStep, ...] = field(default_factory=tuple)

    @classmethod
    def new(
        cls,
        path: List[LatLng],
        distance_m: float,
        duration_s: float,
        steps: List[RouteStep] | None = None,
    ) -> RouteView:
        return cls(
            path=tuple(path),
            distance_m=max(float(distance_m or 0.0), 0.0),
            duration_s=max(float(duration_s or 0.0), 0.0),
            steps=tuple(steps or ()),
        )
