"""
Waypoints domain package.

Public API:
- Domain models: Waypoint, RouteStep, RouteView
- Ordered collection: WaypointStore
- Input-layer check: validate_coordinates
"""
from .models import LatLng, RouteStep, RouteView, Waypoint, validate_coordinates
from .store import WaypointStore

__all__ = [
    "Waypoint",
    "RouteStep",
    "RouteView",
    "WaypointStore",
    "validate_coordinates",
    "LatLng",
]
