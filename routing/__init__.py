#Marks routing as a package.
#Re-exports the provider-facing APIs (ORSClient, polyline codec, error taxonomy)
#so other modules import from routing without knowing internal file names.
#steps/directions/geocoding are imported by path: they depend on waypoints.models.
#No business logic.

from .errors import (
    ErrorKind,
    RoutingError,
    MissingCredentialError,
    TransportError,
    ProviderError,
    NoRouteFoundError,
    MalformedGeometryError,
    InvalidWaypointError,
    IndexOutOfRangeError,
)
from .ors_client import ORSClient
from . import polyline

__all__ = [
    "ORSClient",
    "polyline",
    "ErrorKind",
    "RoutingError",
    "MissingCredentialError",
    "TransportError",
    "ProviderError",
    "NoRouteFoundError",
    "MalformedGeometryError",
    "InvalidWaypointError",
    "IndexOutOfRangeError",
]
