"""
Purpose: Error taxonomy for the route-planning session.
What it does:
- Defines ErrorKind, the classification the session exposes as `last_error`.
- Defines one exception per kind so the HTTP client, the polyline decoder and the
  waypoint store can raise precise errors and the orchestrator can classify them
  without string matching.

Rule: No I/O here. Exceptions only.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    MISSING_CREDENTIAL = "MissingCredential"
    TRANSPORT_FAILURE = "TransportFailure"
    PROVIDER_ERROR = "ProviderError"
    NO_ROUTE_FOUND = "NoRouteFound"
    MALFORMED_GEOMETRY = "MalformedGeometry"
    INVALID_WAYPOINT = "InvalidWaypoint"


class RoutingError(Exception):
    """Base class for every error the session knows how to classify."""

    kind: ErrorKind = ErrorKind.TRANSPORT_FAILURE

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind.value)
        self.message = message or self.kind.value


class MissingCredentialError(RoutingError):
    """No API key configured for the directions provider."""

    kind = ErrorKind.MISSING_CREDENTIAL


class TransportError(RoutingError):
    """Network / connection level failure (DNS, refused, timeout)."""

    kind = ErrorKind.TRANSPORT_FAILURE


class ProviderError(RoutingError):
    """The provider answered with a non-success status."""

    kind = ErrorKind.PROVIDER_ERROR

    def __init__(self, status_code: Optional[int], body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API Error: {status_code} - {body}")


class NoRouteFoundError(RoutingError):
    kind = ErrorKind.NO_ROUTE_FOUND

    def __init__(self, message: str = "No route found between the selected points"):
        super().__init__(message)


class MalformedGeometryError(RoutingError, ValueError):
    kind = ErrorKind.MALFORMED_GEOMETRY


class InvalidWaypointError(RoutingError, ValueError):
    """Out-of-range coordinate or waypoint index."""

    kind = ErrorKind.INVALID_WAYPOINT


class IndexOutOfRangeError(InvalidWaypointError, IndexError):
    """Raised by WaypointStore.reorder for an index outside [0, len)."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"Index {index} out of range for {length} waypoints")


def classify(error: BaseException) -> ErrorKind:
    """
    Map any exception coming out of a gateway call or the decode step to an ErrorKind.
    Unknown exceptions are treated as transport failures.
    """
    if isinstance(error, RoutingError):
        return error.kind
    return ErrorKind.TRANSPORT_FAILURE
