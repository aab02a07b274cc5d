#Expose the route-planning session pieces:
#State machine (RouteOrchestrator, the "one call" entry point)
#Published view model (SessionView, SessionState)
#Map export lives in session.map_view (needs folium), imported by path

from .orchestrator import (
    DirectionsGateway,
    RouteOrchestrator,
    SessionState,
    SessionView,
    build_route_view,
)

__all__ = [
    "DirectionsGateway",
    "RouteOrchestrator",
    "SessionState",
    "SessionView",
    "build_route_view",
]
