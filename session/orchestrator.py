"""
Purpose: The route-planning session state machine (single entry point for routing).
What it does:

Observes a WaypointStore and keeps one visible route in sync with it:

- fewer than 2 waypoints -> IDLE, nothing shown
- any other change -> new request with a fresh token, COMPUTING
- response for the current token -> READY (route replaced) or FAILED (error set,
  previous route kept)
- response for any older token -> dropped, whatever it says

Every edit supersedes the request before it; there is no debouncing and no
automatic retry. Older requests are never cancelled on the wire, their results
are just ignored when they arrive.

Concurrency: everything runs on one asyncio event loop. Gateway calls are
tasks; a synchronous gateway (the requests-based ORSClient) is pushed to a
worker thread, but its result is always reconciled back on the loop.
Store mutations that lead to a request must therefore happen while the loop
is running; without one the edit is refused (RuntimeError) and both the store
and the session stay as they were.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Set, Tuple

from routing import polyline
from routing.errors import ErrorKind, MalformedGeometryError, RoutingError, classify
from routing.steps import extract_steps
from waypoints.models import RouteView
from waypoints.store import Snapshot, WaypointStore

logger = logging.getLogger(__name__)

LngLat = Tuple[float, float]


class DirectionsGateway(Protocol):
    """
    Anything with compute_route((lon, lat) pairs) -> {"geometry", "summary", "steps"}.
    compute_route may be a plain function or a coroutine function.
    """

    def compute_route(self, coordinates: List[LngLat]) -> Any: ...


class SessionState(str, Enum):
    IDLE = "IDLE"
    COMPUTING = "COMPUTING"
    READY = "READY"
    FAILED = "FAILED"


@dataclass(frozen=True)
class SessionView:
    """What the presentation layer gets after every visible change."""

    state: SessionState
    waypoints: Snapshot
    route: Optional[RouteView]
    error: Optional[ErrorKind]
    error_message: Optional[str]
    token: Optional[int]


SessionListener = Callable[[SessionView], None]


def build_route_view(response: Dict[str, Any]) -> RouteView:
    """
    Decode one gateway response into a RouteView.
    Raises MalformedGeometryError when the geometry is missing or corrupt.
    """
    geometry = response.get("geometry")
    if not isinstance(geometry, str):
        raise MalformedGeometryError("Route geometry is missing")

    path = polyline.decode(geometry)
    summary = response.get("summary") or {}
    return RouteView.new(
        path=path,
        distance_m=summary.get("distance", 0.0),
        duration_s=summary.get("duration", 0.0),
        steps=extract_steps(response.get("steps")),
    )


class RouteOrchestrator:
    def __init__(self, store: WaypointStore, gateway: DirectionsGateway):
        self.store = store
        self.gateway = gateway

        self.state = SessionState.IDLE
        self.current_route: Optional[RouteView] = None
        self.last_error: Optional[ErrorKind] = None
        self.last_error_message: Optional[str] = None
        self.pending_token: Optional[int] = None
        # waypoints the current route was computed for
        self.snapshot: Snapshot = ()

        self._last_token = 0
        self._requests: Dict[int, Snapshot] = {}
        self._tasks: Set[asyncio.Task] = set()
        self._listeners: List[SessionListener] = []

        # a store that already holds waypoints is reconciled once on attach
        if len(self.store):
            self.on_waypoints_changed(self.store.snapshot())
        self.store.subscribe(self.on_waypoints_changed)

    # ----------------
    # presentation side
    # ----------------
    def subscribe(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def view(self) -> SessionView:
        return SessionView(
            state=self.state,
            waypoints=self.store.snapshot(),
            route=self.current_route,
            error=self.last_error,
            error_message=self.last_error_message,
            token=self._last_token or None,
        )

    def _publish(self) -> None:
        view = self.view()
        for listener in list(self._listeners):
            listener(view)

    # ----------------
    # transitions
    # ----------------
    def on_waypoints_changed(self, waypoints: Snapshot) -> None:
        """Store listener: every effective edit lands here with the full snapshot."""
        if len(waypoints) < 2:
            self._reset()
        else:
            self._issue(waypoints)

    def _reset(self) -> None:
        self.state = SessionState.IDLE
        self.current_route = None
        self.last_error = None
        self.last_error_message = None
        self.pending_token = None
        self.snapshot = ()
        self._requests.clear()
        self._publish()

    def _issue(self, waypoints: Snapshot) -> int:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise RuntimeError(
                "Route requests need a running asyncio event loop; "
                "edit waypoints from inside a coroutine"
            ) from None

        self._last_token += 1
        token = self._last_token
        superseded = self.pending_token

        self.pending_token = token
        self.state = SessionState.COMPUTING
        self.last_error = None
        self.last_error_message = None
        self._requests[token] = waypoints

        coordinates = [w.to_provider() for w in waypoints]
        task = loop.create_task(self._run(token, coordinates))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.debug(
            "Route request issued",
            extra={"token": token, "points": len(coordinates), "superseded": superseded},
        )
        self._publish()
        return token

    async def _call_gateway(self, coordinates: List[LngLat]) -> Dict[str, Any]:
        compute = self.gateway.compute_route
        if inspect.iscoroutinefunction(compute):
            return await compute(coordinates)
        return await asyncio.to_thread(compute, coordinates)

    async def _run(self, token: int, coordinates: List[LngLat]) -> None:
        try:
            response = await self._call_gateway(coordinates)
        except RoutingError as exc:
            self.handle_failure(token, exc)
            return
        except Exception as exc:
            logger.warning(
                "Unexpected directions gateway failure",
                exc_info=True,
                extra={"token": token, "error": str(exc)},
            )
            self.handle_failure(token, exc)
            return
        self.handle_success(token, response)

    def _is_stale(self, token: int) -> bool:
        if token == self.pending_token:
            return False
        self._requests.pop(token, None)
        logger.debug(
            "Discarding stale route response",
            extra={"token": token, "pending_token": self.pending_token},
        )
        return True

    def handle_success(self, token: int, response: Dict[str, Any]) -> bool:
        """
        Reconcile a successful gateway response. Returns False if it was stale.
        A response that cannot be decoded counts as a failure for its token.
        """
        if self._is_stale(token):
            return False

        try:
            route = build_route_view(response)
        except RoutingError as exc:
            return self.handle_failure(token, exc)

        self.state = SessionState.READY
        self.current_route = route
        self.last_error = None
        self.last_error_message = None
        self.snapshot = self._requests.pop(token, self.store.snapshot())
        self.pending_token = None

        logger.info(
            "Route ready",
            extra={"token": token, "path_points": len(route.path), "distance_m": route.distance_m},
        )
        self._publish()
        return True

    def handle_failure(self, token: int, error: BaseException) -> bool:
        """
        Reconcile a failed request. Returns False if it was stale.
        The previous route (if any) stays visible.
        """
        if self._is_stale(token):
            return False

        self.state = SessionState.FAILED
        self.last_error = classify(error)
        self.last_error_message = str(error)
        self.pending_token = None
        self._requests.pop(token, None)

        logger.warning(
            "Route computation failed",
            extra={"token": token, "error_kind": self.last_error.value, "error": str(error)},
        )
        self._publish()
        return True

    # ----------------
    # user actions
    # ----------------
    def retry(self) -> Optional[int]:
        """User-triggered retry after a failure. Never called automatically."""
        waypoints = self.store.snapshot()
        if self.state != SessionState.FAILED or len(waypoints) < 2:
            return None
        return self._issue(waypoints)

    def clear(self) -> None:
        if len(self.store):
            self.store.clear() # notifies -> _reset
        else:
            self._reset()

    async def wait_settled(self) -> None:
        """Wait for every outstanding request, current or superseded."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        self.store.unsubscribe(self.on_waypoints_changed)
