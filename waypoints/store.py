"""
Purpose: Owner of the ordered waypoint collection.
What it does:

- append / remove / reorder / clear
- keeps the sequence as an immutable tuple; every mutation builds a new one,
  so a snapshot handed to a listener never changes under it
- notifies subscribers with the full ordered snapshot after every effective
  mutation (never partial diffs)

Rule: No routing here. Coordinate range validation belongs to the input layer
(see waypoints.models.validate_coordinates), not to the store.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, List, Optional, Tuple

from routing.errors import IndexOutOfRangeError, InvalidWaypointError
from .models import Waypoint

logger = logging.getLogger(__name__)

Snapshot = Tuple[Waypoint, ...]
SnapshotListener = Callable[[Snapshot], None]


class WaypointStore:
    def __init__(self, waypoints: Optional[List[Waypoint]] = None):
        initial = tuple(waypoints or ())
        ids = [w.id for w in initial]
        if len(set(ids)) != len(ids):
            raise InvalidWaypointError("Waypoint ids must be unique")
        self._waypoints: Snapshot = initial
        self._listeners: List[SnapshotListener] = []

    # ----------------
    # subscription
    # ----------------
    def subscribe(self, listener: SnapshotListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: SnapshotListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _publish(self, waypoints: Snapshot) -> None:
        # a listener that refuses the change (raises) rolls the edit back
        previous = self._waypoints
        self._waypoints = waypoints
        try:
            for listener in list(self._listeners):
                listener(waypoints)
        except Exception:
            self._waypoints = previous
            raise

    # ----------------
    # read access
    # ----------------
    def snapshot(self) -> Snapshot:
        return self._waypoints

    def get(self, waypoint_id: str) -> Optional[Waypoint]:
        for waypoint in self._waypoints:
            if waypoint.id == waypoint_id:
                return waypoint
        return None

    def __len__(self) -> int:
        return len(self._waypoints)

    def __iter__(self) -> Iterator[Waypoint]:
        return iter(self._waypoints)

    # ----------------
    # mutations
    # ----------------
    def append(self, label: Optional[str], lat: float, lng: float) -> Waypoint:
        """
        Adds a waypoint at the end of the route.
        A missing or blank label defaults to its position ("Point 3").
        """
        if not label or not label.strip():
            label = f"Point {len(self._waypoints) + 1}"

        waypoint = Waypoint.new(label, lat, lng)
        # uuid4 collisions are not a practical concern, but ids must stay unique
        while self.get(waypoint.id) is not None:
            waypoint = Waypoint.new(label, lat, lng)

        logger.debug("Waypoint appended", extra={"waypoint_id": waypoint.id, "label": label})
        self._publish(self._waypoints + (waypoint,))
        return waypoint

    def remove(self, waypoint_id: str) -> None:
        remaining = tuple(w for w in self._waypoints if w.id != waypoint_id)
        if len(remaining) == len(self._waypoints):
            return

        logger.debug("Waypoint removed", extra={"waypoint_id": waypoint_id})
        self._publish(remaining)

    def reorder(self, from_index: int, to_index: int) -> None:
        """
        Moves the waypoint at from_index to to_index, shifting the ones between.
        Raises IndexOutOfRangeError (and leaves the collection as it was) if
        either index falls outside [0, len).
        """
        length = len(self._waypoints)
        for index in (from_index, to_index):
            if index < 0 or index >= length:
                raise IndexOutOfRangeError(index, length)

        if from_index == to_index:
            return

        reordered = list(self._waypoints)
        moved = reordered.pop(from_index)
        reordered.insert(to_index, moved)
        self._publish(tuple(reordered))

    def clear(self) -> None:
        if not self._waypoints:
            return
        self._publish(())
