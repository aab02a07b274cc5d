#Purpose: Turn-by-turn step extraction.
#Maps the provider's raw step dicts into RouteStep models.
#Pure mapping: no HTTP, no formatting (see directions.py for presentation).

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from waypoints.models import RouteStep

# Provider convention for "this road has no name"
UNNAMED_ROAD = "-"


def _normalize_road_name(name: Optional[str]) -> str:
    if not name or name.strip() == UNNAMED_ROAD:
        return ""
    return name


def extract_steps(raw_steps: Optional[Iterable[Dict[str, Any]]]) -> List[RouteStep]:
    """
    Convert raw provider steps into RouteStep objects, keeping their order.
    No steps (None or empty) is not an error: returns [].
    The final arrival step is kept; renderers decide whether to show it.
    """
    if not raw_steps:
        return []

    steps: List[RouteStep] = []
    for raw in raw_steps:
        steps.append(
            RouteStep(
                instruction=str(raw.get("instruction") or ""),
                road_name=_normalize_road_name(raw.get("name")),
                distance_m=float(raw.get("distance") or 0.0),
                duration_s=float(raw.get("duration") or 0.0),
            )
        )
    return steps
