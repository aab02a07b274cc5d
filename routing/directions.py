"""
Purpose: Presentation helpers for a computed route.
What it does:
Turns a RouteView into the text a sidebar or terminal shows:
- total distance and walking time
- numbered turn-by-turn lines (the final arrival step is not listed)
"""

from __future__ import annotations

from typing import List, Sequence

from waypoints.models import RouteStep, RouteView


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{round(meters)} m"
    return f"{meters / 1000:.2f} km"


def format_duration(seconds: float) -> str:
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def describe_step(step: RouteStep) -> str:
    if step.road_name:
        return f"{step.instruction} onto {step.road_name}"
    return step.instruction


def render_directions(steps: Sequence[RouteStep]) -> List[str]:
    """
    Numbered direction lines. The last step is the arrival and carries no
    forward instruction, so it is dropped here (it stays in RouteView.steps).
    """
    lines: List[str] = []
    for index, step in enumerate(steps[:-1], start=1):
        lines.append(
            f"{index}. {describe_step(step)} "
            f"({format_distance(step.distance_m)} • {format_duration(step.duration_s)})"
        )
    return lines


def summarize(route: RouteView) -> str:
    return (
        f"Distance: {format_distance(route.distance_m)} | "
        f"Walking time: {format_duration(route.duration_s)}"
    )
