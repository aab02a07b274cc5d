"""
Purpose: Map-display collaborator.
What it does:
Renders a SessionView as a Leaflet map (via folium): one marker per waypoint in
visiting order and the route polyline when there is one. Pure sink: it reads
the view and never touches the session.
"""

from __future__ import annotations

from typing import Optional, Tuple

import folium

from .orchestrator import SessionView

# Used when there are no waypoints to fit the map to (New York City)
DEFAULT_CENTER: Tuple[float, float] = (40.7128, -74.006)
DEFAULT_ZOOM = 13

ROUTE_COLOR = "#3B82F6"


def _popup_html(index: int, label: str, lat: float, lng: float) -> str:
    return (
        f"<div style='text-align:center'>"
        f"<b>Point {index}</b><br>{label}<br>"
        f"<small>{lat:.6f}, {lng:.6f}</small></div>"
    )


def render_map(view: SessionView, *, zoom_start: int = DEFAULT_ZOOM) -> folium.Map:
    m = folium.Map(location=DEFAULT_CENTER, zoom_start=zoom_start)

    for index, waypoint in enumerate(view.waypoints, start=1):
        folium.Marker(
            waypoint.location,
            popup=_popup_html(index, waypoint.label, waypoint.latitude, waypoint.longitude),
            tooltip=waypoint.label,
        ).add_to(m)

    if view.route is not None and view.route.path:
        folium.PolyLine(
            list(view.route.path),
            color=ROUTE_COLOR,
            weight=4,
            opacity=0.8,
        ).add_to(m)

    if view.waypoints:
        lats = [w.latitude for w in view.waypoints]
        lngs = [w.longitude for w in view.waypoints]
        m.fit_bounds([[min(lats), min(lngs)], [max(lats), max(lngs)]], padding=(20, 20))

    return m


def save_map(view: SessionView, path: str = "map.html", m: Optional[folium.Map] = None) -> str:
    (m or render_map(view)).save(path)
    return path
