"""
Plan a walking route from the command line.

Each stop is either "lat,lng" (optionally "lat,lng,Label") or a free-text
place name that is looked up with Nominatim. Stops are visited in the order
given.

    python scripts/plan_walk.py "40.7580,-73.9855,Times Square" "Bryant Park" --map walk.html
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from routing.directions import render_directions, summarize
from routing.errors import RoutingError
from routing.geocoding import NominatimGeocoder
from routing.ors_client import ORSClient
from session.map_view import save_map
from session.orchestrator import RouteOrchestrator, SessionState
from waypoints.models import validate_coordinates
from waypoints.store import WaypointStore


def parse_coordinate_stop(text: str):
    """Returns (label, lat, lng) for "lat,lng[,label]" input, else None."""
    parts = [p.strip() for p in text.split(",")]
    if len(parts) < 2:
        return None
    try:
        lat = float(parts[0])
        lng = float(parts[1])
    except ValueError:
        return None
    lat, lng = validate_coordinates(lat, lng)
    label = ",".join(parts[2:]).strip() or f"{lat:.6f}, {lng:.6f}"
    return label, lat, lng


async def plan(stops: List[str], client: ORSClient, geocoder: NominatimGeocoder,
               map_path: Optional[str] = None) -> int:
    store = WaypointStore()
    session = RouteOrchestrator(store, client)

    for stop in stops:
        parsed = parse_coordinate_stop(stop)
        if parsed is None:
            place = await asyncio.to_thread(geocoder.search, stop)
            if place is None:
                print(f"Location not found: {stop!r}. Please try a different search term.")
                return 2
            lat, lng = validate_coordinates(place.lat, place.lng)
            parsed = (place.label, lat, lng)
        store.append(*parsed)

    await session.wait_settled()
    view = session.view()

    print(f"Your Route ({len(view.waypoints)} points)")
    for index, waypoint in enumerate(view.waypoints, start=1):
        print(f"  {index}. {waypoint.label} ({waypoint.latitude:.6f}, {waypoint.longitude:.6f})")

    if view.state == SessionState.FAILED:
        print(f"Route Error [{view.error.value}]: {view.error_message}")
    elif view.route is not None:
        print(summarize(view.route))
        for line in render_directions(view.route.steps):
            print(f"  {line}")

    if map_path:
        save_map(view, map_path)
        print(f"Map written to '{map_path}'.")

    return 0 if view.state == SessionState.READY else 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Plan a walking route through ordered stops.")
    parser.add_argument("stops", nargs="+", help='"lat,lng[,label]" or a place name')
    parser.add_argument("--map", dest="map_path", help="write an HTML map to this path")
    parser.add_argument("--profile", default=None, help="ORS profile (default foot-walking)")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    client = ORSClient(profile=args.profile)
    if not client.has_credential:
        print("API Key Required: add OPENROUTESERVICE_API_KEY to .env to enable routing.")

    try:
        return asyncio.run(plan(args.stops, client, NominatimGeocoder(), args.map_path))
    except RoutingError as exc:
        print(f"Error: {exc}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
