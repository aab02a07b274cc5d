#Purpose: The OpenRouteService "adapter/client" (the directions gateway).
#Sole responsibility: talk to ORS via HTTP and return normalized outputs.
#Encapsulates ORS-specific details:
#coordinate formatting (lon,lat)
#URL construction (/v2/directions/{profile})
#credential header, timeouts and error classification
#parsing response JSON into the gateway shape the session consumes
#It should not contain session state or polyline decoding.


from dotenv import load_dotenv
import logging
import os
from typing import List, Tuple, Dict, Any, Optional
import requests

from .errors import (
    MissingCredentialError,
    NoRouteFoundError,
    ProviderError,
    TransportError,
)

# Read ORS settings from environment
# Example in .env:
# OPENROUTESERVICE_API_KEY=5b3ce3597851110001cf6248...
# ORS_BASE_URL=https://api.openrouteservice.org
load_dotenv()

DEFAULT_BASE_URL = "https://api.openrouteservice.org"
DEFAULT_PROFILE = "foot-walking"
DEFAULT_TIMEOUT = 10.0

logger = logging.getLogger(__name__)

# Provider coordinate type: (lon, lat)
LngLat = Tuple[float, float]


class ORSClient:
    """
    ORS Adapter / Client

    Sole responsibility:
    - Talk to ORS via HTTP
    - Send (lon, lat) pairs as the provider expects
    - Return {"geometry", "summary", "steps"} or raise a RoutingError

    The timeout bounds every request: a hung call surfaces as TransportError.
    """
    def __init__(self,
                 api_key: Optional[str] = None,
                 profile: Optional[str] = None,
                 timeout: Optional[float] = None,
                 base_url: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key if api_key is not None else os.getenv("OPENROUTESERVICE_API_KEY")
        self.profile = profile or os.getenv("ORS_PROFILE", DEFAULT_PROFILE) #foot-walking, cycling-regular, driving-car
        self.timeout = timeout if timeout is not None else float(os.getenv("ORS_TIMEOUT", DEFAULT_TIMEOUT))
        self.base_url = (base_url or os.getenv("ORS_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")
        self.http = session or requests

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

        #----------------
        # Internal helper methods for payloads and response parsing
        #----------------
    def format_coordinates(self, coords: List[LngLat]) -> List[List[float]]:
        """Convert list of (lon, lat) to the JSON body shape [[lon, lat], ...]"""
        return [[float(lon), float(lat)] for lon, lat in coords]

    @staticmethod
    def _collect_steps(route: Dict[str, Any]) -> List[Dict[str, Any]]:
        # One segment per leg between consecutive waypoints; keep them in order
        steps: List[Dict[str, Any]] = []
        for segment in route.get("segments") or []:
            for step in segment.get("steps") or []:
                steps.append({
                    "instruction": step.get("instruction", ""),
                    "name": step.get("name", ""),
                    "distance": step.get("distance", 0.0),
                    "duration": step.get("duration", 0.0),
                })
        return steps

        #----------------
        # Public methods
        #----------------
    def compute_route(self, coordinates: List[LngLat]) -> Dict[str, Any]:
        """
            calls the ORS directions endpoint with the given (lon, lat) coordinates
            and returns the first route, normalized

            Returns:
                {
                    "geometry": str, # encoded polyline, precision 1e5
                    "summary": {"distance": float, "duration": float}, # meters, seconds
                    "steps": [{"instruction", "name", "distance", "duration"}, ...],
                }
        """
        if not self.api_key:
            raise MissingCredentialError(
                "OpenRouteService API key not found. Please add OPENROUTESERVICE_API_KEY to your .env file."
            )
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required to compute a route.")

        url = f"{self.base_url}/v2/directions/{self.profile}"
        logger.debug("Requesting route", extra={"points": len(coordinates), "profile": self.profile})

        try:
            response = self.http.post(
                url,
                headers={
                    "Authorization": self.api_key,
                    "Content-Type": "application/json",
                },
                json={
                    "coordinates": self.format_coordinates(coordinates),
                    "format": "json",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Could not reach OpenRouteService: {exc}") from exc

        if not response.ok:
            logger.warning(
                "ORS returned an error status",
                extra={"status_code": response.status_code, "profile": self.profile},
            )
            raise ProviderError(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError(response.status_code, "Response body is not valid JSON") from exc

        routes = data.get("routes") or []
        if not routes:
            raise NoRouteFoundError()

        route = routes[0] #take the first route (ORS may return alternatives)
        summary = route.get("summary") or {}

        #Normalize output to internal format
        return {
            "geometry": route.get("geometry"),
            "summary": {
                "distance": float(summary.get("distance", 0.0)),
                "duration": float(summary.get("duration", 0.0)),
            },
            "steps": self._collect_steps(route),
        }
