#Purpose: Free-text place search (geocoding collaborator).
#Uses Nominatim (OpenStreetMap's geocoder), which needs no API key
#but does require an identifying User-Agent.
#Returns the best match only; turning it into a waypoint is the caller's job.

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Optional

from dotenv import load_dotenv
import requests

from .errors import ProviderError, TransportError

load_dotenv()

DEFAULT_NOMINATIM_URL = "https://nominatim.openstreetmap.org"
DEFAULT_USER_AGENT = "walkplanner/0.1"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Place:
    """Best geocoding match for a query."""

    display_name: str
    label: str # short name for the waypoint list
    lat: float
    lng: float


class NominatimGeocoder:
    def __init__(self,
                 base_url: Optional[str] = None,
                 user_agent: Optional[str] = None,
                 timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or os.getenv("NOMINATIM_URL", DEFAULT_NOMINATIM_URL)).rstrip("/")
        self.user_agent = user_agent or os.getenv("NOMINATIM_USER_AGENT", DEFAULT_USER_AGENT)
        self.timeout = timeout
        self.http = session or requests

    def search(self, query: str) -> Optional[Place]:
        """
        Returns the best match for `query`, or None when nothing is found.
        A blank query returns None without touching the network.
        """
        if not query or not query.strip():
            return None
        query = query.strip()

        try:
            response = self.http.get(
                f"{self.base_url}/search",
                params={
                    "format": "json",
                    "q": query,
                    "limit": 1,
                    "addressdetails": 1,
                },
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Geocoding failed: {exc}") from exc

        if not response.ok:
            raise ProviderError(response.status_code, response.text)

        try:
            results = response.json()
        except ValueError as exc:
            raise ProviderError(response.status_code, "Response body is not valid JSON") from exc

        if not results:
            logger.info("No geocoding match", extra={"query": query})
            return None

        best = results[0]
        try:
            lat = float(best["lat"])
            lng = float(best["lon"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ProviderError(response.status_code, f"Geocoding result has no usable coordinates: {best!r}") from exc

        display_name = best.get("display_name") or query
        label = display_name.split(",")[0].strip() or query
        return Place(
            display_name=display_name,
            label=label,
            lat=lat,
            lng=lng,
        )
