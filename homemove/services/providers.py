"""
Google Maps adapters for the geocoding and routing collaborators.

Provider-level failures never raise: transport errors, timeouts and non-OK
statuses are logged and reported as None so the resolver can fall back.
"""

import logging
import math
from typing import Optional, Protocol, Union

import httpx

from homemove.core.config import Settings
from homemove.schemas.schemas import Coordinates, DistanceMethod, DistanceResult

logger = logging.getLogger(__name__)

Location = Union[Coordinates, str]


class Geocoder(Protocol):
    async def geocode(self, address: str) -> Optional[Coordinates]:
        ...


class RouteProvider(Protocol):
    async def route_distance(self, origin: Location, destination: Location) -> Optional[DistanceResult]:
        ...


def _as_query(location: Location) -> str:
    if isinstance(location, Coordinates):
        return f"{location.latitude},{location.longitude}"
    return location


class GoogleGeocoder:
    def __init__(self, api_key: str, url: str, timeout: float = 5.0):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout

    async def geocode(self, address: str) -> Optional[Coordinates]:
        params = {"address": address, "key": self.api_key}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url, params=params)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Geocoding request failed for '{address}': {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Geocoding returned a non-object body for '{address}'")
            return None

        if data.get("status") != "OK" or not data.get("results"):
            logger.warning(f"Geocoding returned {data.get('status')} for '{address}'")
            return None

        try:
            location = data["results"][0]["geometry"]["location"]
            return Coordinates(latitude=location["lat"], longitude=location["lng"])
        except (KeyError, IndexError, TypeError):
            logger.warning(f"Geocoding result for '{address}' had no location")
            return None


class GoogleDistanceMatrix:
    def __init__(self, api_key: str, url: str, timeout: float = 5.0):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout

    async def route_distance(self, origin: Location, destination: Location) -> Optional[DistanceResult]:
        params = {
            "origins": _as_query(origin),
            "destinations": _as_query(destination),
            "key": self.api_key,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url, params=params)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Distance matrix request failed: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning("Distance matrix returned a non-object body")
            return None

        if data.get("status") != "OK":
            logger.warning(f"Distance matrix returned {data.get('status')}")
            return None

        try:
            element = data["rows"][0]["elements"][0]
        except (KeyError, IndexError, TypeError):
            logger.warning("Distance matrix response had no elements")
            return None

        if not isinstance(element, dict):
            logger.warning("Distance matrix element was not an object")
            return None

        if element.get("status") != "OK":
            logger.warning(f"Distance matrix element status {element.get('status')}")
            return None

        return DistanceResult(
            distance_km=element["distance"]["value"] / 1000,
            duration_minutes=math.ceil(element["duration"]["value"] / 60),
            method=DistanceMethod.EXTERNAL,
        )


def build_providers(settings: Settings) -> tuple[Optional[GoogleGeocoder], Optional[GoogleDistanceMatrix]]:
    """Providers are unconfigured (None) when no API key is set."""
    if not settings.google_maps_api_key:
        return None, None
    geocoder = GoogleGeocoder(
        settings.google_maps_api_key, settings.geocode_url, settings.geo_timeout_seconds
    )
    router = GoogleDistanceMatrix(
        settings.google_maps_api_key, settings.distance_matrix_url, settings.geo_timeout_seconds
    )
    return geocoder, router
