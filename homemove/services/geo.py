import math
import asyncio
import logging
from typing import Optional

from homemove.core.exceptions import GeoTimeout, LocationUnresolvable
from homemove.schemas.schemas import Coordinates, DistanceMethod, DistanceResult
from homemove.services.providers import Geocoder, Location, RouteProvider

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371
AVERAGE_SPEED_KMH = 30
DEFAULT_RESOLVE_TIMEOUT_SECONDS = 10.0


def haversine_km(origin: Coordinates, destination: Coordinates) -> float:
    """Calculate straight-line distance in km between two coordinates."""
    phi1, phi2 = math.radians(origin.latitude), math.radians(destination.latitude)
    dphi = math.radians(destination.latitude - origin.latitude)
    dlambda = math.radians(destination.longitude - origin.longitude)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def estimate_distance(origin: Coordinates, destination: Coordinates) -> DistanceResult:
    """Haversine distance with a duration assuming ~30 km/h average speed."""
    distance_km = haversine_km(origin, destination)
    return DistanceResult(
        distance_km=distance_km,
        duration_minutes=math.ceil(distance_km / AVERAGE_SPEED_KMH * 60),
        method=DistanceMethod.FALLBACK,
    )


async def _to_coordinates(location: Location, geocoder: Optional[Geocoder]) -> Coordinates:
    if isinstance(location, Coordinates):
        return location
    if geocoder is None:
        raise LocationUnresolvable(
            f"Cannot geocode '{location}': no geocoding provider configured",
            {"address": location},
        )
    coords = await geocoder.geocode(location)
    if coords is None:
        raise LocationUnresolvable(f"Address not found: '{location}'", {"address": location})
    return coords


async def _resolve(
    origin: Location,
    destination: Location,
    geocoder: Optional[Geocoder],
    router: Optional[RouteProvider],
) -> DistanceResult:
    if isinstance(origin, str) and isinstance(destination, str) and router is not None:
        result = await router.route_distance(origin, destination)
        if result is not None:
            return result
        logger.warning("Routing provider unavailable, falling back to geocode + haversine")

    origin_coords = await _to_coordinates(origin, geocoder)
    destination_coords = await _to_coordinates(destination, geocoder)
    return estimate_distance(origin_coords, destination_coords)


async def resolve_distance(
    origin: Location,
    destination: Location,
    geocoder: Optional[Geocoder] = None,
    router: Optional[RouteProvider] = None,
    timeout: Optional[float] = None,
) -> DistanceResult:
    """
    Distance between two endpoints, each an address or Coordinates.

    Two addresses go to the routing provider first. Otherwise, or when routing
    is unavailable, addresses are geocoded and the haversine estimate is used.
    When timeout (seconds, DEFAULT_RESOLVE_TIMEOUT_SECONDS if not given)
    elapses, the pending provider call is cancelled and GeoTimeout is raised.
    """
    if timeout is None:
        timeout = DEFAULT_RESOLVE_TIMEOUT_SECONDS

    if isinstance(origin, Coordinates) and isinstance(destination, Coordinates):
        return estimate_distance(origin, destination)

    try:
        return await asyncio.wait_for(_resolve(origin, destination, geocoder, router), timeout)
    except asyncio.TimeoutError as e:
        logger.warning(f"Distance resolution timed out after {timeout}s")
        raise GeoTimeout(
            f"Distance resolution timed out after {timeout}s", {"timeout": timeout}
        ) from e
