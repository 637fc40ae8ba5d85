from fastapi import APIRouter, Depends, HTTPException
from homemove.core.config import Settings, get_settings
from homemove.core.exceptions import GeoTimeout, LocationUnresolvable
from homemove.schemas.schemas import DistanceRequest, DistanceResult
from homemove.services.geo import resolve_distance
from homemove.services.providers import build_providers

router = APIRouter(prefix="/v1/distance", tags=["Distance"])


def get_geo_providers(settings: Settings = Depends(get_settings)):
    return build_providers(settings)


@router.post("", response_model=DistanceResult)
async def calculate_distance(
    payload: DistanceRequest,
    providers=Depends(get_geo_providers),
    settings: Settings = Depends(get_settings),
):
    """
    Distance between two addresses or coordinate pairs.
    Uses the routing provider when configured, haversine otherwise.
    """
    geocoder, route_provider = providers
    try:
        return await resolve_distance(
            payload.origin, payload.destination,
            geocoder=geocoder, router=route_provider,
            timeout=settings.geo_total_timeout_seconds,
        )
    except GeoTimeout as e:
        raise HTTPException(status_code=504, detail={"error": e.message, **e.details})
    except LocationUnresolvable as e:
        raise HTTPException(status_code=422, detail={"error": e.message, **e.details})
