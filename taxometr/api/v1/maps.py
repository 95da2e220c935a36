from typing import Optional
import logging
from fastapi import APIRouter, Depends, HTTPException, Query

from taxometr.api.dependencies import get_geocode_executor, get_route_repository
from taxometr.api.v1.models import AddressResponse, CoordinatesResponse, RouteUrlResponse
from taxometr.core.settings import get_settings
from taxometr.models.location import Coordinate, MicroPoint
from taxometr.models.route import Route
from taxometr.repositories.base import DirectionsError
from taxometr.repositories.maps.route_fetcher import RouteRepository
from taxometr.services.geocoding import GeocodeExecutor


logger = logging.getLogger(__name__)
router = APIRouter()


def _language(lang: Optional[str]) -> str:
    return lang or get_settings().DEFAULT_LANGUAGE


@router.get("/route-url", response_model=RouteUrlResponse)
async def get_route_url_api(
    from_lat: float = Query(..., ge=-90, le=90, description="Origin latitude (WGS84)"),
    from_lng: float = Query(..., ge=-180, le=180, description="Origin longitude (WGS84)"),
    to_lat: float = Query(..., ge=-90, le=90, description="Destination latitude (WGS84)"),
    to_lng: float = Query(..., ge=-180, le=180, description="Destination longitude (WGS84)"),
    lang: Optional[str] = Query(None, description="Language tag for the route description"),
    route_repository: RouteRepository = Depends(get_route_repository),
):
    """Build the routing service URL without fetching it."""
    url = route_repository.build_url(
        Coordinate(latitude=from_lat, longitude=from_lng),
        Coordinate(latitude=to_lat, longitude=to_lng),
        _language(lang),
    )
    return RouteUrlResponse(url=url)


@router.get("/route", response_model=Route)
async def get_route_api(
    from_lat: float = Query(..., ge=-90, le=90, description="Origin latitude (WGS84)"),
    from_lng: float = Query(..., ge=-180, le=180, description="Origin longitude (WGS84)"),
    to_lat: float = Query(..., ge=-90, le=90, description="Destination latitude (WGS84)"),
    to_lng: float = Query(..., ge=-180, le=180, description="Destination longitude (WGS84)"),
    lang: Optional[str] = Query(None, description="Language tag for the route description"),
    route_repository: RouteRepository = Depends(get_route_repository),
):
    """Fetch and parse the driving route between two points.

    An empty waypoint list means no route was found or the response could
    not be parsed.
    """
    logger.info(
        f"Received route request: origin=({from_lat},{from_lng}), destination=({to_lat},{to_lng})"
    )
    try:
        return await route_repository.get_route(
            Coordinate(latitude=from_lat, longitude=from_lng),
            Coordinate(latitude=to_lat, longitude=to_lng),
            _language(lang),
        )
    except DirectionsError as e:
        logger.error(f"Directions error for ({from_lat},{from_lng}) -> ({to_lat},{to_lng}): {e}")
        raise HTTPException(status_code=503, detail=f"Routing service error: {e}")


@router.get("/address", response_model=AddressResponse)
def get_address_api(
    latitude: float = Query(..., ge=-90, le=90, description="Latitude (WGS84)"),
    longitude: float = Query(..., ge=-180, le=180, description="Longitude (WGS84)"),
    timeout: Optional[float] = Query(None, gt=0, le=60, description="Lookup deadline in seconds"),
    executor: GeocodeExecutor = Depends(get_geocode_executor),
):
    """Reverse geocode a point, giving up after the deadline."""
    address = executor.address_for(
        Coordinate(latitude=latitude, longitude=longitude), timeout=timeout
    )
    if address is None:
        raise HTTPException(
            status_code=404, detail=f"No address found for ({latitude}, {longitude})"
        )
    return AddressResponse(address=address.render(), lines=address.lines)


@router.get("/coordinates", response_model=CoordinatesResponse)
def get_coordinates_api(
    address: str = Query(..., min_length=1, description="Free-text address"),
    timeout: Optional[float] = Query(None, gt=0, le=60, description="Lookup deadline in seconds"),
    executor: GeocodeExecutor = Depends(get_geocode_executor),
):
    """Geocode an address string to its best matching coordinate."""
    coordinate = executor.coordinates_for(address, timeout=timeout or executor.timeout)
    if coordinate is None:
        raise HTTPException(status_code=404, detail=f"No location found for '{address}'")
    return CoordinatesResponse(
        coordinate=coordinate, point=MicroPoint.from_coordinate(coordinate)
    )
