from functools import lru_cache
from fastapi import Depends

from taxometr.core.settings import get_settings
from taxometr.repositories.maps.google_maps import GoogleMapsGeocoder
from taxometr.repositories.maps.route_fetcher import RouteRepository
from taxometr.services.geocoding import GeocodeExecutor


@lru_cache()
def get_geocoding_provider() -> GoogleMapsGeocoder:
    """Get GoogleMapsGeocoder instance."""
    return GoogleMapsGeocoder(api_key=get_settings().GOOGLE_MAPS_API_KEY)


@lru_cache()
def get_route_repository() -> RouteRepository:
    """Get RouteRepository instance."""
    return RouteRepository()


def get_geocode_executor(
    provider: GoogleMapsGeocoder = Depends(get_geocoding_provider),
) -> GeocodeExecutor:
    return GeocodeExecutor(provider=provider)
