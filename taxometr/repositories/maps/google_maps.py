from typing import Any, Dict, List, Optional
import googlemaps
import googlemaps.exceptions
import logging

from taxometr.models.address import ADDRESS_SEPARATOR, Address
from taxometr.models.location import Coordinate
from taxometr.repositories.base import GeocodingError, ReverseGeocodingError

logger = logging.getLogger(__name__)

MAX_ADDRESS_LINES = 3


def split_formatted_address(formatted_address: str) -> List[str]:
    """Fold a formatted address into street, locality and region lines."""
    parts = [part.strip() for part in formatted_address.split(",") if part.strip()]
    if len(parts) <= MAX_ADDRESS_LINES:
        return parts
    head = parts[: MAX_ADDRESS_LINES - 1]
    return head + [ADDRESS_SEPARATOR.join(parts[MAX_ADDRESS_LINES - 1:])]


class GoogleMapsGeocoder:
    def __init__(self, api_key: Optional[str] = None, client: Optional[Any] = None):
        """Initialize Google Maps client."""
        logger.info("Initializing Google Maps geocoder")
        self.client = client or googlemaps.Client(key=api_key)

    def lookup_by_coordinate(
        self, latitude: float, longitude: float, max_results: int
    ) -> List[Address]:
        """Convert coordinates to ranked addresses using Google Maps API."""
        logger.debug(f"Reverse geocoding location: lat={latitude}, lng={longitude}")
        try:
            results: List[Dict[str, Any]] = self.client.reverse_geocode((latitude, longitude))
        except googlemaps.exceptions.ApiError as e:
            logger.error(f"Google Maps API error during reverse geocoding for ({latitude}, {longitude}): {e}", exc_info=True)
            raise ReverseGeocodingError(f"API error during reverse geocoding for ({latitude}, {longitude}): {e}") from e
        except (googlemaps.exceptions.TransportError, googlemaps.exceptions.Timeout) as e:
            logger.error(f"Transport error during reverse geocoding for ({latitude}, {longitude}): {e}", exc_info=True)
            raise ReverseGeocodingError(f"Transport error during reverse geocoding for ({latitude}, {longitude}): {e}") from e

        try:
            addresses = [
                Address(lines=split_formatted_address(result.get("formatted_address", "")))
                for result in (results or [])[:max_results]
            ]
        except Exception as e:
            logger.error(f"Unexpected reverse geocoding response for ({latitude}, {longitude}): {e}", exc_info=True)
            raise ReverseGeocodingError(f"Unexpected reverse geocoding response for ({latitude}, {longitude}): {e}") from e
        logger.debug(f"Reverse geocoding ({latitude}, {longitude}) returned {len(addresses)} addresses")
        return addresses

    def lookup_by_text(self, text: str, max_results: int) -> List[Coordinate]:
        """Convert address to ranked coordinates using Google Maps API."""
        logger.debug(f"Geocoding address: '{text}'")
        try:
            results: List[Dict[str, Any]] = self.client.geocode(text)
        except googlemaps.exceptions.ApiError as e:
            logger.error(f"Google Maps API error while geocoding '{text}': {e}", exc_info=True)
            raise GeocodingError(f"API error during geocoding for '{text}': {e}") from e
        except (googlemaps.exceptions.TransportError, googlemaps.exceptions.Timeout) as e:
            logger.error(f"Transport error while geocoding '{text}': {e}", exc_info=True)
            raise GeocodingError(f"Transport error during geocoding for '{text}': {e}") from e

        coordinates = []
        try:
            for result in (results or [])[:max_results]:
                location_data = result["geometry"]["location"]
                coordinates.append(
                    Coordinate(latitude=location_data["lat"], longitude=location_data["lng"])
                )
        except Exception as e:
            logger.error(f"Unexpected geocoding response for '{text}': {e}", exc_info=True)
            raise GeocodingError(f"Unexpected geocoding response for '{text}': {e}") from e
        logger.debug(f"Geocoding '{text}' returned {len(coordinates)} coordinates")
        return coordinates
