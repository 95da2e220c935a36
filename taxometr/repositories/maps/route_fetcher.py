import asyncio
from typing import Optional
import aiohttp
import logging

from taxometr.core.settings import get_settings
from taxometr.models.location import Coordinate
from taxometr.models.route import Route
from taxometr.repositories.base import DirectionsError
from taxometr.repositories.maps.kml_parser import parse_route_bytes
from taxometr.repositories.maps.route_url import build_route_url

logger = logging.getLogger(__name__)


class RouteRepository:
    """Fetches KML driving routes from the routing service."""

    def __init__(
        self,
        host: Optional[str] = None,
        output_format: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.host = host or settings.ROUTING_HOST
        self.output_format = output_format or settings.ROUTE_OUTPUT_FORMAT
        self.timeout = timeout if timeout is not None else settings.ROUTE_FETCH_TIMEOUT

    def build_url(self, origin: Coordinate, destination: Coordinate, language: str) -> str:
        return build_route_url(
            origin,
            destination,
            language,
            host=self.host,
            output_format=self.output_format,
        )

    async def _fetch(self, url: str) -> bytes:
        """Make request to the routing service and return the raw document."""
        client_timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=client_timeout) as session:
            async with session.get(url) as response:
                response.raise_for_status()
                return await response.read()

    async def get_route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        language: str,
        strict: bool = False,
    ) -> Route:
        """Get the driving route between two points.

        Transport failures raise DirectionsError. A document that cannot be
        parsed yields an empty Route.
        """
        url = self.build_url(origin, destination, language)
        logger.info(f"Requesting route: {url}")
        try:
            document = await self._fetch(url)
        except aiohttp.ClientError as e:
            logger.error(f"Routing service error for {url}: {e}", exc_info=True)
            raise DirectionsError(f"Routing service error: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error(f"Routing service timed out after {self.timeout}s for {url}")
            raise DirectionsError(f"Routing service timed out after {self.timeout}s") from e

        route = parse_route_bytes(document, strict=strict)
        if route.is_empty:
            logger.warning(f"No route found in routing service response for {url}")
        else:
            logger.info(f"Route '{route.name}' parsed with {len(route.waypoints)} waypoints")
        return route
