import aiohttp
import pytest

from taxometr.models.location import Coordinate, MicroPoint
from taxometr.repositories.base import DirectionsError
from taxometr.repositories.maps.route_fetcher import RouteRepository

ORIGIN = Coordinate(latitude=30.30, longitude=50.27)
DESTINATION = Coordinate(latitude=30.40, longitude=50.30)

ROUTE_KML = b"""<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://earth.google.com/kml/2.0"><Document>
<Placemark><name>Route</name><description>Distance: 11 km</description>
<GeometryCollection><LineString><coordinates>50.27,30.3,0 50.3,30.4,0</coordinates></LineString></GeometryCollection>
</Placemark></Document></kml>"""


class StubRouteRepository(RouteRepository):
    def __init__(self, document=b"", error=None):
        super().__init__(host="maps.example.com")
        self.document = document
        self.error = error
        self.requested = []

    async def _fetch(self, url):
        self.requested.append(url)
        if self.error:
            raise self.error
        return self.document


@pytest.mark.asyncio
async def test_get_route_fetches_built_url_and_parses():
    repository = StubRouteRepository(document=ROUTE_KML)

    route = await repository.get_route(ORIGIN, DESTINATION, "uk")

    assert repository.requested == [
        "http://maps.example.com/maps?f=d&hl=uk&saddr=30.3,50.27&daddr=30.4,50.3&ie=UTF8&0&om=0&output=kml"
    ]
    assert route.name == "Route"
    assert list(route.waypoints) == [
        MicroPoint(lat_e6=30300000, lon_e6=50270000),
        MicroPoint(lat_e6=30400000, lon_e6=50300000),
    ]


@pytest.mark.asyncio
async def test_unparseable_response_is_empty_route():
    repository = StubRouteRepository(document=b"<html><body>Service unavailable")

    route = await repository.get_route(ORIGIN, DESTINATION, "en")

    assert route.is_empty


@pytest.mark.asyncio
async def test_transport_error_raises_directions_error():
    repository = StubRouteRepository(error=aiohttp.ClientConnectionError("refused"))

    with pytest.raises(DirectionsError):
        await repository.get_route(ORIGIN, DESTINATION, "en")


def test_repository_defaults_from_settings():
    repository = RouteRepository()

    assert repository.host == "maps.google.com"
    assert repository.output_format == "kml"
    assert repository.timeout == 30.0


def test_explicit_zero_timeout_is_kept():
    assert RouteRepository(timeout=0).timeout == 0
