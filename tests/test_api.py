import pytest
from fastapi.testclient import TestClient

from taxometr.api.dependencies import get_geocode_executor, get_route_repository
from taxometr.main import app
from taxometr.models.address import Address
from taxometr.models.location import Coordinate
from taxometr.services.geocoding import GeocodeExecutor
from tests.conftest import FakeGeocodingProvider
from tests.test_route_fetcher import ROUTE_KML, StubRouteRepository

ROUTE_QUERY = {"from_lat": 30.3, "from_lng": 50.27, "to_lat": 30.4, "to_lng": 50.3}


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def use_provider(provider):
    app.dependency_overrides[get_geocode_executor] = lambda: GeocodeExecutor(provider, timeout=1.0)


def use_routes(repository):
    app.dependency_overrides[get_route_repository] = lambda: repository


def test_welcome(client):
    response = client.get("/api/v1")

    assert response.status_code == 200
    assert response.json()["version"] == "1.0.0"


def test_route_url(client):
    use_routes(StubRouteRepository())

    response = client.get("/api/v1/maps/route-url", params={**ROUTE_QUERY, "lang": "en"})

    assert response.status_code == 200
    assert response.json()["url"].endswith(
        "saddr=30.3,50.27&daddr=30.4,50.3&ie=UTF8&0&om=0&output=kml"
    )


def test_route(client):
    use_routes(StubRouteRepository(document=ROUTE_KML))

    response = client.get("/api/v1/maps/route", params=ROUTE_QUERY)

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Route"
    assert body["waypoints"][0] == {"lat_e6": 30300000, "lon_e6": 50270000}


def test_route_service_unavailable(client):
    import aiohttp

    use_routes(StubRouteRepository(error=aiohttp.ClientConnectionError("refused")))

    response = client.get("/api/v1/maps/route", params=ROUTE_QUERY)

    assert response.status_code == 503


def test_route_rejects_invalid_latitude(client):
    use_routes(StubRouteRepository())

    response = client.get("/api/v1/maps/route", params={**ROUTE_QUERY, "from_lat": 120})

    assert response.status_code == 422


def test_address(client):
    use_provider(FakeGeocodingProvider(addresses=[Address(lines=["123 Main St", None, "Springfield"])]))

    response = client.get("/api/v1/maps/address", params={"latitude": 39.78, "longitude": -89.65})

    assert response.status_code == 200
    assert response.json()["address"] == "123 Main St, Springfield"


def test_address_not_found(client):
    use_provider(FakeGeocodingProvider())

    response = client.get("/api/v1/maps/address", params={"latitude": 0, "longitude": 0})

    assert response.status_code == 404


def test_coordinates(client):
    use_provider(FakeGeocodingProvider(coordinates=[Coordinate(latitude=50.4501, longitude=30.5234)]))

    response = client.get("/api/v1/maps/coordinates", params={"address": "Kyiv"})

    assert response.status_code == 200
    assert response.json()["point"] == {"lat_e6": 50450100, "lon_e6": 30523400}


def test_coordinates_provider_failure_is_not_found(client, failing_provider):
    use_provider(failing_provider)

    response = client.get("/api/v1/maps/coordinates", params={"address": "Kyiv"})

    assert response.status_code == 404
