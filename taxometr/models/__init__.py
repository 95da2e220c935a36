from taxometr.models.address import Address, render_address
from taxometr.models.geocode import ByAddressText, ByCoordinate, GeocodeRequest
from taxometr.models.location import DEFAULT_LOCATION, Coordinate, MicroPoint
from taxometr.models.positioning import PositionSession, ProviderChoice, ProviderCriteria
from taxometr.models.route import Placemark, Route

__all__ = [
    "Address",
    "render_address",
    "ByAddressText",
    "ByCoordinate",
    "GeocodeRequest",
    "DEFAULT_LOCATION",
    "Coordinate",
    "MicroPoint",
    "PositionSession",
    "ProviderChoice",
    "ProviderCriteria",
    "Placemark",
    "Route",
]
