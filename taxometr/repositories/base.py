from typing import Callable, List, Optional, Protocol

from taxometr.models.address import Address
from taxometr.models.location import Coordinate
from taxometr.models.positioning import ProviderCriteria


# Custom Exception Hierarchy
class MapsServiceError(Exception):
    """Base class for map service errors."""
    pass

class GeocodingError(MapsServiceError):
    """Error during geocoding."""
    pass

class ReverseGeocodingError(MapsServiceError):
    """Error during reverse geocoding."""
    pass

class DirectionsError(MapsServiceError):
    """Error retrieving directions."""
    pass

class ProviderUnavailableError(Exception):
    """No positioning provider matches the requested criteria."""
    pass


PositionConsumer = Callable[[Coordinate], None]


class GeocodingProvider(Protocol):
    """External geocoding capability. Results are ranked, best match first."""

    def lookup_by_coordinate(
        self, latitude: float, longitude: float, max_results: int
    ) -> List[Address]:
        ...

    def lookup_by_text(self, text: str, max_results: int) -> List[Coordinate]:
        ...


class PositioningService(Protocol):
    """Platform positioning capability (GPS and network providers)."""

    def get_providers(self) -> List[str]:
        ...

    def get_best_provider(
        self, criteria: ProviderCriteria, enabled_only: bool = True
    ) -> Optional[str]:
        ...

    def is_provider_enabled(self, name: str) -> bool:
        ...

    def request_location_updates(
        self,
        name: str,
        min_time_ms: int,
        min_distance_m: int,
        consumer: PositionConsumer,
    ) -> None:
        ...

    def remove_updates(self, consumer: PositionConsumer) -> None:
        ...

    def get_last_known_location(self, name: str) -> Optional[Coordinate]:
        ...
