from threading import Lock
from typing import List, Optional
import logging

from taxometr.core.settings import Settings, get_settings
from taxometr.models.location import DEFAULT_LOCATION, Coordinate, MicroPoint
from taxometr.models.positioning import (
    GPS_PROVIDER,
    NETWORK_PROVIDER,
    PositionSession,
    ProviderChoice,
    ProviderCriteria,
)
from taxometr.repositories.base import (
    PositionConsumer,
    PositioningService,
    ProviderUnavailableError,
)

logger = logging.getLogger(__name__)

_CHOICES_BY_NAME = {
    GPS_PROVIDER: ProviderChoice.GPS,
    NETWORK_PROVIDER: ProviderChoice.NETWORK,
}


class LatestPosition:
    """Position consumer that keeps whichever update arrived last."""

    def __init__(self, initial: Optional[Coordinate] = None):
        self._lock = Lock()
        self._current = initial

    def update(self, coordinate: Coordinate) -> None:
        with self._lock:
            self._current = coordinate

    __call__ = update

    @property
    def current(self) -> Optional[Coordinate]:
        with self._lock:
            return self._current


class LocationResolver:
    """Chooses positioning providers and seeds the initial position."""

    def __init__(self, positioning: PositioningService, settings: Optional[Settings] = None):
        self.positioning = positioning
        self.settings = settings or get_settings()

    def select_provider(self, criteria: ProviderCriteria) -> ProviderChoice:
        name = self.positioning.get_best_provider(criteria, enabled_only=True)
        choice = _CHOICES_BY_NAME.get(name, ProviderChoice.NONE)
        if choice is ProviderChoice.NONE or not self.positioning.is_provider_enabled(name):
            logger.warning(f"No usable positioning provider for {criteria} (best match: {name})")
            return ProviderChoice.NONE
        logger.debug(f"Selected positioning provider '{name}' for {criteria}")
        return choice

    def last_known_or_default(self, choice: ProviderChoice) -> Coordinate:
        """Last cached fix of the provider, DEFAULT_LOCATION when there is none."""
        if choice is ProviderChoice.NONE:
            return DEFAULT_LOCATION
        location = self.positioning.get_last_known_location(choice.value)
        if location is None:
            logger.debug(f"No last known location from '{choice.value}', using default")
            return DEFAULT_LOCATION
        return location

    def last_known_point(self, choice: ProviderChoice) -> MicroPoint:
        return MicroPoint.from_coordinate(self.last_known_or_default(choice))

    def request_updates(
        self, choice: ProviderChoice, consumer: PositionConsumer
    ) -> List[ProviderChoice]:
        """Subscribe ``consumer`` to the chosen provider.

        When the primary provider is not the network one, the network
        provider is subscribed as well. Both feeds drive the same consumer
        and the last update wins regardless of source. Returns the
        subscribed providers in subscription order.
        """
        if choice is ProviderChoice.NONE:
            raise ProviderUnavailableError("No positioning provider available")

        subscriptions = [choice]
        if choice is not ProviderChoice.NETWORK and NETWORK_PROVIDER in self.positioning.get_providers():
            subscriptions.append(ProviderChoice.NETWORK)

        for provider in subscriptions:
            self.positioning.request_location_updates(
                provider.value,
                self.settings.MIN_UPDATE_TIME_MS,
                self.settings.MIN_DISTANCE_M,
                consumer,
            )
            logger.info(f"Subscribed to location updates from '{provider.value}'")
        return subscriptions

    def start_session(
        self, criteria: ProviderCriteria, consumer: PositionConsumer
    ) -> PositionSession:
        choice = self.select_provider(criteria)
        if choice is ProviderChoice.NONE:
            raise ProviderUnavailableError(f"No positioning provider matches {criteria}")

        initial = self.last_known_point(choice)
        subscriptions = self.request_updates(choice, consumer)
        return PositionSession(
            provider=choice,
            initial_position=initial,
            subscriptions=subscriptions,
        )

    def stop_updates(self, consumer: PositionConsumer) -> None:
        self.positioning.remove_updates(consumer)

    def is_location_available(self) -> bool:
        return any(
            self.positioning.is_provider_enabled(name)
            for name in (GPS_PROVIDER, NETWORK_PROVIDER)
        )
