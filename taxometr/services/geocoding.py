from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional, Union
import logging

from taxometr.core.settings import get_settings
from taxometr.models.address import Address, render_address
from taxometr.models.geocode import ByAddressText, ByCoordinate, GeocodeRequest
from taxometr.models.location import Coordinate, MicroPoint
from taxometr.repositories.base import GeocodingProvider, MapsServiceError

logger = logging.getLogger(__name__)

# Only the best match is ever used
MAX_RESULTS = 1

GeocodeResult = Union[Address, Coordinate]


def _describe(request: GeocodeRequest) -> str:
    if isinstance(request, ByCoordinate):
        return f"({request.coordinate.latitude}, {request.coordinate.longitude})"
    if isinstance(request, ByAddressText):
        return f"'{request.text}'"
    return repr(request)


class GeocodeExecutor:
    """Runs geocoding lookups off the caller's thread.

    Every call gets its own worker thread; lookups are never pooled or
    coalesced, so identical concurrent requests run independently. Timeouts,
    cancellation, provider failures and "no match" all come back as ``None``.
    """

    def __init__(self, provider: GeocodingProvider, timeout: Optional[float] = None):
        self.provider = provider
        self.timeout = timeout if timeout is not None else get_settings().GEOCODE_TIMEOUT

    def _lookup(self, request: GeocodeRequest) -> Optional[GeocodeResult]:
        if isinstance(request, ByCoordinate):
            results = self.provider.lookup_by_coordinate(
                request.coordinate.latitude, request.coordinate.longitude, MAX_RESULTS
            )
        elif isinstance(request, ByAddressText):
            results = self.provider.lookup_by_text(request.text, MAX_RESULTS)
        else:
            raise TypeError(f"Unsupported geocode request: {request!r}")

        if not results:
            logger.info(f"No geocoding match for {_describe(request)}")
            return None
        return results[0]

    def _submit(self, request: GeocodeRequest) -> Future:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="geocode")
        try:
            return executor.submit(self._lookup, request)
        finally:
            # The submitted lookup keeps running; this only releases the executor
            executor.shutdown(wait=False)

    def resolve(
        self, request: GeocodeRequest, timeout: Optional[float] = None
    ) -> Optional[GeocodeResult]:
        """Run one lookup and wait for it.

        With ``timeout`` the wait is bounded and the lookup is cancelled once
        it expires; cancellation is best effort and a provider call already
        in flight may keep running. Without ``timeout`` the wait is unbounded.
        """
        future = self._submit(request)
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            future.cancel()
            logger.debug(f"Geocoding {_describe(request)} timed out after {timeout}s")
        except CancelledError:
            logger.debug(f"Geocoding {_describe(request)} was cancelled")
        except MapsServiceError as e:
            logger.warning(f"Geocoding provider failed for {_describe(request)}: {e}")
        except Exception as e:
            logger.error(f"Unexpected error while geocoding {_describe(request)}: {e}", exc_info=True)
        return None

    def address_for(
        self, coordinate: Coordinate, timeout: Optional[float] = None
    ) -> Optional[Address]:
        """Best matching address, waiting at most ``timeout`` (default 5s)."""
        return self.resolve(
            ByCoordinate(coordinate=coordinate),
            timeout=timeout if timeout is not None else self.timeout,
        )

    def address_string_for(self, coordinate: Coordinate) -> str:
        """Rendered address without a deadline; empty string when unresolved."""
        return render_address(self.resolve(ByCoordinate(coordinate=coordinate)))

    def address_string_for_point(self, point: MicroPoint) -> str:
        return self.address_string_for(point.to_coordinate())

    def coordinates_for(
        self, text: str, timeout: Optional[float] = None
    ) -> Optional[Coordinate]:
        return self.resolve(ByAddressText(text=text), timeout=timeout)

    def point_for_address(
        self, text: str, timeout: Optional[float] = None
    ) -> Optional[MicroPoint]:
        coordinate = self.coordinates_for(text, timeout=timeout)
        if coordinate is None:
            return None
        return MicroPoint.from_coordinate(coordinate)
