from typing import Optional

from taxometr.core.settings import get_settings
from taxometr.models.location import Coordinate


def _format_degrees(value: float) -> str:
    # Shortest round-trip form: 30.3 -> "30.3", 50.0 -> "50.0"
    return repr(float(value))


def build_route_url(
    origin: Coordinate,
    destination: Coordinate,
    language_tag: str,
    host: Optional[str] = None,
    output_format: Optional[str] = None,
) -> str:
    """Build the driving directions URL for the routing service.

    Parameter order and the literal ``f=d``, ``ie=UTF8``, ``0`` and ``om=0``
    tokens are what the routing service expects, so the string is assembled
    by hand rather than through ``urlencode``. The language tag is passed
    through verbatim.
    """
    settings = get_settings()
    host = host or settings.ROUTING_HOST
    output_format = output_format or settings.ROUTE_OUTPUT_FORMAT

    return (
        f"http://{host}/maps?f=d&hl={language_tag}"
        f"&saddr={_format_degrees(origin.latitude)},{_format_degrees(origin.longitude)}"
        f"&daddr={_format_degrees(destination.latitude)},{_format_degrees(destination.longitude)}"
        f"&ie=UTF8&0&om=0&output={output_format}"
    )
