"""Streaming parser for KML route documents.

The routing service answers a directions request with a KML document. The
driving path is the ``<coordinates>`` text of a ``<LineString>``: points are
separated by whitespace and each point is a ``lon,lat[,alt]`` triplet. Step
markers are ``<Placemark>`` elements holding a ``<Point>``.

The document is read in chunks through an incremental pull parser and every
element is cleared once handled, so long routes never load as a full tree.
"""
import io
import logging
from enum import Enum
from typing import BinaryIO, Iterable, List, Optional, Tuple
from xml.etree.ElementTree import Element, ParseError, XMLPullParser

from taxometr.models.location import MicroPoint
from taxometr.models.route import Placemark, Route

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 16 * 1024

POINT_SEPARATOR = None  # any run of whitespace
FIELD_SEPARATOR = ","


class ParserState(Enum):
    IDLE = "idle"
    IN_ROUTE_GEOMETRY = "in_route_geometry"


class MalformedPointError(ValueError):
    """A coordinate tuple that cannot be turned into a waypoint."""
    pass


def _local_name(tag: str) -> str:
    # KML 2.0, 2.1 and 2.2 only differ by namespace
    return tag.rsplit("}", 1)[-1]


def parse_point(token: str) -> MicroPoint:
    """Convert one ``lon,lat[,alt]`` token into a MicroPoint."""
    fields = token.split(FIELD_SEPARATOR)
    if len(fields) < 2:
        raise MalformedPointError(f"Expected 'lon,lat[,alt]', got '{token}'")
    try:
        longitude = float(fields[0])
        latitude = float(fields[1])
        return MicroPoint.from_degrees(latitude, longitude)
    except (ValueError, OverflowError) as e:
        raise MalformedPointError(f"Invalid point '{token}': {e}") from e


class _PlacemarkBuilder:
    def __init__(self):
        self.name = ""
        self.description = ""
        self.point: Optional[MicroPoint] = None
        self.has_route_geometry = False


class RouteDocumentHandler:
    """Event handler turning start/end element events into a Route.

    ``strict`` controls what happens on a malformed point: the lenient
    default drops that point and keeps going, strict mode stops reading the
    document and keeps the waypoints collected so far.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.state = ParserState.IDLE
        self.stopped = False
        self.dropped_points = 0
        self._name = ""
        self._description = ""
        self._waypoints: List[MicroPoint] = []
        self._placemarks: List[Placemark] = []
        self._open_tags: List[str] = []
        self._placemark: Optional[_PlacemarkBuilder] = None

    def consume(self, events: Iterable[Tuple[str, Element]]) -> None:
        for event, element in events:
            if self.stopped:
                return
            tag = _local_name(element.tag)
            if event == "start":
                self._start(tag)
            else:
                self._end(tag, element.text or "")
                element.clear()

    def _parent(self) -> Optional[str]:
        return self._open_tags[-1] if self._open_tags else None

    def _start(self, tag: str) -> None:
        parent = self._parent()
        self._open_tags.append(tag)

        if tag == "Placemark":
            self._placemark = _PlacemarkBuilder()
        elif tag == "coordinates" and parent == "LineString":
            self.state = ParserState.IN_ROUTE_GEOMETRY
            if self._placemark is not None:
                self._placemark.has_route_geometry = True

    def _end(self, tag: str, text: str) -> None:
        self._open_tags.pop()
        parent = self._parent()

        if tag == "coordinates" and self.state is ParserState.IN_ROUTE_GEOMETRY:
            self.state = ParserState.IDLE
            self._emit_waypoints(text)
        elif tag == "coordinates" and parent == "Point" and self._placemark is not None:
            self._placemark.point = self._first_point(text)
        elif tag in ("name", "description") and parent == "Placemark" and self._placemark is not None:
            setattr(self._placemark, tag, text.strip())
        elif tag == "Placemark" and self._placemark is not None:
            self._finish_placemark(self._placemark)
            self._placemark = None

    def _emit_waypoints(self, text: str) -> None:
        for token in text.split(POINT_SEPARATOR):
            try:
                self._waypoints.append(parse_point(token))
            except MalformedPointError as e:
                self.dropped_points += 1
                if self.strict:
                    logger.warning(f"Stopping route parse at malformed point: {e}")
                    self.stopped = True
                    return
                logger.debug(f"Skipping malformed route point: {e}")

    def _first_point(self, text: str) -> Optional[MicroPoint]:
        tokens = text.split(POINT_SEPARATOR)
        if not tokens:
            return None
        try:
            return parse_point(tokens[0])
        except MalformedPointError as e:
            logger.debug(f"Skipping placemark with malformed point: {e}")
            return None

    def _finish_placemark(self, placemark: _PlacemarkBuilder) -> None:
        if placemark.has_route_geometry:
            self._name = placemark.name
            self._description = placemark.description
        elif placemark.point is not None:
            self._placemarks.append(
                Placemark(
                    name=placemark.name,
                    description=placemark.description,
                    point=placemark.point,
                )
            )

    def build_route(self) -> Route:
        if self.stopped and self._placemark is not None:
            self._finish_placemark(self._placemark)
            self._placemark = None
        return Route(
            name=self._name,
            description=self._description,
            waypoints=tuple(self._waypoints),
            placemarks=tuple(self._placemarks),
        )


def parse_route(
    stream: BinaryIO,
    strict: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Route:
    """Parse a KML route document into a Route.

    Never raises. Malformed XML and read failures are logged and produce an
    empty Route, so callers see the same value as for a document without a
    route.
    """
    handler = RouteDocumentHandler(strict=strict)
    parser = XMLPullParser(events=("start", "end"))
    while not handler.stopped:
        try:
            chunk = stream.read(chunk_size)
        except Exception as e:
            logger.error(f"Failed to read route document: {e!r}", exc_info=True)
            return Route()
        try:
            if not chunk:
                parser.close()
                handler.consume(parser.read_events())
                break
            parser.feed(chunk)
            handler.consume(parser.read_events())
        except ParseError as e:
            logger.error(f"Malformed route document: {e}")
            return Route()
        except (TypeError, UnicodeError) as e:
            logger.error(f"Undecodable route document: {e}", exc_info=True)
            return Route()

    route = handler.build_route()
    logger.debug(
        f"Parsed route '{route.name}' with {len(route.waypoints)} waypoints, "
        f"{len(route.placemarks)} placemarks, {handler.dropped_points} dropped points"
    )
    return route


def parse_route_bytes(data: bytes, strict: bool = False) -> Route:
    return parse_route(io.BytesIO(data), strict=strict)
