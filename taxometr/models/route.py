from typing import Tuple
from pydantic import BaseModel, ConfigDict, Field

from taxometr.models.location import MicroPoint


class Placemark(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    description: str = ""
    point: MicroPoint


class Route(BaseModel):
    """Parsed driving route. An empty route means no route was found."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Name of the route placemark")
    description: str = Field(default="", description="Route summary, e.g. distance and duration")
    waypoints: Tuple[MicroPoint, ...] = Field(default_factory=tuple)
    placemarks: Tuple[Placemark, ...] = Field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.waypoints
