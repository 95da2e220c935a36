from typing import List, Optional
from pydantic import BaseModel, Field

from taxometr.models.location import Coordinate, MicroPoint


class RouteUrlResponse(BaseModel):
    url: str


class AddressResponse(BaseModel):
    address: str = Field(..., description="Address lines joined with ', '")
    lines: List[Optional[str]] = Field(default_factory=list)


class CoordinatesResponse(BaseModel):
    coordinate: Coordinate
    point: MicroPoint = Field(..., description="Coordinate in integer microdegrees")
