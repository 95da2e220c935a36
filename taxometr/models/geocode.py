from typing import Literal, Union
from pydantic import BaseModel, ConfigDict, Field

from taxometr.models.location import Coordinate


class ByCoordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["coordinate"] = "coordinate"
    coordinate: Coordinate


class ByAddressText(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["address"] = "address"
    text: str = Field(..., min_length=1)


GeocodeRequest = Union[ByCoordinate, ByAddressText]
