from pydantic import BaseModel, ConfigDict, Field

# GeoPoint-style integer coordinates are stored in microdegrees
MICRODEGREES = 1_000_000


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class MicroPoint(BaseModel):
    """Coordinate encoded as integer microdegrees.

    Conversion from degrees multiplies by 1e6 and truncates toward zero, it
    never rounds: ``30.9999995`` becomes ``30999999``.
    """

    model_config = ConfigDict(frozen=True)

    lat_e6: int = Field(..., ge=-90 * MICRODEGREES, le=90 * MICRODEGREES)
    lon_e6: int = Field(..., ge=-180 * MICRODEGREES, le=180 * MICRODEGREES)

    @classmethod
    def from_degrees(cls, latitude: float, longitude: float) -> "MicroPoint":
        return cls(
            lat_e6=int(latitude * MICRODEGREES),
            lon_e6=int(longitude * MICRODEGREES),
        )

    @classmethod
    def from_coordinate(cls, coordinate: Coordinate) -> "MicroPoint":
        return cls.from_degrees(coordinate.latitude, coordinate.longitude)

    def to_coordinate(self) -> Coordinate:
        return Coordinate(
            latitude=self.lat_e6 / MICRODEGREES,
            longitude=self.lon_e6 / MICRODEGREES,
        )


# Used when a provider has no cached fix yet
DEFAULT_LOCATION = Coordinate(latitude=30.30, longitude=50.27)
