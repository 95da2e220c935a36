from enum import Enum
from typing import List
from pydantic import BaseModel, ConfigDict

from taxometr.models.location import MicroPoint

GPS_PROVIDER = "gps"
NETWORK_PROVIDER = "network"


class ProviderChoice(str, Enum):
    GPS = GPS_PROVIDER
    NETWORK = NETWORK_PROVIDER
    NONE = "none"


class ProviderCriteria(BaseModel):
    model_config = ConfigDict(frozen=True)

    high_accuracy: bool = True
    power_sensitive: bool = False


class PositionSession(BaseModel):
    provider: ProviderChoice
    initial_position: MicroPoint
    subscriptions: List[ProviderChoice]
