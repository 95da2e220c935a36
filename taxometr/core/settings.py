from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # API Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Routing service
    ROUTING_HOST: str = "maps.google.com"
    ROUTE_OUTPUT_FORMAT: str = "kml"
    DEFAULT_LANGUAGE: str = "en"
    ROUTE_FETCH_TIMEOUT: float = 30.0  # seconds

    # Geocoding
    GOOGLE_MAPS_API_KEY: Optional[str] = None
    GEOCODE_TIMEOUT: float = 5.0  # seconds

    # Positioning
    MIN_UPDATE_TIME_MS: int = 3000
    MIN_DISTANCE_M: int = 10

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
