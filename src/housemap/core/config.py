"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class GeocoderConfig(BaseSettings):
    """Forward-geocoding provider configuration."""

    model_config = {"env_prefix": "HOUSEMAP_GEOCODER_"}

    provider: str = "mock"
    base_url: str = "https://nominatim.openstreetmap.org"
    user_agent: str = "housemap/0.1 (listing map geocoder)"
    timeout_seconds: float = 8.0
    max_concurrency: int = 8
    country_codes: str = "us"


class MapConfig(BaseSettings):
    """Viewport and highlight configuration."""

    model_config = {"env_prefix": "HOUSEMAP_MAP_"}

    highlight_timeout_seconds: float = 3.0
    recenter_threshold_meters: float = 100.0

    close_span_degrees: float = 0.01
    medium_span_degrees: float = 0.25
    wide_span_degrees: float = 2.0

    # Contiguous United States
    default_center_latitude: float = 39.8283
    default_center_longitude: float = -98.5795
    default_latitude_span: float = 30.0
    default_longitude_span: float = 60.0


class CacheConfig(BaseSettings):
    """Coordinate cache and static location table configuration."""

    model_config = {"env_prefix": "HOUSEMAP_CACHE_"}

    max_entries: int = 2000
    extra_locations_path: str | None = None


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "HOUSEMAP_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    geocoder: GeocoderConfig = Field(default_factory=GeocoderConfig)
    map: MapConfig = Field(default_factory=MapConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
