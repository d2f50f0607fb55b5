"""Abstract forward-geocoding client and factory function."""

from __future__ import annotations

import abc

from housemap.core.config import GeocoderConfig
from housemap.core.types import Coordinate


class Geocoder(abc.ABC):
    """Abstract base class for forward-geocoding providers."""

    def __init__(self, config: GeocoderConfig) -> None:
        self.config = config

    @abc.abstractmethod
    async def forward_geocode(self, address: str) -> Coordinate | None:
        """Resolve a free-form address to a coordinate.

        Returns None when the service answers but has no (or no unambiguous)
        match. Raises GeocodingError when the service itself fails.
        """

    async def close(self) -> None:
        """Clean up resources. Override if the provider holds connections."""


def create_geocoder(config: GeocoderConfig) -> Geocoder:
    """Factory: select and instantiate a geocoder based on config.provider."""

    from housemap.geo.providers import PROVIDER_REGISTRY

    provider = config.provider.lower()
    if provider not in PROVIDER_REGISTRY:
        available = ", ".join(sorted(PROVIDER_REGISTRY))
        raise ValueError(
            f"Unknown geocoder provider {config.provider!r}. "
            f"Available: {available}"
        )

    cls = PROVIDER_REGISTRY[provider]
    return cls(config)
