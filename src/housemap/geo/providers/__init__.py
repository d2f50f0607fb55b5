"""Provider registry for geocoding backends."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from housemap.geo.client import Geocoder

from housemap.geo.providers.mock import MockGeocoder
from housemap.geo.providers.nominatim import NominatimGeocoder

PROVIDER_REGISTRY: dict[str, type[Geocoder]] = {
    "mock": MockGeocoder,
    "nominatim": NominatimGeocoder,
}

__all__ = ["PROVIDER_REGISTRY", "MockGeocoder", "NominatimGeocoder"]
