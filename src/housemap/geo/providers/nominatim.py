"""Nominatim (OpenStreetMap) forward-geocoding provider."""

from __future__ import annotations

import logging

import httpx

from housemap.core.config import GeocoderConfig
from housemap.core.types import Coordinate, GeocodingError
from housemap.geo.client import Geocoder

logger = logging.getLogger(__name__)


class NominatimGeocoder(Geocoder):
    """Talks to a Nominatim-compatible ``/search`` endpoint."""

    def __init__(self, config: GeocoderConfig) -> None:
        super().__init__(config)
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout_seconds),
            headers={"User-Agent": config.user_agent},
        )

    # -- public API ----------------------------------------------------------

    async def forward_geocode(self, address: str) -> Coordinate | None:
        params = {
            "q": address,
            "format": "json",
            "limit": 1,
        }
        if self.config.country_codes:
            params["countrycodes"] = self.config.country_codes

        try:
            resp = await self._http.get("/search", params=params)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as exc:
            raise GeocodingError(f"Nominatim request failed for {address!r}: {exc}") from exc
        except ValueError as exc:
            raise GeocodingError(f"Nominatim returned invalid JSON for {address!r}") from exc

        if not isinstance(data, list):
            raise GeocodingError(f"Unexpected Nominatim payload for {address!r}")
        if not data:
            logger.debug("No Nominatim result for %r", address)
            return None

        try:
            return Coordinate(latitude=float(data[0]["lat"]), longitude=float(data[0]["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodingError(f"Malformed Nominatim result for {address!r}") from exc

    async def close(self) -> None:
        await self._http.aclose()
