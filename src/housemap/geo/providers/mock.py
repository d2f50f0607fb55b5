"""Mock geocoder with fixture addresses for development/testing."""

from __future__ import annotations

import asyncio

from housemap.core.config import GeocoderConfig
from housemap.core.types import Coordinate, GeocodingError
from housemap.geo.client import Geocoder

_FIXTURES: dict[str, tuple[float, float]] = {
    "1200 brickell ave, miami, fl 33131": (25.7634, -80.1913),
    "401 biscayne blvd, miami, fl 33132": (25.7781, -80.1868),
    "1500 ocean dr, miami beach, fl 33139": (25.7861, -80.1301),
    "600 congress ave, austin, tx 78701": (30.2687, -97.7426),
    "1 market st, san francisco, ca 94105": (37.7942, -122.3950),
    "350 5th ave, new york, ny 10118": (40.7484, -73.9857),
    "233 s wacker dr, chicago, il 60606": (41.8789, -87.6359),
    "123 main st, springfield, il 62701": (39.7817, -89.6501),
}


class MockGeocoder(Geocoder):
    """In-process geocoder backed by a fixture table.

    Addresses are matched case-insensitively. Tests can make the geocoder
    fail for specific addresses, make specific addresses hang until
    ``close()``, or gate every lookup until ``release()`` is called.
    """

    def __init__(
        self,
        config: GeocoderConfig | None = None,
        *,
        fixtures: dict[str, tuple[float, float]] | None = None,
        fail_for: set[str] | None = None,
        hang_for: set[str] | None = None,
        gated: bool = False,
        delay_seconds: float = 0.0,
    ) -> None:
        super().__init__(config or GeocoderConfig(provider="mock"))
        table = fixtures if fixtures is not None else _FIXTURES
        self._fixtures = {k.lower(): Coordinate(latitude=v[0], longitude=v[1]) for k, v in table.items()}
        self._fail_for = {a.lower() for a in (fail_for or set())}
        self._hang_for = {a.lower() for a in (hang_for or set())}
        self._closed = asyncio.Event()
        self._gate = asyncio.Event()
        if not gated:
            self._gate.set()
        self._delay = delay_seconds
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0

    def add(self, address: str, latitude: float, longitude: float) -> None:
        self._fixtures[address.lower()] = Coordinate(latitude=latitude, longitude=longitude)

    def release(self) -> None:
        """Let all gated lookups complete."""
        self._gate.set()

    async def forward_geocode(self, address: str) -> Coordinate | None:
        self.calls.append(address)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            key = address.lower()
            if key in self._hang_for:
                await self._closed.wait()
                return None
            await self._gate.wait()
            if self._delay:
                await asyncio.sleep(self._delay)
            if key in self._fail_for:
                raise GeocodingError(f"Simulated geocoding failure for {address!r}")
            return self._fixtures.get(key)
        finally:
            self.active -= 1

    async def close(self) -> None:
        self._closed.set()
