"""Viewport (map region) computation.

Priority, first match wins:

1. the highlight target's cached coordinate, close-up;
2. the device location, neighborhood scale;
3. the first listing's cached coordinate, wide;
4. the configured default region.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from enum import StrEnum

from pydantic import BaseModel

from housemap.core.config import MapConfig
from housemap.core.types import Coordinate
from housemap.listings.models import Listing
from housemap.map.highlight import HighlightState
from housemap.resolution.cache import CoordinateCache

logger = logging.getLogger(__name__)


class ViewportSource(StrEnum):
    HIGHLIGHT = "highlight"
    USER_LOCATION = "user_location"
    FIRST_LISTING = "first_listing"
    DEFAULT = "default"


class Viewport(BaseModel):
    """Map center and span in degrees."""

    model_config = {"frozen": True}

    center: Coordinate
    latitude_span: float
    longitude_span: float
    source: ViewportSource
    listing_id: str | None = None


def compute_region(
    highlight: HighlightState,
    user_location: Coordinate | None,
    listings: Sequence[Listing],
    cache: CoordinateCache,
    config: MapConfig | None = None,
) -> Viewport:
    config = config or MapConfig()

    if highlight.target_id is not None:
        entry = cache.get(highlight.target_id)
        if entry is not None:
            span = config.close_span_degrees
            return Viewport(
                center=entry.coordinate,
                latitude_span=span,
                longitude_span=span,
                source=ViewportSource.HIGHLIGHT,
                listing_id=highlight.target_id,
            )

    if user_location is not None:
        span = config.medium_span_degrees
        return Viewport(
            center=user_location,
            latitude_span=span,
            longitude_span=span,
            source=ViewportSource.USER_LOCATION,
        )

    if listings:
        first = listings[0]
        entry = cache.get(first.id)
        if entry is not None:
            span = config.wide_span_degrees
            return Viewport(
                center=entry.coordinate,
                latitude_span=span,
                longitude_span=span,
                source=ViewportSource.FIRST_LISTING,
                listing_id=first.id,
            )

    return Viewport(
        center=Coordinate(
            latitude=config.default_center_latitude,
            longitude=config.default_center_longitude,
        ),
        latitude_span=config.default_latitude_span,
        longitude_span=config.default_longitude_span,
        source=ViewportSource.DEFAULT,
    )


CameraListener = Callable[[Viewport], None]


class ViewportController:
    """Holds the last computed viewport and announces camera moves."""

    def __init__(self, cache: CoordinateCache, config: MapConfig | None = None) -> None:
        self._cache = cache
        self._config = config or MapConfig()
        self._current: Viewport | None = None
        self._listeners: list[CameraListener] = []

    @property
    def current(self) -> Viewport | None:
        return self._current

    def subscribe(self, listener: CameraListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def recompute(
        self,
        highlight: HighlightState,
        user_location: Coordinate | None,
        listings: Sequence[Listing],
    ) -> Viewport:
        """Recompute the region; listeners hear about it only if it changed."""
        viewport = compute_region(highlight, user_location, listings, self._cache, self._config)
        if viewport != self._current:
            logger.debug("Camera -> %s (%s)", viewport.center, viewport.source)
            self._current = viewport
            for listener in list(self._listeners):
                listener(viewport)
        return viewport
