"""Map session: wires resolution, highlighting and the viewport together.

The session owns the state a map view renders from (working listing set,
device location, bookmarks) and recomputes the viewport on the events
that are allowed to move the camera:

- the highlight target changes;
- a precise coordinate for the current target lands far enough away;
- the device location becomes available;
- the listing set changes size while a highlight is pending.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import BaseModel

from housemap.core.config import Settings
from housemap.core.types import Coordinate
from housemap.geo.client import Geocoder, create_geocoder
from housemap.geo.locations import StaticLocationTable
from housemap.listings.models import Listing
from housemap.listings.store import ListingSource
from housemap.map.annotations import Annotation, build_annotations
from housemap.map.events import ClearMapHighlight, MapEventChannel, ReturnFromMap
from housemap.map.highlight import HighlightChange, HighlightCoordinator, HighlightState
from housemap.map.viewport import Viewport, ViewportController, ViewportSource
from housemap.resolution.cache import CoordinateCache
from housemap.resolution.models import ResolutionUpdate
from housemap.resolution.resolver import CoordinateResolver

logger = logging.getLogger(__name__)


class MapSnapshot(BaseModel):
    """Everything the map surface needs for one render pass."""

    viewport: Viewport
    annotations: list[Annotation]
    highlight: HighlightState


SnapshotListener = Callable[[MapSnapshot], None]
SelectionCallback = Callable[[Listing], None]


class MapSession:
    """Owns one map view's state and reacts to resolver and highlight changes."""

    def __init__(
        self,
        resolver: CoordinateResolver,
        coordinator: HighlightCoordinator,
        viewport: ViewportController,
        listing_source: ListingSource,
        channel: MapEventChannel,
        *,
        on_select: SelectionCallback | None = None,
    ) -> None:
        self._resolver = resolver
        self._coordinator = coordinator
        self._viewport = viewport
        self._source = listing_source
        self._channel = channel
        self._on_select = on_select
        self._user_location: Coordinate | None = None
        self._bookmarks: set[str] = set()
        self._listeners: list[SnapshotListener] = []
        self._unsubscribers = [
            resolver.subscribe(self._on_resolution),
            coordinator.subscribe(self._on_highlight),
        ]

    # -- accessors -----------------------------------------------------------

    @property
    def cache(self) -> CoordinateCache:
        return self._resolver.cache

    @property
    def resolver(self) -> CoordinateResolver:
        return self._resolver

    @property
    def coordinator(self) -> HighlightCoordinator:
        return self._coordinator

    @property
    def viewport_controller(self) -> ViewportController:
        return self._viewport

    @property
    def channel(self) -> MapEventChannel:
        return self._channel

    @property
    def highlight(self) -> HighlightState:
        return self._coordinator.state

    @property
    def listings(self) -> list[Listing]:
        return self._coordinator.working_set

    @property
    def user_location(self) -> Coordinate | None:
        return self._user_location

    @property
    def bookmarks(self) -> set[str]:
        return set(self._bookmarks)

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # -- inputs --------------------------------------------------------------

    async def load(self, state: str | None = None, search: str | None = None) -> list[Listing]:
        """Fetch listings and bookmarks from the data layer and refresh the map."""
        listings = await self._source.list_listings(state=state, search=search)
        bookmarks = await self._source.bookmarked_ids()
        self.refresh(listings, bookmarks)
        return self.listings

    def refresh(self, listings: list[Listing], bookmarks: set[str] | None = None) -> None:
        """Swap in a freshly loaded or refiltered listing set."""
        previous_size = len(self._coordinator.working_set)
        if bookmarks is not None:
            self._bookmarks = set(bookmarks)
        self._coordinator.set_listings(listings)
        working = self._coordinator.working_set
        self.cache.touch([l.id for l in working])
        self._resolver.resolve_many(working)

        highlight = self._coordinator.state
        if self._viewport.current is None:
            self._recompute()
        elif highlight.target_id is not None and len(working) != previous_size:
            self._recompute()
        self._publish()

    def set_user_location(self, location: Coordinate | None) -> None:
        first_fix = self._user_location is None and location is not None
        self._user_location = location
        if first_fix:
            logger.info("Device location available")
            self._recompute()
        self._publish()

    def set_bookmarks(self, bookmarks: set[str]) -> None:
        self._bookmarks = set(bookmarks)
        self._publish()

    def request_highlight(self, listing_id: str) -> None:
        self._coordinator.request_highlight(listing_id)

    def clear_highlight(self) -> None:
        self._coordinator.clear_highlight()

    # -- outputs -------------------------------------------------------------

    def render(self) -> MapSnapshot:
        viewport = self._viewport.current or self._recompute()
        annotations = build_annotations(
            self.listings,
            self.cache,
            self._coordinator.state,
            self._bookmarks,
            self._user_location,
        )
        return MapSnapshot(
            viewport=viewport,
            annotations=annotations,
            highlight=self._coordinator.state,
        )

    def tap(self, annotation_id: str) -> Listing | None:
        """Forward a pin tap to the selection callback. Returns the tapped listing."""
        for listing in self.listings:
            if listing.id == annotation_id:
                if self._on_select is not None:
                    self._on_select(listing)
                return listing
        return None

    def return_to_list(self, listing_id: str | None = None) -> None:
        """Leave the map: clear the highlight and tell the originating list where to scroll."""
        self._channel.publish(ClearMapHighlight())
        self._channel.publish(ReturnFromMap(listing_id=listing_id))

    async def aclose(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._coordinator.close()

    # -- reactions -----------------------------------------------------------

    def _recompute(self) -> Viewport:
        return self._viewport.recompute(
            self._coordinator.state,
            self._user_location,
            self._coordinator.working_set,
        )

    def _on_resolution(self, update: ResolutionUpdate) -> None:
        highlight = self._coordinator.state
        current = self._viewport.current
        if update.listing_id == highlight.target_id:
            if update.recenter:
                self._recompute()
        elif highlight.target_id is None and current is not None and current.source == ViewportSource.DEFAULT:
            working = self._coordinator.working_set
            if working and working[0].id == update.listing_id and update.coordinate is not None:
                self._recompute()
        self._publish()

    def _on_highlight(self, change: HighlightChange, state: HighlightState) -> None:
        if change != HighlightChange.LOADING_FINISHED:
            self._recompute()
        self._publish()

    def _publish(self) -> None:
        if not self._listeners:
            return
        snapshot = self.render()
        for listener in list(self._listeners):
            listener(snapshot)


def create_map_session(
    settings: Settings,
    listing_source: ListingSource,
    geocoder: Geocoder | None = None,
    channel: MapEventChannel | None = None,
    on_select: SelectionCallback | None = None,
) -> MapSession:
    """Build a fully wired MapSession from settings."""
    if geocoder is None:
        geocoder = create_geocoder(settings.geocoder)
    channel = channel or MapEventChannel()
    cache = CoordinateCache(max_entries=settings.cache.max_entries)
    table = StaticLocationTable(extra_path=settings.cache.extra_locations_path)
    resolver = CoordinateResolver(
        geocoder,
        cache,
        table,
        max_concurrency=settings.geocoder.max_concurrency,
        recenter_threshold_meters=settings.map.recenter_threshold_meters,
    )
    coordinator = HighlightCoordinator(
        resolver,
        listing_source,
        channel,
        timeout_seconds=settings.map.highlight_timeout_seconds,
    )
    viewport = ViewportController(cache, settings.map)
    return MapSession(resolver, coordinator, viewport, listing_source, channel, on_select=on_select)
