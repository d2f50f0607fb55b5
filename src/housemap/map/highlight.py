"""Highlight coordination: one prioritized listing at a time.

A highlight request invalidates the listing's cached coordinate, resolves
it with priority, and raises a loading flag that is force-cleared after a
fixed timeout. The resolver is never cancelled; the timeout only governs
the loading indicator.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, Field

from housemap.listings.models import Listing
from housemap.listings.store import ListingSource
from housemap.map.events import ClearMapHighlight, MapEventChannel, ShowListingOnMap
from housemap.resolution.resolver import CoordinateResolver

logger = logging.getLogger(__name__)


class HighlightPhase(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    RESOLVED = "resolved"
    TIMED_OUT = "timed_out"


class HighlightState(BaseModel):
    """Current highlight target and loading flag."""

    model_config = {"frozen": True}

    target_id: str | None = None
    is_loading: bool = False
    phase: HighlightPhase = HighlightPhase.IDLE
    requested_at: datetime | None = None


class HighlightChange(StrEnum):
    TARGET_CHANGED = "target_changed"
    CLEARED = "cleared"
    LOADING_FINISHED = "loading_finished"
    WORKING_SET_CHANGED = "working_set_changed"


HighlightListener = Callable[[HighlightChange, HighlightState], None]


class HighlightCoordinator:
    """Services "show this listing on the map" requests.

    Args:
        resolver: Resolver used for priority resolution.
        listing_source: Data layer, consulted when the target is not in the
            active listing set or has vanished from it.
        channel: Optional event channel; when given, ``ShowListingOnMap``
            and ``ClearMapHighlight`` events are handled automatically.
        timeout_seconds: Upper bound on how long ``is_loading`` stays True.
    """

    def __init__(
        self,
        resolver: CoordinateResolver,
        listing_source: ListingSource,
        channel: MapEventChannel | None = None,
        *,
        timeout_seconds: float = 3.0,
    ) -> None:
        self._resolver = resolver
        self._source = listing_source
        self._timeout_seconds = timeout_seconds
        self._state = HighlightState()
        self._generation = 0
        self._target_listing: Listing | None = None
        self._active: list[Listing] = []
        self._timeout_handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[HighlightListener] = []
        self._unsubscribers: list[Callable[[], None]] = []
        if channel is not None:
            self._unsubscribers.append(
                channel.subscribe(ShowListingOnMap, lambda e: self.request_highlight(e.listing_id))
            )
            self._unsubscribers.append(
                channel.subscribe(ClearMapHighlight, lambda _e: self.clear_highlight())
            )

    @property
    def state(self) -> HighlightState:
        return self._state

    @property
    def target_listing(self) -> Listing | None:
        return self._target_listing

    @property
    def working_set(self) -> list[Listing]:
        """The active listings, with the highlight target prepended if it is missing."""
        placeholder = self.placeholder
        if placeholder is None:
            return list(self._active)
        return [placeholder, *self._active]

    @property
    def placeholder(self) -> Listing | None:
        target = self._target_listing
        if target is None or self._state.target_id != target.id:
            return None
        if any(l.id == target.id for l in self._active):
            return None
        return target

    def subscribe(self, listener: HighlightListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # -- public API ----------------------------------------------------------

    def request_highlight(self, listing_id: str) -> None:
        """Make ``listing_id`` the highlight target, replacing any prior one.

        Must be called from a running event loop. When the listing is in the
        active set and has a city/state, its fallback coordinate is cached
        before this returns.
        """
        loop = asyncio.get_running_loop()
        self._reset_target()
        self._generation += 1
        generation = self._generation

        self._state = HighlightState(
            target_id=listing_id,
            is_loading=True,
            phase=HighlightPhase.LOADING,
            requested_at=datetime.now(timezone.utc),
        )
        cache = self._resolver.cache
        cache.pin(listing_id)
        cache.invalidate(listing_id)
        self._timeout_handle = loop.call_later(self._timeout_seconds, self._on_timeout, generation)
        logger.info("Highlight requested for listing %s", listing_id)

        listing = self._find_active(listing_id)
        if listing is not None:
            self._target_listing = listing
            self._start_resolution(listing, generation)
        else:
            self._spawn(self._fetch_and_resolve(listing_id, generation))

        self._notify(HighlightChange.TARGET_CHANGED)

    def clear_highlight(self) -> None:
        """Return to idle and drop any placeholder entry."""
        if self._state.target_id is None:
            return
        logger.info("Clearing highlight for listing %s", self._state.target_id)
        self._reset_target()
        self._generation += 1
        self._state = HighlightState()
        self._notify(HighlightChange.CLEARED)

    def set_listings(self, listings: list[Listing]) -> None:
        """Replace the active listing set after a reload or refilter.

        If the highlight target dropped out of the set, it stays on the map
        as a placeholder while the data layer is asked whether it still
        exists; if it does not, the highlight is cleared.
        """
        self._active = list(listings)
        target_id = self._state.target_id
        if target_id is None:
            return
        if any(l.id == target_id for l in self._active):
            return
        if self._target_listing is not None:
            self._spawn(self._verify_target(target_id, self._generation))

    def close(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None
        for task in list(self._tasks):
            task.cancel()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    # -- internal ------------------------------------------------------------

    def _find_active(self, listing_id: str) -> Listing | None:
        for listing in self._active:
            if listing.id == listing_id:
                return listing
        return None

    def _reset_target(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None
        previous = self._state.target_id
        if previous is not None:
            self._resolver.cache.unpin(previous)
        self._target_listing = None

    def _start_resolution(self, listing: Listing, generation: int) -> None:
        task = self._resolver.resolve(listing, priority=True)
        if task is None:
            self._finish_loading(generation, HighlightPhase.RESOLVED)
            return
        task.add_done_callback(lambda _t: self._finish_loading(generation, HighlightPhase.RESOLVED))

    async def _fetch_and_resolve(self, listing_id: str, generation: int) -> None:
        listing = await self._source.get_listing(listing_id)
        if generation != self._generation:
            return
        if listing is None:
            logger.info("Highlight target %s not found; clearing highlight", listing_id)
            self.clear_highlight()
            return
        self._target_listing = listing
        self._start_resolution(listing, generation)
        self._notify(HighlightChange.WORKING_SET_CHANGED)

    async def _verify_target(self, listing_id: str, generation: int) -> None:
        listing = await self._source.get_listing(listing_id)
        if generation != self._generation:
            return
        if listing is None:
            logger.info("Highlight target %s was removed upstream; clearing highlight", listing_id)
            self.clear_highlight()

    def _on_timeout(self, generation: int) -> None:
        self._timeout_handle = None
        if generation != self._generation or not self._state.is_loading:
            return
        logger.info("Highlight for %s still loading after %.1fs; clearing indicator",
                    self._state.target_id, self._timeout_seconds)
        self._finish_loading(generation, HighlightPhase.TIMED_OUT)

    def _finish_loading(self, generation: int, phase: HighlightPhase) -> None:
        if generation != self._generation or self._state.target_id is None:
            return
        if not self._state.is_loading and phase == HighlightPhase.TIMED_OUT:
            return
        if self._state.phase == phase:
            return
        if phase == HighlightPhase.RESOLVED and self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None
        self._state = self._state.model_copy(update={"is_loading": False, "phase": phase})
        self._notify(HighlightChange.LOADING_FINISHED)

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _notify(self, change: HighlightChange) -> None:
        for listener in list(self._listeners):
            listener(change, self._state)
