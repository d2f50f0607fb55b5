"""Tiered coordinate resolution for listings.

A listing is resolved by one precise geocoding lookup; if that fails or
finds nothing, the static city/state table is consulted, then the bare
state center. Priority (highlighted) listings get the static fallback
synchronously so the map can center before any network round trip.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from housemap.core.types import Coordinate, GeocodingError, ResolutionTier
from housemap.geo.client import Geocoder
from housemap.geo.distance import haversine_meters
from housemap.geo.locations import StaticLocationTable
from housemap.listings.models import Listing
from housemap.resolution.cache import CoordinateCache
from housemap.resolution.models import ResolutionUpdate, ResolvedCoordinate

logger = logging.getLogger(__name__)

UpdateListener = Callable[[ResolutionUpdate], None]


@dataclass
class _InFlight:
    priority: bool
    # Set once the lookup holds a concurrency slot (or skipped the queue)
    started: bool = False
    task: asyncio.Task | None = field(default=None, repr=False)


class CoordinateResolver:
    """Resolves listings into the coordinate cache.

    Args:
        geocoder: Precise forward-geocoding provider.
        cache: Cache that receives every successful resolution.
        table: Static fallback table.
        max_concurrency: Upper bound on simultaneous non-priority lookups.
        recenter_threshold_meters: A precise result for a priority listing
            that moves it further than this asks the viewport to recenter.
    """

    def __init__(
        self,
        geocoder: Geocoder,
        cache: CoordinateCache,
        table: StaticLocationTable,
        *,
        max_concurrency: int = 8,
        recenter_threshold_meters: float = 100.0,
    ) -> None:
        self._geocoder = geocoder
        self._cache = cache
        self._table = table
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._threshold = recenter_threshold_meters
        self._inflight: dict[str, _InFlight] = {}
        self._unresolvable: set[str] = set()
        self._listeners: list[UpdateListener] = []

    @property
    def cache(self) -> CoordinateCache:
        return self._cache

    def subscribe(self, listener: UpdateListener) -> Callable[[], None]:
        """Register a listener for resolution updates. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def is_in_flight(self, listing_id: str) -> bool:
        return listing_id in self._inflight

    def is_unresolvable(self, listing_id: str) -> bool:
        return listing_id in self._unresolvable

    @property
    def in_flight_count(self) -> int:
        return len(self._inflight)

    # -- public API ----------------------------------------------------------

    def resolve(self, listing: Listing, priority: bool = False) -> asyncio.Task | None:
        """Start resolving ``listing``. Must be called from a running event loop.

        Returns the task performing the precise lookup (the existing one if
        a lookup for this listing is already in flight), or None when the
        listing has no address data at all.
        """
        address = listing.full_address()
        if not address:
            logger.info("Listing %s has no address data; leaving it off the map", listing.id)
            self._unresolvable.add(listing.id)
            self._emit(ResolutionUpdate(listing_id=listing.id, tier=ResolutionTier.NONE, priority=priority))
            return None

        if priority:
            self._cache.invalidate(listing.id)
            self._apply_fallback(listing, priority=True)

        existing = self._inflight.get(listing.id)
        if existing is not None and existing.task is not None and not existing.task.done():
            if priority and not existing.priority and not existing.started:
                # Still waiting for a slot: replace it with a lookup that skips the queue
                logger.debug("Promoting queued resolution for %s to priority", listing.id)
                existing.task.cancel()
            else:
                if priority:
                    existing.priority = True
                logger.debug("Resolution for %s already in flight; dropping duplicate", listing.id)
                return existing.task

        state = _InFlight(priority=priority)
        task = asyncio.get_running_loop().create_task(self._run(listing, address, state))
        state.task = task
        self._inflight[listing.id] = state
        task.add_done_callback(lambda _t: self._finish(listing.id, state))
        return task

    def resolve_many(self, listings: Iterable[Listing]) -> list[asyncio.Task]:
        """Resolve every listing that has no cache entry and no lookup in flight.

        Listings already known to be unresolvable are skipped; there is no
        retry for them short of a priority request.
        """
        tasks: list[asyncio.Task] = []
        for listing in listings:
            if (
                listing.id in self._cache
                or listing.id in self._inflight
                or listing.id in self._unresolvable
            ):
                continue
            task = self.resolve(listing)
            if task is not None:
                tasks.append(task)
        return tasks

    async def drain(self) -> None:
        """Wait until every in-flight lookup has finished."""
        while self._inflight:
            tasks = [s.task for s in self._inflight.values() if s.task is not None]
            # A queued lookup may be cancelled when promoted to priority
            await asyncio.gather(*tasks, return_exceptions=True)

    # -- internal ------------------------------------------------------------

    def _finish(self, listing_id: str, state: _InFlight) -> None:
        if self._inflight.get(listing_id) is state:
            del self._inflight[listing_id]

    async def _run(self, listing: Listing, address: str, state: _InFlight) -> None:
        coordinate = await self._lookup(listing.id, address, state)
        if coordinate is None:
            self._apply_fallback(listing, priority=state.priority)
        else:
            self._apply_precise(listing.id, coordinate, priority=state.priority)

    async def _lookup(self, listing_id: str, address: str, state: _InFlight) -> Coordinate | None:
        try:
            # Priority lookups skip the queue
            if state.priority:
                state.started = True
                return await self._geocoder.forward_geocode(address)
            async with self._semaphore:
                state.started = True
                return await self._geocoder.forward_geocode(address)
        except GeocodingError as exc:
            logger.warning("Geocoding failed for listing %s: %s", listing_id, exc)
        except Exception:
            logger.exception("Unexpected geocoder error for listing %s", listing_id)
        return None

    def _apply_fallback(self, listing: Listing, *, priority: bool) -> None:
        hit = self._table.lookup(listing.city, listing.state)
        if hit is None:
            if listing.id not in self._cache:
                logger.info(
                    "No coordinate for listing %s (city=%r, state=%r); leaving it off the map",
                    listing.id, listing.city, listing.state,
                )
                self._unresolvable.add(listing.id)
            self._emit(ResolutionUpdate(listing_id=listing.id, tier=ResolutionTier.NONE, priority=priority))
            return

        coordinate, tier = hit
        entry = ResolvedCoordinate.of(listing.id, coordinate, tier)
        stored = self._cache.put(entry)
        if stored:
            self._unresolvable.discard(listing.id)
        self._emit(
            ResolutionUpdate(
                listing_id=listing.id,
                tier=tier,
                coordinate=entry,
                priority=priority,
                stored=stored,
            )
        )

    def _apply_precise(self, listing_id: str, coordinate: Coordinate, *, priority: bool) -> None:
        current = self._cache.get(listing_id)
        recenter = False
        if priority:
            if current is None:
                recenter = True
            else:
                moved = haversine_meters(current.coordinate, coordinate)
                recenter = moved > self._threshold
                logger.debug("Precise result for %s moved %.0fm", listing_id, moved)

        entry = ResolvedCoordinate.of(listing_id, coordinate, ResolutionTier.PRECISE)
        stored = self._cache.put(entry)
        self._unresolvable.discard(listing_id)
        self._emit(
            ResolutionUpdate(
                listing_id=listing_id,
                tier=ResolutionTier.PRECISE,
                coordinate=entry,
                priority=priority,
                stored=stored,
                recenter=recenter and stored,
            )
        )

    def _emit(self, update: ResolutionUpdate) -> None:
        for listener in list(self._listeners):
            try:
                listener(update)
            except Exception:
                logger.exception("Resolution listener failed for listing %s", update.listing_id)
