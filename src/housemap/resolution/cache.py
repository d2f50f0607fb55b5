"""Session-lifetime coordinate cache with tier-aware writes."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict

from housemap.resolution.models import ResolvedCoordinate

logger = logging.getLogger(__name__)


class CoordinateCache:
    """In-memory mapping from listing id to its resolved coordinate.

    Writes go through a mutex and compare tiers before replacing an
    entry, so a late low-precision result can never overwrite a precise
    one. ``invalidate`` is the only way to drop a precise entry.

    The cache is LRU-bounded by ``max_entries``; pinned ids (the current
    highlight target) are never evicted.
    """

    def __init__(self, max_entries: int = 2000) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._entries: OrderedDict[str, ResolvedCoordinate] = OrderedDict()
        self._pinned: set[str] = set()
        self._max_entries = max_entries
        self._lock = threading.Lock()

    def get(self, listing_id: str) -> ResolvedCoordinate | None:
        with self._lock:
            return self._entries.get(listing_id)

    def put(self, entry: ResolvedCoordinate) -> bool:
        """Store ``entry`` unless a strictly more precise entry already exists.

        Returns True if the entry was written.
        """
        if not entry.tier.is_placeable:
            raise ValueError("Cannot cache an unresolved coordinate")
        with self._lock:
            current = self._entries.get(entry.listing_id)
            if current is not None and current.tier.rank > entry.tier.rank:
                logger.debug(
                    "Refusing %s downgrade for %s (have %s)",
                    entry.tier, entry.listing_id, current.tier,
                )
                return False
            self._entries[entry.listing_id] = entry
            self._entries.move_to_end(entry.listing_id)
            self._evict_locked(keep=entry.listing_id)
            return True

    def invalidate(self, listing_id: str) -> bool:
        with self._lock:
            return self._entries.pop(listing_id, None) is not None

    def touch(self, listing_ids: list[str]) -> None:
        """Mark ids as recently used, e.g. when they are in the active listing set."""
        with self._lock:
            for listing_id in listing_ids:
                if listing_id in self._entries:
                    self._entries.move_to_end(listing_id)

    def pin(self, listing_id: str) -> None:
        with self._lock:
            self._pinned.add(listing_id)

    def unpin(self, listing_id: str) -> None:
        with self._lock:
            self._pinned.discard(listing_id)
            self._evict_locked()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _evict_locked(self, keep: str | None = None) -> None:
        if len(self._entries) <= self._max_entries:
            return
        for listing_id in list(self._entries):
            if len(self._entries) <= self._max_entries:
                break
            if listing_id in self._pinned or listing_id == keep:
                continue
            del self._entries[listing_id]
            logger.debug("Evicted cached coordinate for %s", listing_id)

    def __contains__(self, listing_id: object) -> bool:
        with self._lock:
            return listing_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
