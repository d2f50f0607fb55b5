"""Tests for the coordinate cache."""

from __future__ import annotations

import pytest

from housemap.core.types import Coordinate, ResolutionTier
from housemap.resolution.cache import CoordinateCache
from housemap.resolution.models import ResolvedCoordinate


def _entry(listing_id: str, tier: ResolutionTier, lat: float = 25.0, lng: float = -80.0) -> ResolvedCoordinate:
    return ResolvedCoordinate.of(listing_id, Coordinate(latitude=lat, longitude=lng), tier)


class TestCoordinateCache:
    def test_get_missing(self, cache):
        assert cache.get("nope") is None

    def test_put_and_get(self, cache):
        assert cache.put(_entry("A", ResolutionTier.CITY_STATE))
        entry = cache.get("A")
        assert entry.tier == ResolutionTier.CITY_STATE
        assert "A" in cache
        assert len(cache) == 1

    def test_higher_tier_overwrites(self, cache):
        cache.put(_entry("A", ResolutionTier.STATE_CENTER))
        assert cache.put(_entry("A", ResolutionTier.PRECISE, lat=26.0))
        assert cache.get("A").tier == ResolutionTier.PRECISE

    def test_equal_tier_overwrites(self, cache):
        cache.put(_entry("A", ResolutionTier.PRECISE, lat=25.0))
        assert cache.put(_entry("A", ResolutionTier.PRECISE, lat=26.0))
        assert cache.get("A").latitude == 26.0

    def test_lower_tier_never_downgrades(self, cache):
        cache.put(_entry("A", ResolutionTier.PRECISE, lat=25.5))
        assert not cache.put(_entry("A", ResolutionTier.CITY_STATE, lat=30.0))
        assert not cache.put(_entry("A", ResolutionTier.STATE_CENTER, lat=31.0))
        entry = cache.get("A")
        assert entry.tier == ResolutionTier.PRECISE
        assert entry.latitude == 25.5

    def test_invalidate_allows_lower_tier(self, cache):
        cache.put(_entry("A", ResolutionTier.PRECISE))
        assert cache.invalidate("A")
        assert cache.put(_entry("A", ResolutionTier.CITY_STATE))
        assert cache.get("A").tier == ResolutionTier.CITY_STATE

    def test_invalidate_missing(self, cache):
        assert not cache.invalidate("nope")

    def test_none_tier_rejected(self, cache):
        with pytest.raises(ValueError):
            cache.put(_entry("A", ResolutionTier.NONE))

    def test_lru_eviction(self):
        cache = CoordinateCache(max_entries=2)
        cache.put(_entry("A", ResolutionTier.PRECISE))
        cache.put(_entry("B", ResolutionTier.PRECISE))
        cache.touch(["A"])
        cache.put(_entry("C", ResolutionTier.PRECISE))
        assert "A" in cache
        assert "B" not in cache
        assert "C" in cache

    def test_pinned_entry_survives_eviction(self):
        cache = CoordinateCache(max_entries=1)
        cache.pin("A")
        cache.put(_entry("A", ResolutionTier.PRECISE))
        cache.put(_entry("B", ResolutionTier.PRECISE))
        assert "A" in cache
        assert "B" in cache
        cache.unpin("A")
        assert len(cache) == 1
        assert "B" in cache

    def test_invalid_bound(self):
        with pytest.raises(ValueError):
            CoordinateCache(max_entries=0)
