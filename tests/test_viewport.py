"""Tests for viewport computation."""

from __future__ import annotations

from housemap.core.config import MapConfig
from housemap.core.types import Coordinate, ResolutionTier
from housemap.listings.models import Listing
from housemap.map.highlight import HighlightPhase, HighlightState
from housemap.map.viewport import ViewportController, ViewportSource, compute_region
from housemap.resolution.models import ResolvedCoordinate

MIAMI = Coordinate(latitude=25.7617, longitude=-80.1918)
AUSTIN = Coordinate(latitude=30.2672, longitude=-97.7431)
DEVICE = Coordinate(latitude=40.7128, longitude=-74.0060)

LISTINGS = [
    Listing(id="A", city="Miami", state="FL"),
    Listing(id="B", city="Austin", state="TX"),
]


def _highlight(target_id: str | None) -> HighlightState:
    if target_id is None:
        return HighlightState()
    return HighlightState(target_id=target_id, is_loading=True, phase=HighlightPhase.LOADING)


class TestComputeRegion:
    def test_highlight_wins_over_device_location(self, cache, map_config):
        cache.put(ResolvedCoordinate.of("B", AUSTIN, ResolutionTier.CITY_STATE))
        viewport = compute_region(_highlight("B"), DEVICE, LISTINGS, cache, map_config)
        assert viewport.source == ViewportSource.HIGHLIGHT
        assert viewport.center == AUSTIN
        assert viewport.listing_id == "B"
        assert viewport.latitude_span == map_config.close_span_degrees

    def test_any_tier_counts_for_highlight(self, cache, map_config):
        cache.put(ResolvedCoordinate.of("B", AUSTIN, ResolutionTier.STATE_CENTER))
        viewport = compute_region(_highlight("B"), None, LISTINGS, cache, map_config)
        assert viewport.source == ViewportSource.HIGHLIGHT

    def test_unresolved_highlight_falls_through_to_device(self, cache, map_config):
        viewport = compute_region(_highlight("B"), DEVICE, LISTINGS, cache, map_config)
        assert viewport.source == ViewportSource.USER_LOCATION
        assert viewport.center == DEVICE
        assert viewport.latitude_span == map_config.medium_span_degrees

    def test_first_listing_when_no_device_location(self, cache, map_config):
        cache.put(ResolvedCoordinate.of("A", MIAMI, ResolutionTier.PRECISE))
        cache.put(ResolvedCoordinate.of("B", AUSTIN, ResolutionTier.PRECISE))
        viewport = compute_region(_highlight(None), None, LISTINGS, cache, map_config)
        assert viewport.source == ViewportSource.FIRST_LISTING
        assert viewport.center == MIAMI
        assert viewport.latitude_span == map_config.wide_span_degrees

    def test_only_the_first_listing_is_considered(self, cache, map_config):
        cache.put(ResolvedCoordinate.of("B", AUSTIN, ResolutionTier.PRECISE))
        viewport = compute_region(_highlight(None), None, LISTINGS, cache, map_config)
        assert viewport.source == ViewportSource.DEFAULT

    def test_default_region(self, cache):
        config = MapConfig(default_center_latitude=10.0, default_center_longitude=20.0)
        viewport = compute_region(_highlight(None), None, [], cache, config)
        assert viewport.source == ViewportSource.DEFAULT
        assert viewport.center == Coordinate(latitude=10.0, longitude=20.0)
        assert viewport.latitude_span == config.default_latitude_span


class TestViewportController:
    def test_listeners_hear_only_changes(self, cache, map_config):
        controller = ViewportController(cache, map_config)
        moves = []
        controller.subscribe(moves.append)

        controller.recompute(_highlight(None), None, LISTINGS)
        controller.recompute(_highlight(None), None, LISTINGS)
        assert len(moves) == 1
        assert moves[0].source == ViewportSource.DEFAULT

        controller.recompute(_highlight(None), DEVICE, LISTINGS)
        assert len(moves) == 2
        assert controller.current.center == DEVICE

    def test_unsubscribe(self, cache, map_config):
        controller = ViewportController(cache, map_config)
        moves = []
        unsubscribe = controller.subscribe(moves.append)
        unsubscribe()
        controller.recompute(_highlight(None), None, [])
        assert moves == []
        assert controller.current is not None
