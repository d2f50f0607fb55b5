"""Tests for the annotation builder."""

from __future__ import annotations

from housemap.core.types import Coordinate, ListingCategory, ResolutionTier
from housemap.listings.models import Listing
from housemap.map.annotations import USER_LOCATION_ID, AnnotationCategory, build_annotations
from housemap.map.highlight import HighlightState
from housemap.resolution.models import ResolvedCoordinate

HERE = Coordinate(latitude=25.0, longitude=-80.0)


def _cached(cache, *ids: str) -> None:
    for i, listing_id in enumerate(ids):
        cache.put(
            ResolvedCoordinate.of(
                listing_id,
                Coordinate(latitude=25.0 + i, longitude=-80.0),
                ResolutionTier.PRECISE,
            )
        )


LISTINGS = [
    Listing(id="sale", city="Miami", state="FL", listing_type=ListingCategory.SALE),
    Listing(id="rent", city="Miami", state="FL", listing_type=ListingCategory.RENTAL),
    Listing(id="saved", city="Miami", state="FL", listing_type=ListingCategory.RENTAL),
    Listing(id="hot", city="Miami", state="FL", listing_type=ListingCategory.SALE),
]


class TestBuildAnnotations:
    def test_categories(self, cache):
        _cached(cache, "sale", "rent", "saved", "hot")
        annotations = build_annotations(
            LISTINGS, cache, HighlightState(target_id="hot"), {"saved", "hot"}
        )
        categories = {a.id: a.category for a in annotations}
        assert categories == {
            "sale": AnnotationCategory.SALE_PIN,
            "rent": AnnotationCategory.RENTAL_PIN,
            "saved": AnnotationCategory.BOOKMARKED,
            "hot": AnnotationCategory.HIGHLIGHTED,
        }

    def test_user_location_is_its_own_annotation(self, cache):
        annotations = build_annotations([], cache, HighlightState(), set(), HERE)
        assert len(annotations) == 1
        assert annotations[0].id == USER_LOCATION_ID
        assert annotations[0].category == AnnotationCategory.USER_LOCATION
        assert annotations[0].coordinate == HERE

    def test_uncached_listing_omitted(self, cache):
        _cached(cache, "sale")
        annotations = build_annotations(LISTINGS, cache, HighlightState(), set())
        assert [a.id for a in annotations] == ["sale"]

    def test_listing_without_address_never_rendered(self, cache):
        empty = Listing(id="empty")
        _cached(cache, "empty")
        annotations = build_annotations([empty], cache, HighlightState(target_id="empty"), {"empty"})
        assert annotations == []

    def test_duplicates_rendered_once(self, cache):
        _cached(cache, "sale")
        annotations = build_annotations([LISTINGS[0], LISTINGS[0]], cache, HighlightState(), set())
        assert len(annotations) == 1

    def test_coordinate_comes_from_cache(self, cache):
        _cached(cache, "sale")
        annotations = build_annotations(LISTINGS[:1], cache, HighlightState(), set())
        assert annotations[0].coordinate == Coordinate(latitude=25.0, longitude=-80.0)
