"""Projection of listings into renderable map annotations."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import StrEnum

from pydantic import BaseModel

from housemap.core.types import Coordinate
from housemap.listings.models import Listing
from housemap.map.highlight import HighlightState
from housemap.resolution.cache import CoordinateCache

USER_LOCATION_ID = "user-location"


class AnnotationCategory(StrEnum):
    USER_LOCATION = "user_location"
    HIGHLIGHTED = "highlighted"
    BOOKMARKED = "bookmarked"
    RENTAL_PIN = "rental_pin"
    SALE_PIN = "sale_pin"


class Annotation(BaseModel):
    """A single map marker."""

    model_config = {"frozen": True}

    id: str
    coordinate: Coordinate
    category: AnnotationCategory
    title: str = ""


def categorize(listing: Listing, highlight: HighlightState, bookmarks: set[str]) -> AnnotationCategory:
    if listing.id == highlight.target_id:
        return AnnotationCategory.HIGHLIGHTED
    if listing.id in bookmarks:
        return AnnotationCategory.BOOKMARKED
    if listing.is_rental:
        return AnnotationCategory.RENTAL_PIN
    return AnnotationCategory.SALE_PIN


def build_annotations(
    listings: Sequence[Listing],
    cache: CoordinateCache,
    highlight: HighlightState,
    bookmarks: Iterable[str],
    user_location: Coordinate | None = None,
) -> list[Annotation]:
    """Build the annotation list for one render pass.

    Listings without address data or without a cache entry are omitted.
    The device location, when known, is always its own annotation.
    """
    bookmark_ids = set(bookmarks)
    annotations: list[Annotation] = []
    if user_location is not None:
        annotations.append(
            Annotation(
                id=USER_LOCATION_ID,
                coordinate=user_location,
                category=AnnotationCategory.USER_LOCATION,
            )
        )

    seen: set[str] = set()
    for listing in listings:
        if listing.id in seen or not listing.has_address:
            continue
        entry = cache.get(listing.id)
        if entry is None:
            continue
        seen.add(listing.id)
        annotations.append(
            Annotation(
                id=listing.id,
                coordinate=entry.coordinate,
                category=categorize(listing, highlight, bookmark_ids),
                title=listing.title,
            )
        )
    return annotations
