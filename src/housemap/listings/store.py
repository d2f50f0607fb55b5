"""Listing data access: protocol and in-memory fixture store."""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol, runtime_checkable

from housemap.core.types import ListingCategory
from housemap.geo.locations import normalize_state
from housemap.listings.models import Listing

ALL_STATES = "All"


@runtime_checkable
class ListingSource(Protocol):
    """Protocol for the read-only listing data layer."""

    async def get_listing(self, listing_id: str) -> Listing | None: ...

    async def list_listings(
        self, state: str | None = None, search: str | None = None
    ) -> list[Listing]: ...

    async def bookmarked_ids(self) -> set[str]: ...


class InMemoryListingStore:
    """In-memory listing store with fixture listings for development/testing."""

    def __init__(self, listings: list[Listing] | None = None, load_fixtures: bool = True) -> None:
        self._listings: dict[str, Listing] = {}
        self._bookmarks: set[str] = set()
        if listings is not None:
            for listing in listings:
                self._listings[listing.id] = listing
        elif load_fixtures:
            self._load_fixtures()

    def _load_fixtures(self) -> None:
        fixtures = [
            Listing(
                id="6f1c2a1e-0d7b-4a59-9a43-1b2f0c9d1001",
                title="Brickell high-rise condo",
                listing_type=ListingCategory.SALE,
                price=Decimal("725000"),
                address="1200 Brickell Ave",
                city="Miami",
                state="FL",
                zip_code="33131",
            ),
            Listing(
                id="6f1c2a1e-0d7b-4a59-9a43-1b2f0c9d1002",
                title="Ocean Drive studio",
                listing_type=ListingCategory.RENTAL,
                price=Decimal("2900"),
                address="1500 Ocean Dr",
                city="Miami Beach",
                state="FL",
                zip_code="33139",
            ),
            Listing(
                id="6f1c2a1e-0d7b-4a59-9a43-1b2f0c9d1003",
                title="Fixer-upper bungalow",
                listing_type=ListingCategory.SALE,
                price=Decimal("189000"),
                city="Tampa",
                state="FL",
            ),
            Listing(
                id="6f1c2a1e-0d7b-4a59-9a43-1b2f0c9d1004",
                title="Downtown loft",
                listing_type=ListingCategory.RENTAL,
                price=Decimal("2100"),
                address="600 Congress Ave",
                city="Austin",
                state="TX",
                zip_code="78701",
            ),
            Listing(
                id="6f1c2a1e-0d7b-4a59-9a43-1b2f0c9d1005",
                title="Ranch on acreage",
                listing_type=ListingCategory.SALE,
                price=Decimal("410000"),
                state="Montana",
            ),
            Listing(
                id="6f1c2a1e-0d7b-4a59-9a43-1b2f0c9d1006",
                title="Mystery listing",
                listing_type=ListingCategory.SALE,
            ),
        ]
        for listing in fixtures:
            self._listings[listing.id] = listing
        self._bookmarks.add("6f1c2a1e-0d7b-4a59-9a43-1b2f0c9d1004")

    async def get_listing(self, listing_id: str) -> Listing | None:
        listing = self._listings.get(listing_id)
        if listing is None or not listing.is_active:
            return None
        return listing

    async def list_listings(
        self, state: str | None = None, search: str | None = None
    ) -> list[Listing]:
        """Active listings, optionally filtered by state code and free text.

        ``state`` of None or ``"All"`` disables the state filter. ``search``
        matches case-insensitively against title, address, city and state.
        """
        results = [l for l in self._listings.values() if l.is_active]
        if state and state != ALL_STATES:
            wanted = normalize_state(state)
            results = [l for l in results if normalize_state(l.state) == wanted]
        if search:
            needle = search.lower()
            results = [
                l for l in results
                if any(needle in (f or "").lower() for f in (l.title, l.address, l.city, l.state))
            ]
        return results

    async def bookmarked_ids(self) -> set[str]:
        return set(self._bookmarks)

    # -- mutation helpers (data layer side) ----------------------------------

    def save(self, listing: Listing) -> Listing:
        self._listings[listing.id] = listing
        return listing

    def delete(self, listing_id: str) -> None:
        self._listings.pop(listing_id, None)
        self._bookmarks.discard(listing_id)

    def bookmark(self, listing_id: str) -> None:
        self._bookmarks.add(listing_id)

    def unbookmark(self, listing_id: str) -> None:
        self._bookmarks.discard(listing_id)

    @property
    def count(self) -> int:
        return len(self._listings)
