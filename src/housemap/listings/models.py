"""Listing data models consumed read-only by the map core."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field

from housemap.core.types import ListingCategory


class Listing(BaseModel):
    """A property listing as supplied by the data layer."""

    model_config = {"frozen": True}

    id: str
    title: str = ""
    listing_type: ListingCategory = ListingCategory.SALE
    price: Decimal | None = None
    address: str | None = None
    unit: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    is_active: bool = True
    is_featured: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_rental(self) -> bool:
        return self.listing_type == ListingCategory.RENTAL

    @property
    def has_address(self) -> bool:
        return any(
            (part or "").strip()
            for part in (self.address, self.unit, self.city, self.state, self.zip_code)
        )

    def full_address(self) -> str:
        """Join the available address components, skipping absent ones.

        ``"1200 Brickell Ave Apt 5, Miami, FL 33131"``; empty when the
        listing carries no address data at all.
        """
        street = " ".join(
            p.strip() for p in (self.address, self.unit) if p and p.strip()
        )
        region = " ".join(
            p.strip() for p in (self.state, self.zip_code) if p and p.strip()
        )
        parts = [street, (self.city or "").strip(), region]
        return ", ".join(p for p in parts if p)
