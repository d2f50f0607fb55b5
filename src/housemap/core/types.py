"""Core type definitions shared across all housemap modules."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class HousemapError(Exception):
    """Base class for errors raised inside housemap."""


class GeocodingError(HousemapError):
    """The geocoding service could not be reached or returned garbage."""


class ResolutionTier(StrEnum):
    """Precision level of a resolved coordinate."""

    PRECISE = "precise"
    CITY_STATE = "city_state"
    STATE_CENTER = "state_center"
    NONE = "none"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]

    @property
    def is_placeable(self) -> bool:
        return self is not ResolutionTier.NONE


# Higher rank = more precise
_TIER_RANK: dict[ResolutionTier, int] = {
    ResolutionTier.NONE: 0,
    ResolutionTier.STATE_CENTER: 1,
    ResolutionTier.CITY_STATE: 2,
    ResolutionTier.PRECISE: 3,
}


class ListingCategory(StrEnum):
    """Listing type as stored by the data layer."""

    SALE = "sale"
    RENTAL = "rental"


class Coordinate(BaseModel):
    """A WGS84 latitude/longitude pair."""

    model_config = {"frozen": True}

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
