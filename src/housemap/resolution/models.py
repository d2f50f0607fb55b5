"""Resolution data models."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from housemap.core.types import Coordinate, ResolutionTier


class ResolvedCoordinate(BaseModel):
    """A listing's map position plus the tier that produced it."""

    model_config = {"frozen": True}

    listing_id: str
    latitude: float
    longitude: float
    tier: ResolutionTier
    resolved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)

    @classmethod
    def of(cls, listing_id: str, coordinate: Coordinate, tier: ResolutionTier) -> ResolvedCoordinate:
        return cls(
            listing_id=listing_id,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            tier=tier,
        )


class ResolutionUpdate(BaseModel):
    """Emitted by the resolver each time a listing's resolution changes state.

    ``coordinate`` is None for ``tier == NONE``. ``stored`` is False when
    the cache refused the write because it already held a more precise
    entry. ``recenter`` asks the viewport to move to the new coordinate.
    """

    model_config = {"frozen": True}

    listing_id: str
    tier: ResolutionTier
    coordinate: ResolvedCoordinate | None = None
    priority: bool = False
    stored: bool = False
    recenter: bool = False
