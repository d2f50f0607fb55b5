"""FastAPI router for map endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from housemap.core.types import Coordinate
from housemap.map.events import ClearMapHighlight, ShowListingOnMap
from housemap.map.session import MapSession

router = APIRouter()


class LocationUpdate(BaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class OpenLinkRequest(BaseModel):
    url: str


class TapRequest(BaseModel):
    annotation_id: str


def _session(request: Request) -> MapSession:
    session = getattr(request.app.state, "map_session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Map session not available")
    return session


def _snapshot(session: MapSession) -> dict[str, Any]:
    return session.render().model_dump(mode="json")


@router.get("/api/map")
async def get_map(request: Request) -> dict[str, Any]:
    """Current viewport, annotations and highlight state."""
    return _snapshot(_session(request))


@router.post("/api/map/highlight/{listing_id}")
async def show_on_map(listing_id: str, request: Request) -> dict[str, Any]:
    """Raise ShowListingOnMap for ``listing_id``."""
    session = _session(request)
    if await request.app.state.listing_source.get_listing(listing_id) is None:
        raise HTTPException(status_code=404, detail=f"Listing {listing_id!r} not found")
    session.channel.publish(ShowListingOnMap(listing_id=listing_id))
    return _snapshot(session)


@router.delete("/api/map/highlight")
async def clear_highlight(request: Request) -> dict[str, Any]:
    """Raise ClearMapHighlight."""
    session = _session(request)
    session.channel.publish(ClearMapHighlight())
    return _snapshot(session)


@router.post("/api/map/location")
async def update_location(body: LocationUpdate, request: Request) -> dict[str, Any]:
    """Push the device location."""
    session = _session(request)
    session.set_user_location(Coordinate(latitude=body.latitude, longitude=body.longitude))
    return _snapshot(session)


@router.post("/api/map/refresh")
async def refresh_listings(
    request: Request,
    state: str | None = None,
    search: str | None = None,
) -> dict[str, Any]:
    """Reload listings from the data layer, optionally filtered."""
    session = _session(request)
    await session.load(state=state, search=search)
    return _snapshot(session)


@router.post("/api/map/tap")
async def tap_annotation(body: TapRequest, request: Request) -> dict[str, Any]:
    """Forward a pin tap to the selection callback."""
    session = _session(request)
    listing = session.tap(body.annotation_id)
    if listing is None:
        raise HTTPException(status_code=404, detail=f"Listing {body.annotation_id!r} is not on the map")
    return listing.model_dump(mode="json")


@router.post("/api/links/open")
async def open_link(body: OpenLinkRequest, request: Request) -> dict[str, Any]:
    """Handle a shared listing link by highlighting the listing on the map."""
    handler = getattr(request.app.state, "link_handler", None)
    if handler is None:
        raise HTTPException(status_code=503, detail="Link handler not available")
    listing_id = handler.handle(body.url)
    if listing_id is None:
        raise HTTPException(status_code=400, detail="Not a listing link")
    return {"listing_id": listing_id, "map": _snapshot(_session(request))}
