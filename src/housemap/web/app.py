"""FastAPI application exposing the listing map core.

Provides endpoints for raising map events, pushing device location,
refreshing the listing set, and reading back the current render state.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from housemap import __version__
from housemap.core.config import Settings
from housemap.geo.client import Geocoder, create_geocoder
from housemap.links.deeplink import SharedLinkHandler
from housemap.listings.models import Listing
from housemap.listings.store import InMemoryListingStore, ListingSource
from housemap.map.events import MapEventChannel
from housemap.map.session import create_map_session
from housemap.web.map_router import router as map_router

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str = __version__
    geocoder: str
    cached_coordinates: int
    lookups_in_flight: int


def create_app(
    settings: Settings | None = None,
    listing_source: ListingSource | None = None,
    geocoder: Geocoder | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Uses the factory pattern so tests can create isolated app instances
    with mock dependencies.

    Args:
        settings: Application settings. Defaults to Settings().
        listing_source: Data layer. Defaults to the fixture-backed in-memory store.
        geocoder: Optional pre-built geocoder. Defaults to the configured provider.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = Settings()
    if listing_source is None:
        listing_source = InMemoryListingStore()
    if geocoder is None:
        geocoder = create_geocoder(settings.geocoder)

    channel = MapEventChannel()
    selections: list[Listing] = []
    session = create_map_session(
        settings,
        listing_source,
        geocoder=geocoder,
        channel=channel,
        on_select=selections.append,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        listings = await session.load()
        logger.info("Map session loaded %d listings", len(listings))
        try:
            yield
        finally:
            await session.aclose()
            await geocoder.close()

    app = FastAPI(
        title="housemap",
        description="Coordinate resolution and highlight coordination for a listings map",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store on app state for access in route handlers
    app.state.settings = settings
    app.state.listing_source = listing_source
    app.state.geocoder = geocoder
    app.state.map_channel = channel
    app.state.map_session = session
    app.state.link_handler = SharedLinkHandler(channel)
    app.state.selections = selections

    app.include_router(map_router)

    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="ok",
            service="housemap",
            geocoder=settings.geocoder.provider,
            cached_coordinates=len(session.cache),
            lookups_in_flight=session.resolver.in_flight_count,
        )

    return app
