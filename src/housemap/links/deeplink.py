"""Shared-link handling: turn a listing URL into a map highlight request.

Accepted forms::

    housemap://listing/<uuid>      housemap://property/<uuid>
    housemap:///home/<uuid>        https://<host>/listing/<uuid>
"""

from __future__ import annotations

import logging
import uuid
from urllib.parse import urlparse

from housemap.map.events import MapEventChannel, ShowListingOnMap

logger = logging.getLogger(__name__)

APP_SCHEME = "housemap"
LISTING_PATH_SEGMENTS = frozenset({"listing", "property", "home"})


def parse_listing_link(url: str) -> str | None:
    """Extract the listing id from a shared link, or None if it is not one."""
    parsed = urlparse(url.strip())
    segments = [s for s in parsed.path.split("/") if s]

    candidate: str | None = None
    if parsed.scheme == APP_SCHEME:
        if parsed.netloc in LISTING_PATH_SEGMENTS and segments:
            candidate = segments[-1]
        elif len(segments) >= 2 and segments[-2] in LISTING_PATH_SEGMENTS:
            candidate = segments[-1]
    elif parsed.scheme in ("http", "https"):
        if len(segments) >= 2 and segments[0] in LISTING_PATH_SEGMENTS:
            candidate = segments[1]

    if candidate is None:
        logger.info("Not a listing link: %s", url)
        return None
    try:
        return str(uuid.UUID(candidate))
    except ValueError:
        logger.info("Listing link %s has an invalid id %r", url, candidate)
        return None


class SharedLinkHandler:
    """Publishes ``ShowListingOnMap`` for every valid listing link it is handed."""

    def __init__(self, channel: MapEventChannel) -> None:
        self._channel = channel

    def handle(self, url: str) -> str | None:
        listing_id = parse_listing_link(url)
        if listing_id is not None:
            logger.info("Opening shared listing %s on the map", listing_id)
            self._channel.publish(ShowListingOnMap(listing_id=listing_id))
        return listing_id
