"""Typed message channel for cross-view map requests.

Any part of the application that wants the map to do something (a search
result, a shared-link handler) publishes an event here; the map session
subscribes. Both sides receive the same channel instance by injection.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, TypeVar

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class MapEvent(BaseModel):
    """Base class for map channel events."""

    model_config = {"frozen": True}

    raised_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ShowListingOnMap(MapEvent):
    """Center the map on a listing and highlight its pin."""

    listing_id: str


class ClearMapHighlight(MapEvent):
    """Drop the current highlight, if any."""


class ReturnFromMap(MapEvent):
    """The user left the map; the originating list should scroll to ``listing_id``."""

    listing_id: str | None = None


E = TypeVar("E", bound=MapEvent)


class MapEventChannel:
    """Synchronous publish/subscribe channel keyed by event type."""

    def __init__(self) -> None:
        self._handlers: dict[type[MapEvent], list[Callable[[Any], None]]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> Callable[[], None]:
        """Register a handler. Returns an unsubscribe callable."""
        self._handlers[event_type].append(handler)

        def _unsubscribe() -> None:
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return _unsubscribe

    def publish(self, event: MapEvent) -> int:
        """Deliver ``event`` to every handler of its exact type. Returns the handler count."""
        handlers = list(self._handlers.get(type(event), []))
        if not handlers:
            logger.debug("No subscribers for %s", type(event).__name__)
        for handler in handlers:
            handler(event)
        return len(handlers)
