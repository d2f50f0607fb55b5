#!/usr/bin/env python3
"""Resolve a batch of listings and print the resulting map state.

Usage:
    # Fixture listings, mock geocoder:
    python3 scripts/resolve_listings.py

    # Listings from a YAML file, real Nominatim, highlight one of them:
    HOUSEMAP_GEOCODER_PROVIDER=nominatim \\
        python3 scripts/resolve_listings.py --listings listings.yml --highlight <id>

The YAML file holds a top-level ``listings`` list whose entries use the
Listing field names (id, title, listing_type, address, city, state, ...).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import yaml

# Ensure the project source is importable when running the script directly.
_project_root = Path(__file__).resolve().parent.parent
_src = _project_root / "src"
if str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

from housemap.core.config import Settings  # noqa: E402
from housemap.core.types import Coordinate  # noqa: E402
from housemap.geo.client import create_geocoder  # noqa: E402
from housemap.listings.models import Listing  # noqa: E402
from housemap.listings.store import InMemoryListingStore  # noqa: E402
from housemap.map.session import create_map_session  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Resolve listing coordinates and print the map snapshot as JSON."
    )
    parser.add_argument("--listings", type=str, default=None, help="YAML file of listings.")
    parser.add_argument("--state", type=str, default=None, help="Only listings in this state.")
    parser.add_argument("--highlight", type=str, default=None, help="Listing id to highlight.")
    parser.add_argument(
        "--location",
        type=float,
        nargs=2,
        metavar=("LAT", "LNG"),
        default=None,
        help="Device location.",
    )
    return parser.parse_args()


def load_listings(path: str) -> list[Listing]:
    with open(path) as fh:
        data = yaml.safe_load(fh) or {}
    return [Listing(**entry) for entry in data.get("listings", [])]


async def main() -> None:
    args = parse_args()
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.listings:
        store = InMemoryListingStore(listings=load_listings(args.listings))
    else:
        store = InMemoryListingStore()

    geocoder = create_geocoder(settings.geocoder)
    session = create_map_session(settings, store, geocoder=geocoder)
    try:
        await session.load(state=args.state)
        if args.location:
            session.set_user_location(Coordinate(latitude=args.location[0], longitude=args.location[1]))
        if args.highlight:
            session.request_highlight(args.highlight)
            # Let the fetch of an off-screen target start its lookup
            await asyncio.sleep(0)
        await session.resolver.drain()
        print(json.dumps(session.render().model_dump(mode="json"), indent=2))
    finally:
        await session.aclose()
        await geocoder.close()


if __name__ == "__main__":
    asyncio.run(main())
