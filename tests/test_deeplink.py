"""Tests for shared-link parsing and handling."""

from __future__ import annotations

import pytest

from housemap.links.deeplink import SharedLinkHandler, parse_listing_link
from housemap.map.events import MapEventChannel, ShowListingOnMap

LISTING_ID = "6f1c2a1e-0d7b-4a59-9a43-1b2f0c9d1001"


class TestParseListingLink:
    @pytest.mark.parametrize(
        "url",
        [
            f"housemap://listing/{LISTING_ID}",
            f"housemap://property/{LISTING_ID}",
            f"housemap:///home/{LISTING_ID}",
            f"https://homes.example.com/listing/{LISTING_ID}",
            f"http://homes.example.com/property/{LISTING_ID}/",
            f"  housemap://home/{LISTING_ID.upper()}  ",
        ],
    )
    def test_accepted_forms(self, url):
        assert parse_listing_link(url) == LISTING_ID

    @pytest.mark.parametrize(
        "url",
        [
            "housemap://listing/not-a-uuid",
            "housemap://settings/profile",
            "https://homes.example.com/about",
            f"ftp://homes.example.com/listing/{LISTING_ID}",
            "",
        ],
    )
    def test_rejected_forms(self, url):
        assert parse_listing_link(url) is None


class TestSharedLinkHandler:
    def test_publishes_show_event(self):
        channel = MapEventChannel()
        received: list[ShowListingOnMap] = []
        channel.subscribe(ShowListingOnMap, received.append)

        handler = SharedLinkHandler(channel)
        assert handler.handle(f"housemap://listing/{LISTING_ID}") == LISTING_ID
        assert [e.listing_id for e in received] == [LISTING_ID]

    def test_ignores_other_links(self):
        channel = MapEventChannel()
        received: list[ShowListingOnMap] = []
        channel.subscribe(ShowListingOnMap, received.append)
        handler = SharedLinkHandler(channel)
        assert handler.handle("https://homes.example.com/about") is None
        assert received == []
