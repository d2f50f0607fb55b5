"""Tests for the static location table."""

from __future__ import annotations

import pytest

from housemap.core.types import Coordinate, ResolutionTier
from housemap.geo.locations import (
    StaticLocationTable,
    city_state_key,
    normalize_state,
)


class TestNormalization:
    def test_state_code_lowercased(self):
        assert normalize_state(" FL ") == "fl"

    def test_full_state_name_mapped_to_code(self):
        assert normalize_state("New  York") == "ny"

    def test_empty_state(self):
        assert normalize_state(None) == ""
        assert normalize_state("   ") == ""

    def test_city_state_key(self):
        assert city_state_key("  Miami   Beach ", "Florida") == "miami beach,fl"

    def test_city_state_key_requires_both(self):
        assert city_state_key("Miami", None) == ""
        assert city_state_key("", "FL") == ""


class TestStaticLocationTable:
    def test_city_hit(self, table):
        hit = table.lookup("Miami", "FL")
        assert hit is not None
        coord, tier = hit
        assert tier == ResolutionTier.CITY_STATE
        assert coord == Coordinate(latitude=25.7617, longitude=-80.1918)

    def test_city_hit_with_full_state_name(self, table):
        hit = table.lookup("miami", "florida")
        assert hit is not None
        assert hit[1] == ResolutionTier.CITY_STATE

    def test_same_city_name_in_two_states(self, table):
        portland_me = table.lookup_city("Portland", "ME")
        portland_or = table.lookup_city("Portland", "OR")
        assert portland_me is not None and portland_or is not None
        assert portland_me != portland_or

    def test_unknown_city_falls_back_to_state(self, table):
        hit = table.lookup("Smallville", "FL")
        assert hit is not None
        coord, tier = hit
        assert tier == ResolutionTier.STATE_CENTER
        assert coord == table.lookup_state("FL")

    def test_bare_state(self, table):
        hit = table.lookup(None, "Montana")
        assert hit is not None
        assert hit[1] == ResolutionTier.STATE_CENTER

    def test_both_miss(self, table):
        assert table.lookup("Nowhere", "ZZ") is None
        assert table.lookup(None, None) is None

    def test_every_state_has_a_center(self, table):
        assert table.state_count == 51

    def test_custom_tables(self):
        table = StaticLocationTable(cities={"gotham,nj": (40.0, -74.0)}, states={})
        assert table.lookup("Gotham", "NJ")[1] == ResolutionTier.CITY_STATE
        assert table.lookup("Metropolis", "NJ") is None

    def test_extra_locations_from_yaml(self, tmp_path):
        extra = tmp_path / "extra.yml"
        extra.write_text(
            "cities:\n"
            "  'Key West,FL': [24.5551, -81.7800]\n"
            "states:\n"
            "  PR: [18.2208, -66.5901]\n"
        )
        table = StaticLocationTable(extra_path=extra)
        coord, tier = table.lookup("key west", "fl")
        assert tier == ResolutionTier.CITY_STATE
        assert coord.latitude == pytest.approx(24.5551)
        assert table.lookup(None, "PR")[1] == ResolutionTier.STATE_CENTER

    def test_missing_extra_file_is_ignored(self, tmp_path):
        table = StaticLocationTable(extra_path=tmp_path / "missing.yml")
        assert table.lookup("Miami", "FL") is not None
