"""Shared test fixtures."""

from __future__ import annotations

import pytest

from housemap.core.config import MapConfig, Settings
from housemap.geo.locations import StaticLocationTable
from housemap.geo.providers.mock import MockGeocoder
from housemap.resolution.cache import CoordinateCache


@pytest.fixture
def table() -> StaticLocationTable:
    return StaticLocationTable()


@pytest.fixture
def cache() -> CoordinateCache:
    return CoordinateCache()


@pytest.fixture
def geocoder() -> MockGeocoder:
    return MockGeocoder()


@pytest.fixture
def map_config() -> MapConfig:
    return MapConfig()


@pytest.fixture
def settings() -> Settings:
    return Settings()
