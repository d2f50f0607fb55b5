"""Geocoding providers, distance helpers and the static location table."""

from housemap.geo.client import Geocoder, create_geocoder

__all__ = ["Geocoder", "create_geocoder"]
