"""Coordinate resolution and highlight coordination for a listings map."""

__version__ = "0.1.0"
