"""Hybrid translation resolution and caching layer."""

__version__ = "1.0.0"
