"""Caching primitives."""

from transhub.cache.memory import BoundedTTLCache, CacheEntry, estimate_size

__all__ = ["BoundedTTLCache", "CacheEntry", "estimate_size"]
