"""In-memory cache bounded by an approximate byte budget and per-entry TTL."""

from __future__ import annotations

import json
import re
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

from transhub.domain.models import CacheStats

_DEFAULT_MAX_BYTES = 100 * 1024 * 1024
_DEFAULT_TTL_SECONDS = 300

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    expires_at_ms: float
    size: int

    def is_expired(self, now_ms: float) -> bool:
        return now_ms > self.expires_at_ms


def estimate_size(value: Any) -> int:
    """Rough byte size of ``value``: two bytes per serialized character."""

    return len(json.dumps(value, default=str, ensure_ascii=False)) * 2


def compile_glob(pattern: str) -> re.Pattern[str]:
    """Translate a ``*``-only glob into an anchored regex."""

    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")), re.DOTALL)


class BoundedTTLCache:
    """Insertion-ordered cache; the oldest entry is evicted first when over budget."""

    def __init__(
        self,
        max_bytes: int = _DEFAULT_MAX_BYTES,
        default_ttl_seconds: float = _DEFAULT_TTL_SECONDS,
        *,
        clock: Clock = time.time,
    ) -> None:
        self.max_bytes = max_bytes
        self.default_ttl_seconds = default_ttl_seconds
        self._clock = clock
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._current_bytes = 0

    @property
    def current_bytes(self) -> int:
        return self._current_bytes

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.exists(key)

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._live_entry(key)
        if entry is None:
            return default
        return entry.value

    def exists(self, key: str) -> bool:
        return self._live_entry(key) is not None

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = ttl_seconds if ttl_seconds else self.default_ttl_seconds
        size = estimate_size(value)
        previous = self._store.get(key)
        if previous is not None:
            # A replaced key keeps its place in the eviction order.
            self._current_bytes -= previous.size
        while self._current_bytes + size > self.max_bytes and self._store:
            oldest, entry = self._store.popitem(last=False)
            if oldest != key:
                self._current_bytes -= entry.size
        self._store[key] = CacheEntry(
            value=value,
            expires_at_ms=self._now_ms() + ttl * 1000,
            size=size,
        )
        self._current_bytes += size

    def delete(self, key: str) -> None:
        self._remove(key)

    def clear(self, pattern: str | None = None) -> int:
        """Drop every entry, or only keys matching a ``*`` glob. Returns count removed."""

        if pattern is None:
            removed = len(self._store)
            self._store.clear()
            self._current_bytes = 0
            return removed

        matcher = compile_glob(pattern)
        return self.delete_where(lambda key: matcher.fullmatch(key) is not None)

    def delete_where(self, predicate: Callable[[str], bool]) -> int:
        to_remove = [key for key in self._store if predicate(key)]
        for key in to_remove:
            self._remove(key)
        return len(to_remove)

    def stats(self) -> CacheStats:
        return CacheStats(
            entries=len(self._store),
            memory_usage=self._current_bytes,
            max_size=self.max_bytes,
            utilization_rate=self._current_bytes / self.max_bytes if self.max_bytes else 0.0,
        )

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def _live_entry(self, key: str) -> CacheEntry | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._now_ms()):
            self._remove(key)
            return None
        return entry

    def _remove(self, key: str) -> None:
        entry = self._store.pop(key, None)
        if entry is not None:
            self._current_bytes -= entry.size


__all__ = ["BoundedTTLCache", "CacheEntry", "compile_glob", "estimate_size"]
