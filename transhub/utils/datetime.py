"""Time utilities with timezone-aware defaults."""

from __future__ import annotations

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC time with tzinfo."""

    return datetime.now(timezone.utc)


def elapsed_ms(start: float) -> float:
    """Milliseconds since a ``time.perf_counter()`` reading."""

    return (time.perf_counter() - start) * 1000


__all__ = ["elapsed_ms", "utc_now"]
