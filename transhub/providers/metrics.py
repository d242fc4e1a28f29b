"""Request, hit, error and latency counters embedded in every provider."""

from __future__ import annotations

import time
from datetime import datetime

from transhub.domain.models import TranslationMetrics
from transhub.utils.datetime import elapsed_ms, utc_now


class MetricsTracker:
    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.total_requests = 0
        self.cache_hits = 0
        self.error_count = 0
        self.total_response_time_ms = 0.0
        self.last_updated: datetime = utc_now()

    def start(self) -> float:
        self.total_requests += 1
        return time.perf_counter()

    def hit(self) -> None:
        self.cache_hits += 1

    def error(self) -> None:
        self.error_count += 1

    def finish(self, started: float) -> None:
        self.total_response_time_ms += elapsed_ms(started)
        self.last_updated = utc_now()

    def snapshot(self) -> TranslationMetrics:
        total = self.total_requests
        if total == 0:
            return TranslationMetrics(last_updated=self.last_updated)
        return TranslationMetrics(
            cache_hit_rate=self.cache_hits / total,
            avg_response_time=self.total_response_time_ms / total,
            total_requests=total,
            error_rate=self.error_count / total,
            last_updated=self.last_updated,
        )


__all__ = ["MetricsTracker"]
