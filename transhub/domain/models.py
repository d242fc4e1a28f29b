"""Pydantic models shared across providers and services."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from transhub.utils.datetime import utc_now


class TranslationMetrics(BaseModel):
    cache_hit_rate: float = 0.0
    avg_response_time: float = 0.0
    total_requests: int = 0
    error_rate: float = 0.0
    last_updated: datetime = Field(default_factory=utc_now)


class CacheStats(BaseModel):
    entries: int = 0
    memory_usage: int = 0
    max_size: int
    utilization_rate: float = 0.0


class HealthStatus(BaseModel):
    status: Literal["ok", "error"]
    latency_ms: float


class ProviderHealth(BaseModel):
    file: Literal["ok", "error"] = "ok"
    database: Literal["ok", "error", "disabled"] = "disabled"


class ProviderLatency(BaseModel):
    file: float = 0.0
    database: float | None = None


class ManagerHealth(BaseModel):
    status: Literal["healthy", "degraded", "unhealthy"] = "healthy"
    providers: ProviderHealth = Field(default_factory=ProviderHealth)
    latency: ProviderLatency = Field(default_factory=ProviderLatency)


class SystemMetrics(BaseModel):
    providers_active: int
    database_enabled: bool
    cache_enabled: bool = True


class ManagerMetrics(BaseModel):
    file: TranslationMetrics
    database: TranslationMetrics | None = None
    system: SystemMetrics


class MigrationRecord(BaseModel):
    namespace: str
    locale: str
    key: str
    value: str


class MigrationReport(BaseModel):
    total: int = 0
    written: int = 0
    failed: int = 0
    dry_run: bool = True
    namespaces: list[str] = Field(default_factory=list)


__all__ = [
    "CacheStats",
    "HealthStatus",
    "ManagerHealth",
    "ManagerMetrics",
    "MigrationRecord",
    "MigrationReport",
    "ProviderHealth",
    "ProviderLatency",
    "SystemMetrics",
    "TranslationMetrics",
]
