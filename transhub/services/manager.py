"""Strategy-driven composition of the file and database providers."""

from __future__ import annotations

import asyncio

from transhub.config import NamespaceConfig, TranslationSettings, get_settings
from transhub.db.session import Database
from transhub.domain.models import (
    ManagerHealth,
    ManagerMetrics,
    SystemMetrics,
)
from transhub.logging import logger
from transhub.providers import DatabaseNamespaceProvider, FileNamespaceProvider
from transhub.providers.base import ErrorCallback


class TranslationManager:
    """Route lookups per namespace strategy.

    ``static`` namespaces read JSON files only. ``dynamic`` and ``hybrid``
    namespaces read the database first when it is enabled, and fall back to
    the files when the namespace config allows it.
    """

    def __init__(
        self,
        file_provider: FileNamespaceProvider,
        database_provider: DatabaseNamespaceProvider | None = None,
        *,
        settings: TranslationSettings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.file_provider = file_provider
        self.database_provider = database_provider

    @classmethod
    def from_settings(
        cls,
        settings: TranslationSettings | None = None,
        *,
        database: Database | None = None,
        on_error: ErrorCallback | None = None,
    ) -> "TranslationManager":
        settings = settings or get_settings()

        def namespace_ttl(namespace: str) -> float:
            return settings.namespace_config(namespace).cache_timeout

        file_provider = FileNamespaceProvider(
            settings.files.base_path,
            max_bytes=settings.files.max_bytes,
            ttl_seconds=settings.files.ttl_seconds,
            on_error=on_error,
        )
        database_provider = None
        if settings.database.enabled:
            database_provider = DatabaseNamespaceProvider(
                database or Database(settings.database),
                max_bytes=settings.cache.max_bytes,
                ttl_seconds=settings.cache.ttl_seconds,
                namespace_ttl=namespace_ttl,
                on_error=on_error,
            )
        return cls(file_provider, database_provider, settings=settings)

    def set_database_provider(self, provider: DatabaseNamespaceProvider) -> None:
        self.database_provider = provider

    def namespace_config(self, namespace: str) -> NamespaceConfig:
        return self.settings.namespace_config(namespace)

    def should_use_database(self, namespace: str) -> bool:
        config = self.namespace_config(namespace)
        return (
            self.settings.database.enabled
            and self.database_provider is not None
            and config.strategy in ("dynamic", "hybrid")
        )

    async def get_translation(self, key: str, locale: str, namespace: str) -> str | None:
        if self.should_use_database(namespace):
            value = await self.database_provider.get_translation(key, locale, namespace)
            if value is not None or not self.namespace_config(namespace).fallback_to_static:
                return value
        return await self.file_provider.get_translation(key, locale, namespace)

    async def get_namespace(self, namespace: str, locale: str) -> dict[str, str]:
        if self.should_use_database(namespace):
            data = await self.database_provider.get_namespace(namespace, locale)
            if data or not self.namespace_config(namespace).fallback_to_static:
                return data
        return await self.file_provider.get_namespace(namespace, locale)

    async def get_all_namespaces(self, locale: str) -> dict[str, dict[str, str]]:
        result = await self.file_provider.get_all_namespaces(locale)
        if self.database_provider is None or not self.settings.database.enabled:
            return result
        dynamic = await self.database_provider.get_all_namespaces(locale)
        for name, values in dynamic.items():
            if not self.should_use_database(name):
                continue
            merged = result.setdefault(name, {})
            merged.update(values)
        return result

    async def warm_cache(self, namespace: str, locale: str) -> None:
        await self.file_provider.warm_cache(namespace, locale)
        if self.should_use_database(namespace):
            await self.database_provider.warm_cache(namespace, locale)

    async def preload_critical_translations(self, locale: str) -> list[str]:
        """Warm every namespace that declares preload keys. Returns the warmed names."""

        namespaces = [
            name for name, config in self.settings.namespaces.items() if config.preload_keys
        ]
        results = await asyncio.gather(
            *(self.warm_cache(name, locale) for name in namespaces),
            return_exceptions=True,
        )
        warmed = []
        for name, outcome in zip(namespaces, results):
            if isinstance(outcome, Exception):
                logger.warning(
                    "translation_preload_failed", namespace=name, locale=locale, error=str(outcome)
                )
            else:
                warmed.append(name)
        logger.info("translations_preloaded", locale=locale, namespaces=warmed)
        return warmed

    async def invalidate_cache(
        self, namespace: str | None = None, locale: str | None = None
    ) -> None:
        await self.file_provider.invalidate_cache(namespace, locale)
        if self.database_provider is not None:
            await self.database_provider.invalidate_cache(namespace, locale)

    def reset_metrics(self) -> None:
        self.file_provider.reset_metrics()
        if self.database_provider is not None:
            self.database_provider.reset_metrics()

    async def get_metrics(self) -> ManagerMetrics:
        database_metrics = None
        if self.database_provider is not None:
            database_metrics = await self.database_provider.get_metrics()
        return ManagerMetrics(
            file=await self.file_provider.get_metrics(),
            database=database_metrics,
            system=SystemMetrics(
                providers_active=2 if self.database_provider is not None else 1,
                database_enabled=self.settings.database.enabled,
            ),
        )

    async def health_check(self) -> ManagerHealth:
        health = ManagerHealth()
        file_health = await self.file_provider.health_check()
        health.providers.file = file_health.status
        health.latency.file = file_health.latency_ms
        if file_health.status == "error":
            health.status = "degraded"

        if self.database_provider is not None:
            db_health = await self.database_provider.health_check()
            health.providers.database = db_health.status
            health.latency.database = db_health.latency_ms
            if db_health.status == "error":
                health.status = "unhealthy" if file_health.status == "error" else "degraded"
        return health


__all__ = ["TranslationManager"]
