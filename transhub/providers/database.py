"""Translation provider backed by the relational store."""

from __future__ import annotations

import time
from typing import Any

from sqlalchemy import select, text, update
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from transhub.cache import BoundedTTLCache
from transhub.db.base import Base
from transhub.db.models import Locale, Namespace, Translation
from transhub.db.session import Database
from transhub.domain.models import CacheStats, HealthStatus, TranslationMetrics
from transhub.logging import logger
from transhub.providers.base import ErrorCallback, NamespaceTTL
from transhub.providers.metrics import MetricsTracker
from transhub.utils.datetime import elapsed_ms, utc_now

DEFAULT_MAX_BYTES = 50 * 1024 * 1024
DEFAULT_TTL_SECONDS = 900

_MISSING = object()
_AGGREGATE_PREFIXES = ("namespace", "all-namespaces")


def _key_entry_namespace(cache_key: str) -> str | None:
    """Namespace segment of a ``{locale}:{namespace}:{key}`` entry, else ``None``."""

    parts = cache_key.split(":", 2)
    if len(parts) != 3 or parts[0] in _AGGREGATE_PREFIXES:
        return None
    return parts[1]


def _upsert(
    dialect: str,
    model: type[Base],
    values: dict[str, Any],
    conflict_columns: list[str],
    *,
    update_columns: tuple[str, ...] = (),
):
    """Insert ``values``, updating ``update_columns`` of the row that already holds the key."""

    if dialect in ("mysql", "mariadb"):
        stmt = mysql.insert(model).values(**values)
        columns = update_columns or tuple(conflict_columns[:1])
        return stmt.on_duplicate_key_update({name: stmt.inserted[name] for name in columns})
    if dialect in ("sqlite", "postgresql"):
        insert = sqlite.insert if dialect == "sqlite" else postgresql.insert
        stmt = insert(model).values(**values)
        if not update_columns:
            return stmt.on_conflict_do_nothing(index_elements=conflict_columns)
        return stmt.on_conflict_do_update(
            index_elements=conflict_columns,
            set_={name: stmt.excluded[name] for name in update_columns},
        )
    raise NotImplementedError(f"No upsert support for dialect {dialect!r}")


class DatabaseNamespaceProvider:
    """Resolve translations from ``locales``/``namespaces``/``translations`` rows.

    Lookups are cached per key, per namespace and per locale. Negative results
    (unknown locale, namespace or key) are cached as well, so they stay stale
    until the TTL expires or the cache is invalidated.
    """

    def __init__(
        self,
        database: Database,
        *,
        max_bytes: int = DEFAULT_MAX_BYTES,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        cache: BoundedTTLCache | None = None,
        namespace_ttl: NamespaceTTL | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.database = database
        self.ttl_seconds = ttl_seconds
        self.cache = cache if cache is not None else BoundedTTLCache(max_bytes, ttl_seconds)
        self.metrics = MetricsTracker()
        self._namespace_ttl = namespace_ttl
        self._on_error = on_error

    @staticmethod
    def key_cache_key(key: str, locale: str, namespace: str) -> str:
        return f"{locale}:{namespace}:{key}"

    @staticmethod
    def namespace_cache_key(namespace: str, locale: str) -> str:
        return f"namespace:{locale}:{namespace}"

    @staticmethod
    def locale_cache_key(locale: str) -> str:
        return f"all-namespaces:{locale}"

    async def get_translation(self, key: str, locale: str, namespace: str) -> str | None:
        started = self.metrics.start()
        cache_key = self.key_cache_key(key, locale, namespace)
        try:
            cached = self.cache.get(cache_key, _MISSING)
            if cached is not _MISSING:
                self.metrics.hit()
                return cached

            async with self.database.session() as session:
                locale_row = await self._find_locale(session, locale)
                namespace_row = await self._find_namespace(session, namespace)
                if locale_row is None or namespace_row is None:
                    self._store(cache_key, None, namespace)
                    return None

                stmt = select(Translation.id, Translation.value).where(
                    Translation.key == key,
                    Translation.locale_id == locale_row.id,
                    Translation.namespace_id == namespace_row.id,
                    Translation.is_active.is_(True),
                )
                row = (await session.execute(stmt)).one_or_none()
                value = row.value if row is not None else None
                if row is not None:
                    await self._record_usage(session, row.id)

            self._store(cache_key, value, namespace)
            return value
        except Exception as exc:
            self._report("get_translation", exc, key=key, locale=locale, namespace=namespace)
            return None
        finally:
            self.metrics.finish(started)

    async def get_namespace(self, namespace: str, locale: str) -> dict[str, str]:
        started = self.metrics.start()
        cache_key = self.namespace_cache_key(namespace, locale)
        try:
            cached = self.cache.get(cache_key)
            if cached is not None:
                self.metrics.hit()
                return dict(cached)

            async with self.database.session() as session:
                locale_row = await self._find_locale(session, locale)
                namespace_row = await self._find_namespace(session, namespace)
                if locale_row is None or namespace_row is None:
                    self._store(cache_key, {}, namespace)
                    return {}

                stmt = select(Translation.key, Translation.value).where(
                    Translation.locale_id == locale_row.id,
                    Translation.namespace_id == namespace_row.id,
                    Translation.is_active.is_(True),
                )
                data = {row.key: row.value for row in (await session.execute(stmt)).all()}

            self._store(cache_key, data, namespace)
            return dict(data)
        except Exception as exc:
            self._report("get_namespace", exc, locale=locale, namespace=namespace)
            return {}
        finally:
            self.metrics.finish(started)

    async def get_all_namespaces(self, locale: str) -> dict[str, dict[str, str]]:
        started = self.metrics.start()
        cache_key = self.locale_cache_key(locale)
        try:
            cached = self.cache.get(cache_key)
            if cached is not None:
                self.metrics.hit()
                return {name: dict(values) for name, values in cached.items()}

            async with self.database.session() as session:
                locale_row = await self._find_locale(session, locale)
                if locale_row is None:
                    return {}

                names = await session.execute(
                    select(Namespace.name).where(Namespace.is_active.is_(True))
                )
                result: dict[str, dict[str, str]] = {name: {} for name in names.scalars()}
                stmt = (
                    select(Namespace.name, Translation.key, Translation.value)
                    .select_from(Translation)
                    .join(Namespace, Translation.namespace_id == Namespace.id)
                    .where(
                        Translation.locale_id == locale_row.id,
                        Translation.is_active.is_(True),
                        Namespace.is_active.is_(True),
                    )
                )
                for row in (await session.execute(stmt)).all():
                    result.setdefault(row.name, {})[row.key] = row.value

            ttl = min((self._ttl_for(name) for name in result), default=self.ttl_seconds)
            if ttl > 0:
                self.cache.set(cache_key, result, ttl)
            return {name: dict(values) for name, values in result.items()}
        except Exception as exc:
            self._report("get_all_namespaces", exc, locale=locale)
            return {}
        finally:
            self.metrics.finish(started)

    async def set_translation(self, key: str, value: str, locale: str, namespace: str) -> bool:
        """Upsert a translation, creating its locale and namespace on first use.

        Each row is written with a single ``INSERT ... ON CONFLICT`` statement keyed
        by the table's unique constraint, so concurrent writers to a new scope do
        not collide.
        """

        try:
            async with self.database.session() as session:
                dialect = session.get_bind().dialect.name
                await session.execute(
                    _upsert(
                        dialect,
                        Locale,
                        {"code": locale, "name": locale.upper(), "is_active": True},
                        ["code"],
                    )
                )
                await session.execute(
                    _upsert(
                        dialect,
                        Namespace,
                        {
                            "name": namespace,
                            "description": f"Auto-created namespace: {namespace}",
                            "is_active": True,
                        },
                        ["name"],
                    )
                )
                locale_id = (
                    await session.execute(select(Locale.id).where(Locale.code == locale))
                ).scalar_one()
                namespace_id = (
                    await session.execute(select(Namespace.id).where(Namespace.name == namespace))
                ).scalar_one()
                await session.execute(
                    _upsert(
                        dialect,
                        Translation,
                        {
                            "key": key,
                            "value": value,
                            "locale_id": locale_id,
                            "namespace_id": namespace_id,
                            "is_active": True,
                            "usage_count": 0,
                            "updated_at": utc_now(),
                        },
                        ["key", "locale_id", "namespace_id"],
                        update_columns=("value", "is_active", "updated_at"),
                    )
                )
                await session.commit()
        except Exception as exc:
            logger.exception(
                "database_translation_set_failed", key=key, locale=locale, namespace=namespace
            )
            self._notify("set_translation", exc)
            return False

        self.cache.delete(self.key_cache_key(key, locale, namespace))
        self.cache.delete(self.namespace_cache_key(namespace, locale))
        self.cache.delete(self.locale_cache_key(locale))
        logger.info("database_translation_set", key=key, locale=locale, namespace=namespace)
        return True

    async def warm_cache(self, namespace: str, locale: str) -> None:
        await self.get_namespace(namespace, locale)

    async def invalidate_cache(
        self, namespace: str | None = None, locale: str | None = None
    ) -> None:
        if namespace and locale:
            self.cache.delete(self.namespace_cache_key(namespace, locale))
            self.cache.delete(self.locale_cache_key(locale))
            self.cache.clear(f"{locale}:{namespace}:*")
        elif namespace:
            self.cache.delete_where(
                lambda cache_key: _key_entry_namespace(cache_key) == namespace
            )
            self.cache.clear(self.namespace_cache_key(namespace, "*"))
            self.cache.clear(self.locale_cache_key("*"))
        elif locale:
            self.cache.clear(f"{locale}:*")
            self.cache.clear(self.namespace_cache_key("*", locale))
            self.cache.delete(self.locale_cache_key(locale))
        else:
            self.cache.clear()
        logger.info("database_cache_invalidated", namespace=namespace, locale=locale)

    async def get_metrics(self) -> TranslationMetrics:
        return self.metrics.snapshot()

    def reset_metrics(self) -> None:
        self.metrics.reset()

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    async def health_check(self) -> HealthStatus:
        started = time.perf_counter()
        try:
            async with self.database.session() as session:
                await session.execute(text("SELECT 1"))
        except Exception as exc:
            logger.error("database_health_check_failed", error=str(exc))
            return HealthStatus(status="error", latency_ms=elapsed_ms(started))
        return HealthStatus(status="ok", latency_ms=elapsed_ms(started))

    async def _find_locale(self, session: AsyncSession, code: str) -> Locale | None:
        result = await session.execute(select(Locale).where(Locale.code == code))
        return result.scalar_one_or_none()

    async def _find_namespace(self, session: AsyncSession, name: str) -> Namespace | None:
        result = await session.execute(select(Namespace).where(Namespace.name == name))
        return result.scalar_one_or_none()

    async def _record_usage(self, session: AsyncSession, translation_id: int) -> None:
        # A failed usage bump must never fail the read that triggered it.
        try:
            await session.execute(
                update(Translation)
                .where(Translation.id == translation_id)
                .values(usage_count=Translation.usage_count + 1, last_used_at=utc_now())
            )
            await session.commit()
        except Exception as exc:
            logger.warning(
                "translation_usage_update_failed", translation_id=translation_id, error=str(exc)
            )
            try:
                await session.rollback()
            except Exception:
                logger.exception("translation_usage_rollback_failed", translation_id=translation_id)

    def _ttl_for(self, namespace: str) -> float:
        return self._namespace_ttl(namespace) if self._namespace_ttl else self.ttl_seconds

    def _store(self, cache_key: str, value: Any, namespace: str) -> None:
        ttl = self._ttl_for(namespace)
        if ttl > 0:
            self.cache.set(cache_key, value, ttl)

    def _report(self, operation: str, exc: Exception, **context: str) -> None:
        self.metrics.error()
        logger.error(
            "database_translation_error",
            operation=operation,
            error=str(exc),
            exception_type=exc.__class__.__name__,
            **context,
        )
        self._notify(operation, exc)

    def _notify(self, operation: str, exc: Exception) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(operation, exc)
        except Exception:
            logger.exception("error_callback_failed", operation=operation)


__all__ = ["DatabaseNamespaceProvider"]
