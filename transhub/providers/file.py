"""Translation provider reading static JSON documents from disk."""

from __future__ import annotations

import asyncio
import json
import time
from pathlib import Path
from typing import Any

from transhub.cache import BoundedTTLCache
from transhub.domain.models import CacheStats, HealthStatus, TranslationMetrics
from transhub.logging import logger
from transhub.providers.base import ErrorCallback, NamespaceTTL
from transhub.providers.metrics import MetricsTracker
from transhub.services.exceptions import NamespaceLoadError
from transhub.utils.datetime import elapsed_ms
from transhub.utils.flatten import flatten_translations, lookup

DEFAULT_MAX_BYTES = 50 * 1024 * 1024
DEFAULT_TTL_SECONDS = 300


async def _read_json(path: Path) -> Any | None:
    """Parse ``path``; ``None`` when the file does not exist."""

    try:
        content = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise NamespaceLoadError(f"Cannot read {path}: {exc}") from exc
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise NamespaceLoadError(f"Malformed JSON in {path}: {exc}") from exc


class FileNamespaceProvider:
    """Serve lookups from ``{base}/{locale}/{namespace}.json`` or ``{base}/{locale}.json``."""

    def __init__(
        self,
        base_path: str | Path = "./messages",
        *,
        max_bytes: int = DEFAULT_MAX_BYTES,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        cache: BoundedTTLCache | None = None,
        namespace_ttl: NamespaceTTL | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.base_path = Path(base_path)
        self.ttl_seconds = ttl_seconds
        self.cache = cache if cache is not None else BoundedTTLCache(max_bytes, ttl_seconds)
        self.metrics = MetricsTracker()
        self._namespace_ttl = namespace_ttl
        self._on_error = on_error

    @staticmethod
    def cache_key(namespace: str, locale: str) -> str:
        return f"{namespace}:{locale}"

    async def get_translation(self, key: str, locale: str, namespace: str) -> str | None:
        started = self.metrics.start()
        try:
            data = await self._cached_namespace(namespace, locale)
            return lookup(data, key) or None
        except Exception as exc:
            self._report("get_translation", exc, key=key, locale=locale, namespace=namespace)
            return None
        finally:
            self.metrics.finish(started)

    async def get_namespace(self, namespace: str, locale: str) -> dict[str, str]:
        started = self.metrics.start()
        try:
            data = await self._cached_namespace(namespace, locale)
            return dict(data) if data else {}
        except Exception as exc:
            self._report("get_namespace", exc, locale=locale, namespace=namespace)
            return {}
        finally:
            self.metrics.finish(started)

    async def get_all_namespaces(self, locale: str) -> dict[str, dict[str, str]]:
        started = self.metrics.start()
        try:
            document = await _read_json(self.base_path / f"{locale}.json")
            if not isinstance(document, dict):
                return {}
            return {
                name: flatten_translations(section)
                for name, section in document.items()
                if isinstance(section, dict)
            }
        except Exception as exc:
            self._report("get_all_namespaces", exc, locale=locale)
            return {}
        finally:
            self.metrics.finish(started)

    async def warm_cache(self, namespace: str, locale: str) -> None:
        try:
            data = await self.load_namespace(namespace, locale)
        except Exception as exc:
            logger.warning(
                "file_cache_warm_failed", namespace=namespace, locale=locale, error=str(exc)
            )
            return
        if data is not None:
            self._store(namespace, locale, data)

    async def invalidate_cache(
        self, namespace: str | None = None, locale: str | None = None
    ) -> None:
        if namespace and locale:
            self.cache.delete(self.cache_key(namespace, locale))
        elif namespace:
            self.cache.clear(f"{namespace}:*")
        elif locale:
            self.cache.clear(f"*:{locale}")
        else:
            self.cache.clear()
        logger.info("file_cache_invalidated", namespace=namespace, locale=locale)

    async def get_metrics(self) -> TranslationMetrics:
        return self.metrics.snapshot()

    def reset_metrics(self) -> None:
        self.metrics.reset()

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    async def health_check(self) -> HealthStatus:
        started = time.perf_counter()
        is_dir = await asyncio.to_thread(self.base_path.is_dir)
        return HealthStatus(status="ok" if is_dir else "error", latency_ms=elapsed_ms(started))

    async def load_namespace(self, namespace: str, locale: str) -> dict[str, str] | None:
        """Per-namespace file first, then the namespace section of the locale file."""

        specific = await _read_json(self.base_path / locale / f"{namespace.lower()}.json")
        if isinstance(specific, dict):
            return flatten_translations(specific)

        combined = await _read_json(self.base_path / f"{locale}.json")
        if isinstance(combined, dict) and isinstance(combined.get(namespace), dict):
            return flatten_translations(combined[namespace])

        logger.warning("translation_file_not_found", namespace=namespace, locale=locale)
        return None

    async def _cached_namespace(self, namespace: str, locale: str) -> dict[str, str] | None:
        data = self.cache.get(self.cache_key(namespace, locale))
        if data is not None:
            self.metrics.hit()
            return data
        data = await self.load_namespace(namespace, locale)
        if data is not None:
            self._store(namespace, locale, data)
        return data

    def _store(self, namespace: str, locale: str, data: dict[str, str]) -> None:
        ttl = self._namespace_ttl(namespace) if self._namespace_ttl else self.ttl_seconds
        if ttl > 0:
            self.cache.set(self.cache_key(namespace, locale), data, ttl)

    def _report(self, operation: str, exc: Exception, **context: str) -> None:
        self.metrics.error()
        logger.error(
            "file_translation_error",
            operation=operation,
            error=str(exc),
            exception_type=exc.__class__.__name__,
            **context,
        )
        if self._on_error is not None:
            try:
                self._on_error(operation, exc)
            except Exception:
                logger.exception("error_callback_failed", operation=operation)


__all__ = ["FileNamespaceProvider"]
