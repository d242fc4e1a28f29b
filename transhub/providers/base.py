"""Provider contract shared by the file and database backends."""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from transhub.domain.models import TranslationMetrics

ErrorCallback = Callable[[str, Exception], None]
NamespaceTTL = Callable[[str], float]


@runtime_checkable
class TranslationProvider(Protocol):
    async def get_translation(self, key: str, locale: str, namespace: str) -> str | None: ...

    async def get_namespace(self, namespace: str, locale: str) -> dict[str, str]: ...

    async def get_all_namespaces(self, locale: str) -> dict[str, dict[str, str]]: ...

    async def warm_cache(self, namespace: str, locale: str) -> None: ...

    async def invalidate_cache(
        self, namespace: str | None = None, locale: str | None = None
    ) -> None: ...

    async def get_metrics(self) -> TranslationMetrics: ...


__all__ = ["ErrorCallback", "NamespaceTTL", "TranslationProvider"]
