"""Presentation-facing lookups that never render blank text."""

from __future__ import annotations

from typing import Any

from transhub.services.manager import TranslationManager


class I18nService:
    def __init__(
        self,
        manager: TranslationManager,
        *,
        default_locale: str | None = None,
        default_namespace: str = "Common",
    ) -> None:
        self.manager = manager
        self.default_locale = default_locale or manager.settings.default_locale
        self.default_namespace = default_namespace

    async def gettext(
        self,
        key: str,
        *,
        locale: str | None = None,
        namespace: str | None = None,
        **kwargs: Any,
    ) -> str:
        loc = locale or self.default_locale
        ns = namespace or self.default_namespace
        text = await self.manager.get_translation(key, loc, ns)
        if text is None and loc != self.default_locale:
            text = await self.manager.get_translation(key, self.default_locale, ns)
        if text is None:
            text = key
        return text.format(**kwargs) if kwargs else text


__all__ = ["I18nService"]
