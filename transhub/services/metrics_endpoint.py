"""Framework-agnostic handlers behind the translation metrics endpoint."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ValidationError, model_validator

from transhub.logging import logger
from transhub.services.exceptions import InvalidMetricsAction
from transhub.services.manager import TranslationManager
from transhub.utils.datetime import utc_now


class MetricsAction(BaseModel):
    action: Literal["reset", "warmup"]
    locale: str | None = None

    @model_validator(mode="after")
    def _warmup_needs_locale(self) -> "MetricsAction":
        if self.action == "warmup" and not self.locale:
            raise ValueError("warmup requires a locale")
        return self


def parse_action(payload: Any) -> MetricsAction:
    try:
        return MetricsAction.model_validate(payload)
    except ValidationError as exc:
        raise InvalidMetricsAction("Invalid action. Supported: reset, warmup") from exc


async def get_metrics_response(
    manager: TranslationManager, *, version: str | None = None
) -> tuple[int, dict[str, Any]]:
    try:
        metrics = await manager.get_metrics()
        health = await manager.health_check()
    except Exception:
        logger.exception("translation_metrics_failed")
        return 500, {"error": "Failed to get metrics", "timestamp": utc_now().isoformat()}
    return 200, {
        "timestamp": utc_now().isoformat(),
        "metrics": metrics.model_dump(mode="json"),
        "health": health.model_dump(mode="json"),
        "version": version or manager.settings.version,
    }


async def handle_metrics_action(
    manager: TranslationManager, payload: Any
) -> tuple[int, dict[str, Any]]:
    try:
        command = parse_action(payload)
    except InvalidMetricsAction as exc:
        return 400, {"error": str(exc)}

    try:
        if command.action == "reset":
            await manager.invalidate_cache()
            message = "Cache invalidated"
        else:
            await manager.preload_critical_translations(command.locale)
            message = f"Cache warmed up for locale: {command.locale}"
    except Exception:
        logger.exception("translation_metrics_action_failed", action=command.action)
        return 500, {"error": "Failed to process request", "timestamp": utc_now().isoformat()}

    logger.info("translation_metrics_action", action=command.action, locale=command.locale)
    return 200, {"success": True, "message": message, "timestamp": utc_now().isoformat()}


__all__ = [
    "MetricsAction",
    "get_metrics_response",
    "handle_metrics_action",
    "parse_action",
]
