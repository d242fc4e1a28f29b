"""Tests for the metrics endpoint handlers."""

from __future__ import annotations

import pytest

from transhub.services.manager import TranslationManager
from transhub.services.metrics_endpoint import get_metrics_response, handle_metrics_action


@pytest.fixture
def manager(settings, database) -> TranslationManager:
    return TranslationManager.from_settings(settings, database=database)


@pytest.mark.asyncio
async def test_get_returns_metrics_and_health(manager):
    await manager.get_translation("save", "en", "Common")

    status, body = await get_metrics_response(manager)

    assert status == 200
    assert body["version"] == "1.0.0"
    assert body["metrics"]["file"]["total_requests"] == 1
    assert body["metrics"]["system"]["providers_active"] == 2
    assert body["health"]["status"] == "healthy"
    assert "timestamp" in body


@pytest.mark.asyncio
async def test_reset_action_clears_caches(manager):
    await manager.warm_cache("HomePage", "en")

    status, body = await handle_metrics_action(manager, {"action": "reset"})

    assert status == 200
    assert body["success"] is True
    assert body["message"] == "Cache invalidated"
    assert len(manager.file_provider.cache) == 0


@pytest.mark.asyncio
async def test_warmup_action_preloads_locale(manager):
    status, body = await handle_metrics_action(manager, {"action": "warmup", "locale": "en"})

    assert status == 200
    assert body["message"] == "Cache warmed up for locale: en"
    assert manager.file_provider.cache.exists("HomePage:en")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [{"action": "warmup"}, {"action": "explode"}, {}, "reset"],
)
async def test_invalid_actions_are_rejected(manager, payload):
    status, body = await handle_metrics_action(manager, payload)

    assert status == 400
    assert body["error"] == "Invalid action. Supported: reset, warmup"


@pytest.mark.asyncio
async def test_unexpected_failure_maps_to_500(manager, monkeypatch):
    async def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(manager, "invalidate_cache", boom)
    monkeypatch.setattr(manager, "get_metrics", boom)

    status, body = await handle_metrics_action(manager, {"action": "reset"})
    assert status == 500
    assert body["error"] == "Failed to process request"

    status, body = await get_metrics_response(manager)
    assert status == 500
