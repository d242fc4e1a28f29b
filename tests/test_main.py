"""Tests for logging configuration and the command line entrypoint."""

from __future__ import annotations

import json

import pytest
import structlog

from transhub import main as main_module
from transhub.config import TranslationSettings
from transhub.logging import configure_logging


def test_configure_logging_outputs_json(capsys):
    configure_logging()
    logger = structlog.get_logger()
    logger.info("unit-test", foo="bar")
    out = capsys.readouterr().out
    assert "unit-test" in out
    assert "foo" in out


@pytest.fixture
def cli_settings(monkeypatch, messages_dir):
    settings = TranslationSettings(
        _env_file=None, environment="prod", files={"base_path": str(messages_dir)}
    )
    monkeypatch.setattr(main_module, "get_settings", lambda: settings)
    return settings


def _last_json(out: str) -> dict:
    start = out.index("{\n")
    end = out.rindex("\n}") + 2
    return json.loads(out[start:end])


@pytest.mark.asyncio
async def test_metrics_command_prints_snapshot(cli_settings, capsys):
    code = await main_module.main(["metrics"])

    body = _last_json(capsys.readouterr().out)
    assert code == 0
    assert body["health"]["status"] == "healthy"
    assert body["metrics"]["database"] is None


@pytest.mark.asyncio
async def test_warmup_command(cli_settings, capsys):
    code = await main_module.main(["warmup", "--locale", "en"])

    body = _last_json(capsys.readouterr().out)
    assert code == 0
    assert body["message"] == "Cache warmed up for locale: en"


@pytest.mark.asyncio
async def test_migrate_dry_run(cli_settings, capsys):
    code = await main_module.main(["migrate", "--locales", "en,es"])

    body = _last_json(capsys.readouterr().out)
    assert code == 0
    assert body["dry_run"] is True
    assert body["total"] == 7
