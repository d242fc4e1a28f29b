"""Tests for moving JSON locale files into the database."""

from __future__ import annotations

import asyncio

import pytest

from transhub.providers import DatabaseNamespaceProvider
from transhub.services import migration
from transhub.services.migration import collect_file_translations, migrate_translations


def test_collect_file_translations_splits_namespaces(messages_dir):
    records = collect_file_translations(messages_dir, "en")
    triples = {(r.namespace, r.key, r.value) for r in records}

    assert ("HomePage", "hero.cta", "Start") in triples
    assert ("Common", "save", "Save (combined)") in triples
    assert ("default", "version", "3") in triples
    assert collect_file_translations(messages_dir, "fr") == []


@pytest.mark.asyncio
async def test_dry_run_reports_without_writing(messages_dir, database):
    report = await migrate_translations(None, messages_dir, ["en", "es", "fr"])

    assert report.dry_run is True
    assert report.total == 7
    assert report.written == 0
    assert report.namespaces == ["Common", "HomePage", "SEO", "default"]
    assert database.session_calls == 0


@pytest.mark.asyncio
async def test_execute_writes_through_provider(messages_dir, database):
    provider = DatabaseNamespaceProvider(database)

    report = await migrate_translations(provider, messages_dir, ["es"], dry_run=False)

    assert report.written == 2
    assert report.failed == 0
    assert await provider.get_translation("title", "es", "HomePage") == "Bienvenido"


@pytest.mark.asyncio
async def test_execute_counts_failures(messages_dir, exploding_database):
    provider = DatabaseNamespaceProvider(exploding_database)

    report = await migrate_translations(provider, messages_dir, ["es"], dry_run=False)

    assert report.written == 0
    assert report.failed == 2


@pytest.mark.asyncio
async def test_execute_requires_provider(messages_dir):
    with pytest.raises(ValueError):
        await migrate_translations(None, messages_dir, ["en"], dry_run=False)


@pytest.mark.asyncio
async def test_malformed_locale_is_skipped(tmp_path):
    (tmp_path / "en.json").write_text("{", encoding="utf-8")
    report = await migrate_translations(None, tmp_path, ["en"])
    assert report.total == 0


@pytest.mark.asyncio
async def test_locale_files_are_read_in_a_worker_thread(messages_dir, monkeypatch):
    calls = []
    to_thread = asyncio.to_thread

    async def recording_to_thread(func, *args, **kwargs):
        calls.append((func.__name__, args))
        return await to_thread(func, *args, **kwargs)

    monkeypatch.setattr(migration.asyncio, "to_thread", recording_to_thread)
    report = await migrate_translations(None, messages_dir, ["es"])

    assert report.total == 2
    assert ("collect_file_translations", (messages_dir, "es")) in calls
