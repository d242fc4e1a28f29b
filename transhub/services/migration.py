"""Copy JSON locale files into the translation tables."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Iterable

from transhub.domain.models import MigrationRecord, MigrationReport
from transhub.logging import logger
from transhub.providers import DatabaseNamespaceProvider
from transhub.utils.flatten import flatten_translations, stringify

DEFAULT_NAMESPACE = "default"


def collect_file_translations(source_dir: str | Path, locale: str) -> list[MigrationRecord]:
    """Read ``{source_dir}/{locale}.json``; top-level objects are namespaces."""

    file_path = Path(source_dir) / f"{locale}.json"
    if not file_path.exists():
        logger.warning("migration_source_missing", locale=locale, path=str(file_path))
        return []
    with file_path.open("r", encoding="utf-8") as fp:
        document = json.load(fp)
    if not isinstance(document, dict):
        return []

    records: list[MigrationRecord] = []
    for name, section in document.items():
        if isinstance(section, dict):
            for key, value in flatten_translations(section).items():
                records.append(MigrationRecord(namespace=name, locale=locale, key=key, value=value))
        else:
            records.append(
                MigrationRecord(
                    namespace=DEFAULT_NAMESPACE, locale=locale, key=name, value=stringify(section)
                )
            )
    return records


async def migrate_translations(
    provider: DatabaseNamespaceProvider | None,
    source_dir: str | Path,
    locales: Iterable[str],
    *,
    dry_run: bool = True,
) -> MigrationReport:
    if not dry_run and provider is None:
        raise ValueError("A database provider is required unless dry_run is set.")

    report = MigrationReport(dry_run=dry_run)
    namespaces: set[str] = set()
    for locale in locales:
        try:
            records = await asyncio.to_thread(collect_file_translations, source_dir, locale)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("migration_locale_skipped", locale=locale, error=str(exc))
            continue

        logger.info("migration_locale_loaded", locale=locale, keys=len(records))
        report.total += len(records)
        namespaces.update(record.namespace for record in records)
        if dry_run:
            continue
        for record in records:
            ok = await provider.set_translation(
                record.key, record.value, record.locale, record.namespace
            )
            if ok:
                report.written += 1
            else:
                report.failed += 1

    report.namespaces = sorted(namespaces)
    logger.info(
        "migration_finished",
        dry_run=dry_run,
        total=report.total,
        written=report.written,
        failed=report.failed,
    )
    return report


__all__ = ["DEFAULT_NAMESPACE", "collect_file_translations", "migrate_translations"]
