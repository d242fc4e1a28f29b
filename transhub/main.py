"""Command line entrypoint."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence

from transhub.config import get_settings
from transhub.db.session import Database
from transhub.logging import configure_logging, logger
from transhub.providers import DatabaseNamespaceProvider
from transhub.services.manager import TranslationManager
from transhub.services.metrics_endpoint import get_metrics_response, handle_metrics_action
from transhub.services.migration import migrate_translations


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="transhub", description="Translation cache tooling")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("metrics", help="Print provider metrics and health as JSON")

    warmup = sub.add_parser("warmup", help="Preload critical namespaces for a locale")
    warmup.add_argument("--locale", required=True)

    migrate = sub.add_parser("migrate", help="Copy JSON locale files into the database")
    migrate.add_argument("--source", default=None, help="Directory holding {locale}.json files")
    migrate.add_argument("--locales", default=None, help="Comma-separated locales")
    migrate.add_argument(
        "--execute", action="store_true", help="Write to the database (default: dry run)"
    )
    return parser


async def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.json_logs)
    database = Database(settings.database)
    manager = TranslationManager.from_settings(settings, database=database)

    try:
        if args.command == "metrics":
            status, body = await get_metrics_response(manager)
            exit_code = 0 if status == 200 else 1
        elif args.command == "warmup":
            status, body = await handle_metrics_action(
                manager, {"action": "warmup", "locale": args.locale}
            )
            exit_code = 0 if status == 200 else 1
        else:
            locales = args.locales.split(",") if args.locales else settings.locales
            provider = None
            if args.execute:
                await database.create_schema()
                provider = manager.database_provider or DatabaseNamespaceProvider(database)
            report = await migrate_translations(
                provider,
                args.source or settings.files.base_path,
                locales,
                dry_run=not args.execute,
            )
            body = report.model_dump()
            exit_code = 0 if report.failed == 0 else 1
    finally:
        await database.dispose()

    print(json.dumps(body, ensure_ascii=False, indent=2))
    logger.info("command_finished", command=args.command, exit_code=exit_code)
    return exit_code


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
