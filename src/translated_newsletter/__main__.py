# ABOUTME: CLI entry point for the translated newsletter service.
# ABOUTME: Provides subcommands: serve, run, init-db, upload-config.

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import structlog

from translated_newsletter.config import get_settings


def configure_logging() -> None:
    """Configure structlog for console or JSON output."""
    settings = get_settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
        )
    else:
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
                structlog.processors.add_log_level,
                structlog.dev.ConsoleRenderer(colors=True),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
        )


async def _run_once() -> int:
    from translated_newsletter.db.session import close_db
    from translated_newsletter.models import GroupStatus
    from translated_newsletter.newsletter.orchestrator import NewsletterOrchestrator
    from translated_newsletter.services.configuration_service import load_configuration
    from translated_newsletter.services.subscriber_service import DatabaseSubscriberStore

    settings = get_settings()
    try:
        config = await load_configuration(settings)
        orchestrator = NewsletterOrchestrator(config, DatabaseSubscriberStore(), settings)
        try:
            summary = await orchestrator.run()
        finally:
            await orchestrator.aclose()
    finally:
        await close_db()

    print(f"\n=== Newsletter run: {len(summary.groups)} group(s) ===\n")
    for group in summary.groups:
        line = f"  {group.country}/{group.language}: {group.status.value}"
        if group.status == GroupStatus.SENT:
            line += f" ({group.articles} article(s) to {group.recipients} subscriber(s))"
        elif group.reason:
            line += f" ({group.reason})"
        print(line)
    print()
    return 0


def cmd_run(_args: argparse.Namespace) -> int:
    """Run the newsletter pipeline once, now."""
    log = structlog.get_logger()
    log.info("cmd_run_start")
    try:
        return asyncio.run(_run_once())
    except Exception:
        log.exception("cmd_run_failed")
        return 1


def cmd_serve(args: argparse.Namespace) -> int:
    """Serve the HTTP API with the scheduler running in-process."""
    import uvicorn

    port = args.port
    if port is None:
        port = _configured_port()

    uvicorn.run("translated_newsletter.web.app:app", host=args.host, port=port)
    return 0


def _configured_port() -> int:
    from translated_newsletter.db.session import close_db
    from translated_newsletter.services.configuration_service import load_configuration

    async def _load() -> int:
        try:
            return (await load_configuration()).port
        finally:
            await close_db()

    try:
        return asyncio.run(_load())
    except Exception as e:
        structlog.get_logger().warning("configured_port_unavailable", error=str(e), fallback=3000)
        return 3000


def cmd_init_db(_args: argparse.Namespace) -> int:
    """Create the database tables."""
    from translated_newsletter.db.session import close_db, init_db

    log = structlog.get_logger()

    async def _init() -> None:
        try:
            await init_db()
        finally:
            await close_db()

    try:
        asyncio.run(_init())
    except Exception:
        log.exception("cmd_init_db_failed")
        return 1
    log.info("database_initialized")
    return 0


def cmd_upload_config(args: argparse.Namespace) -> int:
    """Store a JSON configuration document."""
    from translated_newsletter.db.repository import ConfigurationRepository
    from translated_newsletter.db.session import close_db, get_session
    from translated_newsletter.services.configuration_service import ConfigurationService

    log = structlog.get_logger()

    try:
        data = json.loads(Path(args.file).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        log.error("config_file_unreadable", file=args.file, error=str(e))
        return 1

    async def _upload() -> None:
        try:
            async with get_session() as session:
                service = ConfigurationService(ConfigurationRepository(session))
                await service.upload_document(data, args.document_id)
        finally:
            await close_db()

    try:
        asyncio.run(_upload())
    except Exception:
        log.exception("cmd_upload_config_failed")
        return 1
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="translated_newsletter",
        description="Scrape, translate and email local news to subscribers by country and language",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Serve the API and scheduled runs")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port. Defaults to the configuration document's port.",
    )

    subparsers.add_parser("run", help="Run the newsletter pipeline once")

    subparsers.add_parser("init-db", help="Create database tables")

    upload_parser = subparsers.add_parser("upload-config", help="Store a configuration document")
    upload_parser.add_argument("file", help="Path to a JSON configuration document")
    upload_parser.add_argument(
        "--document-id",
        default=get_settings().config_document_id,
        help="Document id (default: settings.config_document_id)",
    )

    return parser


def main() -> int:
    """Main entry point."""
    configure_logging()

    parser = create_parser()
    args = parser.parse_args()

    commands = {
        "serve": cmd_serve,
        "run": cmd_run,
        "init-db": cmd_init_db,
        "upload-config": cmd_upload_config,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
