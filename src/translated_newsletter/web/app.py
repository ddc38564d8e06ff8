# ABOUTME: FastAPI application factory with database and scheduler lifespan.
# ABOUTME: Main entry point for the subscriber/configuration API and scheduled runs.

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from translated_newsletter.config import get_settings
from translated_newsletter.db.session import close_db, init_db
from translated_newsletter.newsletter.orchestrator import NewsletterOrchestrator
from translated_newsletter.scheduler import NewsletterScheduler
from translated_newsletter.services.configuration_service import load_configuration
from translated_newsletter.services.subscriber_service import DatabaseSubscriberStore
from translated_newsletter.web.routes import api, configuration, subscription

logger = structlog.get_logger()

TEMPLATES_DIR = Path(__file__).parent / "templates"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Set up the database and, when enabled, the scheduled newsletter runs."""
    logger.info("app_startup")
    settings = get_settings()
    await init_db()

    orchestrator: NewsletterOrchestrator | None = None
    scheduler: NewsletterScheduler | None = None
    if settings.scheduler_enabled:
        config = await load_configuration(settings)
        orchestrator = NewsletterOrchestrator(config, DatabaseSubscriberStore(), settings)
        scheduler = NewsletterScheduler(
            orchestrator.run,
            config.schedule_time,
            timezone=settings.schedule_timezone,
            run_on_start=settings.run_on_startup,
        )
        scheduler.start()
    app.state.scheduler = scheduler

    yield

    logger.info("app_shutdown")
    if scheduler is not None:
        await scheduler.stop()
    if orchestrator is not None:
        await orchestrator.aclose()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Translated Newsletter",
        description="Country news, translated for the people who just moved there",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

    app.include_router(subscription.router)
    app.include_router(configuration.router)
    app.include_router(api.router)

    return app


# Application instance for uvicorn
app = create_app()
