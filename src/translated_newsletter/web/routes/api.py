# ABOUTME: API routes for run automation and monitoring.
# ABOUTME: Health (with scheduler state) and a trigger that runs the newsletter in the background.

import structlog
from fastapi import APIRouter, BackgroundTasks, Request, status
from pydantic import BaseModel

from translated_newsletter.config import get_settings
from translated_newsletter.newsletter.orchestrator import NewsletterOrchestrator
from translated_newsletter.services.configuration_service import load_configuration
from translated_newsletter.services.subscriber_service import DatabaseSubscriberStore

router = APIRouter(prefix="/api", tags=["api"])
log = structlog.get_logger()


class RunAccepted(BaseModel):
    status: str = "accepted"
    message: str


class HealthResponse(BaseModel):
    """Service health plus when the next scheduled newsletter goes out."""

    status: str
    scheduler: str
    next_run: str | None = None
    version: str = "0.1.0"


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        return HealthResponse(status="healthy", scheduler="disabled")
    return HealthResponse(
        status="healthy", scheduler="enabled", next_run=scheduler.next_run().isoformat()
    )


async def run_newsletter() -> None:
    """Load the configuration, run every group once and release the clients."""
    log.info("api_newsletter_start")
    settings = get_settings()
    try:
        config = await load_configuration(settings)
        orchestrator = NewsletterOrchestrator(config, DatabaseSubscriberStore(), settings)
        try:
            summary = await orchestrator.run()
        finally:
            await orchestrator.aclose()
        log.info("api_newsletter_complete", groups=len(summary.groups))
    except Exception:
        log.exception("api_newsletter_failed")


@router.post("/newsletter", response_model=RunAccepted, status_code=status.HTTP_202_ACCEPTED)
async def api_newsletter(request: Request, background_tasks: BackgroundTasks):
    """Start a newsletter run now.

    With the in-process scheduler running, the run goes through it so that a manual run
    never overlaps a scheduled one.
    """
    scheduler = getattr(request.app.state, "scheduler", None)
    log.info("api_newsletter_triggered", via_scheduler=scheduler is not None)
    if scheduler is not None:
        background_tasks.add_task(scheduler.trigger)
    else:
        background_tasks.add_task(run_newsletter)
    return RunAccepted(message="Newsletter run started")
