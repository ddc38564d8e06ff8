# ABOUTME: FastAPI dependencies for the subscriber and configuration routes.
# ABOUTME: Binds services to the request's database session and exposes shared parameters.

from typing import Annotated

from fastapi import Depends, Query, Request
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from translated_newsletter.config import Settings, get_settings
from translated_newsletter.db.repository import ConfigurationRepository, NewsletterUserRepository
from translated_newsletter.db.session import get_db_session
from translated_newsletter.services.configuration_service import ConfigurationService
from translated_newsletter.services.subscriber_service import SubscriberService

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_templates(request: Request) -> Jinja2Templates:
    return request.app.state.templates


Templates = Annotated[Jinja2Templates, Depends(get_templates)]


def get_subscriber_service(session: DbSession) -> SubscriberService:
    """Subscriber service bound to the request session."""
    return SubscriberService(NewsletterUserRepository(session))


SubscriberSvc = Annotated[SubscriberService, Depends(get_subscriber_service)]


def get_configuration_service(session: DbSession) -> ConfigurationService:
    return ConfigurationService(ConfigurationRepository(session))


ConfigurationSvc = Annotated[ConfigurationService, Depends(get_configuration_service)]


def get_document_id(
    settings: Annotated[Settings, Depends(get_settings)],
    document_id: Annotated[str | None, Query(alias="documentId")] = None,
) -> str:
    """The ?documentId= query parameter, defaulting to the document the runs load."""
    return document_id or settings.config_document_id


DocumentId = Annotated[str, Depends(get_document_id)]
