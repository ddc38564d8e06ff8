# ABOUTME: Configuration document routes.
# ABOUTME: Get, upload and update configuration documents by document id.

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Body, HTTPException, status

from translated_newsletter.errors import ConfigError
from translated_newsletter.services.configuration_service import parse_configuration
from translated_newsletter.web.dependencies import ConfigurationSvc, DocumentId
from translated_newsletter.web.routes.subscription import MessageResponse

router = APIRouter(prefix="/config", tags=["configuration"])
log = structlog.get_logger()


@router.get("")
async def get_configuration(service: ConfigurationSvc, document_id: DocumentId):
    """Return a configuration document with secrets masked."""
    data = await service.get_document(document_id)
    if data is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Configuration not found")
    try:
        config = parse_configuration(data, f"document {document_id!r}")
    except ConfigError as e:
        log.error("stored_configuration_invalid", document_id=document_id)
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return config.model_dump(mode="json", by_alias=True)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def upload_configuration(
    service: ConfigurationSvc,
    document_id: DocumentId,
    data: Annotated[dict[str, Any], Body()],
):
    """Create or replace a configuration document."""
    try:
        await service.upload_document(data, document_id)
    except ConfigError as e:
        log.warning("configuration_rejected", document_id=document_id, error=str(e)[:200])
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return MessageResponse(message=f"Configuration stored successfully with ID: {document_id}")


@router.put("", response_model=MessageResponse)
async def update_configuration(
    service: ConfigurationSvc,
    document_id: DocumentId,
    changes: Annotated[dict[str, Any], Body()],
):
    """Merge top-level keys into an existing configuration document."""
    try:
        merged = await service.update_document(changes, document_id)
    except ConfigError as e:
        log.warning("configuration_rejected", document_id=document_id, error=str(e)[:200])
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    if merged is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Configuration not found")
    return MessageResponse(message=f"Configuration updated successfully with ID: {document_id}")
