# ABOUTME: Service for configuration documents and startup configuration loading.
# ABOUTME: Stores raw camelCase documents and validates them into Configuration objects.

import json
from typing import Any

import structlog
from pydantic import ValidationError

from translated_newsletter.config import Settings, get_settings
from translated_newsletter.db.models import ConfigurationDocument
from translated_newsletter.db.repository import ConfigurationRepository
from translated_newsletter.db.session import get_session
from translated_newsletter.errors import ConfigError
from translated_newsletter.models import Configuration

log = structlog.get_logger()

DEFAULT_DOCUMENT_ID = "defaultConfig"


def parse_configuration(data: dict[str, Any], source: str) -> Configuration:
    """Validate a raw document.

    Raises:
        ConfigError: If the document does not match the Configuration schema.
    """
    try:
        return Configuration.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {source}: {e}") from e


class ConfigurationService:
    """CRUD for configuration documents."""

    def __init__(self, repo: ConfigurationRepository) -> None:
        self.repo = repo

    async def get_document(self, document_id: str = DEFAULT_DOCUMENT_ID) -> dict[str, Any] | None:
        document = await self.repo.get(document_id)
        if document is None:
            log.info("configuration_not_found", document_id=document_id)
            return None
        return dict(document.data)

    async def get_config(self, document_id: str = DEFAULT_DOCUMENT_ID) -> Configuration:
        """Load and validate a configuration document.

        Raises:
            ConfigError: If the document is missing or invalid.
        """
        data = await self.get_document(document_id)
        if data is None:
            raise ConfigError(f"Configuration document {document_id!r} not found")
        return parse_configuration(data, f"document {document_id!r}")

    async def upload_document(
        self, data: dict[str, Any], document_id: str = DEFAULT_DOCUMENT_ID
    ) -> dict[str, Any]:
        """Create or replace a configuration document after validating it."""
        parse_configuration(data, f"document {document_id!r}")

        document = await self.repo.get(document_id)
        if document is None:
            document = ConfigurationDocument(document_id=document_id, data=data)
        else:
            document.data = data
        await self.repo.save(document)

        log.info("configuration_stored", document_id=document_id)
        return data

    async def update_document(
        self, changes: dict[str, Any], document_id: str = DEFAULT_DOCUMENT_ID
    ) -> dict[str, Any] | None:
        """Merge top-level keys into an existing document.

        Returns:
            The merged document, or None if it does not exist.
        """
        document = await self.repo.get(document_id)
        if document is None:
            log.warning("update_unknown_configuration", document_id=document_id)
            return None

        merged = {**document.data, **changes}
        parse_configuration(merged, f"document {document_id!r}")
        document.data = merged
        await self.repo.save(document)

        log.info("configuration_updated", document_id=document_id, keys=sorted(changes))
        return merged


async def load_configuration(settings: Settings | None = None) -> Configuration:
    """Load the business configuration once, from a JSON file or the document store.

    Raises:
        ConfigError: If the configuration is missing or invalid.
    """
    settings = settings or get_settings()

    if settings.config_file is not None:
        log.info("loading_configuration_file", path=str(settings.config_file))
        try:
            data = json.loads(settings.config_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read configuration file {settings.config_file}: {e}") from e
        return parse_configuration(data, str(settings.config_file))

    log.info("loading_configuration_document", document_id=settings.config_document_id)
    async with get_session() as session:
        service = ConfigurationService(ConfigurationRepository(session))
        return await service.get_config(settings.config_document_id)
