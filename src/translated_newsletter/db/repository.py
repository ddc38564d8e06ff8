# ABOUTME: Repository classes for database access patterns.
# ABOUTME: Provides NewsletterUserRepository and ConfigurationRepository for CRUD by key.

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from translated_newsletter.db.models import ConfigurationDocument, NewsletterUser


class NewsletterUserRepository:
    """Repository for NewsletterUser CRUD operations keyed by email."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, user: NewsletterUser) -> NewsletterUser:
        """Save a user (insert or update)."""
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_email(self, email: str) -> NewsletterUser | None:
        """Get user by email address."""
        return await self.session.get(NewsletterUser, email)

    async def list_all(self) -> Sequence[NewsletterUser]:
        """List every subscriber."""
        result = await self.session.execute(select(NewsletterUser).order_by(NewsletterUser.email))
        return result.scalars().all()

    async def delete_by_email(self, email: str) -> bool:
        """Delete user by email. Returns True if deleted."""
        result = await self.session.execute(
            delete(NewsletterUser).where(NewsletterUser.email == email)
        )
        return result.rowcount > 0


class ConfigurationRepository:
    """Repository for configuration documents keyed by document id."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, document_id: str) -> ConfigurationDocument | None:
        """Get a configuration document by id."""
        return await self.session.get(ConfigurationDocument, document_id)

    async def save(self, document: ConfigurationDocument) -> ConfigurationDocument:
        """Save a configuration document (insert or update)."""
        self.session.add(document)
        await self.session.flush()
        return document
