# ABOUTME: Service for managing newsletter subscribers.
# ABOUTME: Handles subscribe, update, unsubscribe and the country/language grouping snapshot.

from collections.abc import Iterable

import structlog

from translated_newsletter.db.models import NewsletterUser as NewsletterUserORM
from translated_newsletter.db.repository import NewsletterUserRepository
from translated_newsletter.db.session import get_session
from translated_newsletter.models import NewsletterUser, NewsletterUserUpdate

log = structlog.get_logger()

GroupedUsers = dict[str, dict[str, list[NewsletterUser]]]


def group_users(users: Iterable[NewsletterUser]) -> GroupedUsers:
    """Group users as country_of_residence -> language -> users.

    Each user lands in exactly one bucket, chosen only by their own two fields.
    """
    grouped: GroupedUsers = {}
    for user in users:
        grouped.setdefault(user.country_of_residence, {}).setdefault(user.language, []).append(user)
    return grouped


def _to_model(row: NewsletterUserORM) -> NewsletterUser:
    return NewsletterUser(
        email=row.email,
        name=row.name,
        bio=row.bio,
        language=row.language,
        country_of_residence=row.country_of_residence,
    )


class SubscriberService:
    """Service for managing newsletter subscriptions."""

    def __init__(self, repo: NewsletterUserRepository) -> None:
        self.repo = repo

    async def subscribe(self, user: NewsletterUser) -> NewsletterUser:
        """Add a new subscriber.

        Raises:
            ValueError: If the email is already subscribed.
        """
        if await self.repo.get_by_email(user.email):
            log.warning("already_subscribed", email=user.email)
            raise ValueError(f"Email {user.email} is already subscribed")

        await self.repo.save(
            NewsletterUserORM(
                email=user.email,
                name=user.name,
                bio=user.bio,
                language=user.language,
                country_of_residence=user.country_of_residence,
            )
        )
        log.info("subscriber_added", email=user.email)
        return user

    async def get_subscriber(self, email: str) -> NewsletterUser | None:
        row = await self.repo.get_by_email(email.strip().lower())
        return _to_model(row) if row else None

    async def update_subscriber(
        self, email: str, update: NewsletterUserUpdate
    ) -> NewsletterUser | None:
        """Apply a partial update.

        Returns:
            The updated subscriber, or None if the email is unknown.
        """
        row = await self.repo.get_by_email(email.strip().lower())
        if not row:
            log.warning("update_unknown_subscriber", email=email)
            return None

        for field, value in update.model_dump(exclude_none=True).items():
            setattr(row, field, value)
        await self.repo.save(row)

        log.info("subscriber_updated", email=row.email)
        return _to_model(row)

    async def unsubscribe(self, email: str) -> bool:
        """Remove a subscriber. Returns True if one was removed."""
        deleted = await self.repo.delete_by_email(email.strip().lower())
        if deleted:
            log.info("subscriber_removed", email=email)
        else:
            log.info("unsubscribe_unknown_email", email=email)
        return deleted

    async def list_subscribers(self) -> list[NewsletterUser]:
        return [_to_model(row) for row in await self.repo.list_all()]

    async def get_users_grouped_by_language_and_country(self) -> GroupedUsers:
        """Snapshot of all subscribers grouped by country, then language."""
        users = await self.list_subscribers()
        grouped = group_users(users)
        log.info(
            "subscribers_grouped",
            users=len(users),
            groups=sum(len(languages) for languages in grouped.values()),
        )
        return grouped


class DatabaseSubscriberStore:
    """Subscriber snapshot source backed by the database, one session per snapshot."""

    async def get_users_grouped_by_language_and_country(self) -> GroupedUsers:
        async with get_session() as session:
            service = SubscriberService(NewsletterUserRepository(session))
            return await service.get_users_grouped_by_language_and_country()
