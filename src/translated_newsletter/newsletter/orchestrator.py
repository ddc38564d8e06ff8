# ABOUTME: Newsletter run orchestrator.
# ABOUTME: Runs scrape, translate and dispatch per (country, language) group, isolating failures.

import asyncio
from typing import Protocol

import structlog

from translated_newsletter.ai.service import AIService
from translated_newsletter.ai.translator import Translator
from translated_newsletter.config import Settings, get_settings
from translated_newsletter.email.sender import EmailDispatcher, MailConfigPack
from translated_newsletter.models import (
    Configuration,
    GroupOutcome,
    GroupStatus,
    NewsletterUser,
    NewsSource,
    RunSummary,
)
from translated_newsletter.scraper.fetcher import ArticleFetcher
from translated_newsletter.scraper.pages import PageClient
from translated_newsletter.scraper.scraper import SourceScraper
from translated_newsletter.scraper.selector import ArticleSelector
from translated_newsletter.services.subscriber_service import GroupedUsers

log = structlog.get_logger()


class SubscriberStore(Protocol):
    async def get_users_grouped_by_language_and_country(self) -> GroupedUsers: ...


class NewsletterOrchestrator:
    """Drives one newsletter run over all subscriber groups.

    The configuration is fixed at construction. Building the orchestrator validates the
    mail settings and the LLM key, so a broken configuration fails before any run.
    """

    def __init__(
        self,
        config: Configuration,
        subscriber_store: SubscriberStore,
        settings: Settings | None = None,
        *,
        scraper: SourceScraper | None = None,
        translator: Translator | None = None,
        dispatcher: EmailDispatcher | None = None,
    ) -> None:
        self.config = config
        self.subscriber_store = subscriber_store
        self.settings = settings or get_settings()

        self.ai_service = AIService(self.settings, api_key=config.open_ai_api_key)
        self.ai_service.ensure_configured()
        self.pages = PageClient(self.settings)

        self.scraper = scraper or SourceScraper(
            ArticleSelector(self.pages, self.ai_service), ArticleFetcher(self.pages)
        )
        self.translator = translator or Translator(self.ai_service)
        self.dispatcher = dispatcher or EmailDispatcher(
            MailConfigPack.from_config(config.email, self.settings), self.settings
        )

    async def aclose(self) -> None:
        await self.pages.aclose()
        await self.ai_service.aclose()

    def find_source(self, country: str) -> NewsSource | None:
        """First configured source whose country matches, ignoring case."""
        wanted = country.upper()
        return next(
            (source for source in self.config.news_sources if source.country.upper() == wanted),
            None,
        )

    async def run(self) -> RunSummary:
        """Process every subscriber group concurrently.

        Returns:
            Per-group outcomes.

        Raises:
            Exception: Only when the subscriber snapshot cannot be retrieved.
        """
        log.info("newsletter_run_start", sources=len(self.config.news_sources))

        try:
            grouped = await self.subscriber_store.get_users_grouped_by_language_and_country()
        except Exception:
            log.exception("newsletter_run_aborted", reason="subscriber snapshot unavailable")
            raise

        outcomes = await asyncio.gather(
            *(
                self.process_group(country, language, users)
                for country, languages in grouped.items()
                for language, users in languages.items()
            )
        )
        summary = RunSummary(groups=list(outcomes))

        log.info(
            "newsletter_run_complete",
            groups=len(summary.groups),
            sent=summary.count(GroupStatus.SENT),
            skipped=summary.count(GroupStatus.SKIPPED),
            failed=summary.count(GroupStatus.FAILED),
        )
        return summary

    async def process_group(
        self, country: str, language: str, users: list[NewsletterUser]
    ) -> GroupOutcome:
        """Scrape, translate and dispatch for one group; never raises."""
        group_log = log.bind(country=country, language=language)

        def skipped(reason: str) -> GroupOutcome:
            group_log.info("group_skipped", reason=reason)
            return GroupOutcome(
                country=country, language=language, status=GroupStatus.SKIPPED, reason=reason
            )

        if not users:
            return skipped("no subscribers")

        source = self.find_source(country)
        if source is None:
            return skipped("no news source configured for country")

        group_log.info("group_processing", users=len(users), source_url=source.url)

        try:
            articles = await self.scraper.scrape_all_sources([source], language)
            if not articles:
                return skipped("no articles scraped")

            translated = await self.translator.translate_articles(articles, language)
            if not translated:
                return skipped("no articles translated")

            emails = [user.email for user in users]
            await self.dispatcher.send_emails(
                emails, translated, self.settings.unsubscribe_base_link
            )
        except Exception as e:
            group_log.exception("group_failed")
            return GroupOutcome(
                country=country,
                language=language,
                status=GroupStatus.FAILED,
                reason=f"{type(e).__name__}: {e}"[:200],
            )

        group_log.info("group_sent", recipients=len(emails), articles=len(translated))
        return GroupOutcome(
            country=country,
            language=language,
            status=GroupStatus.SENT,
            recipients=len(emails),
            articles=len(translated),
        )
