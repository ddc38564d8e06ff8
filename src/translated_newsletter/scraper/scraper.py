# ABOUTME: Per-source scrape combining headline selection and content extraction.
# ABOUTME: Converts any per-source failure into an absent result and scrapes sources concurrently.

import asyncio

import structlog

from translated_newsletter.models import Article, NewsSource
from translated_newsletter.scraper.fetcher import ArticleFetcher
from translated_newsletter.scraper.selector import ArticleSelector

log = structlog.get_logger()


class SourceScraper:
    """Produces at most one article per news source."""

    def __init__(self, selector: ArticleSelector, fetcher: ArticleFetcher) -> None:
        self.selector = selector
        self.fetcher = fetcher

    async def scrape_source(self, source: NewsSource, language: str) -> Article | None:
        """Scrape the most interesting article of one source.

        Returns:
            A complete Article, or None when nothing usable was found or anything failed.
        """
        try:
            selected = await self.selector.select_most_interesting(source, language)
            link = self.fetcher.resolve_link(source, selected.link)
            if not link:
                log.warning("selected_headline_without_link", source_url=source.url)
                return None
            content = await self.fetcher.fetch_content(source, link)
        except Exception as e:
            log.error(
                "source_scrape_failed",
                source_url=source.url,
                error_type=type(e).__name__,
                error=str(e)[:200],
            )
            return None

        article = Article(title=selected.title, content=content, link=link)
        if not article.is_complete:
            log.info("source_scrape_empty", source_url=source.url, link=link)
            return None

        log.info("article_scraped", source_url=source.url, title=article.title[:60])
        return article

    async def scrape_all_sources(self, sources: list[NewsSource], language: str) -> list[Article]:
        """Scrape every source concurrently and keep the successful articles."""
        results = await asyncio.gather(
            *(self.scrape_source(source, language) for source in sources)
        )
        return [article for article in results if article is not None]
