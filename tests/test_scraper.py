# ABOUTME: Tests for per-source scraping.
# ABOUTME: Verifies that any per-source failure becomes an absent article.

import asyncio
from unittest.mock import AsyncMock, MagicMock

from translated_newsletter.errors import FetchError, SelectionParseError
from translated_newsletter.models import Article, NewsSource
from translated_newsletter.scraper.fetcher import resolve_link
from translated_newsletter.scraper.scraper import SourceScraper


def _scraper(selected=None, content="Body text", select_error=None, fetch_error=None):
    selector = MagicMock()
    selector.select_most_interesting = AsyncMock(
        return_value=selected, side_effect=select_error
    )
    fetcher = MagicMock()
    fetcher.resolve_link = resolve_link
    fetcher.fetch_content = AsyncMock(return_value=content, side_effect=fetch_error)
    return SourceScraper(selector, fetcher), selector, fetcher


class TestScrapeSource:
    """Tests for SourceScraper.scrape_source."""

    async def test_returns_complete_article(self, sample_source: NewsSource):
        scraper, _, fetcher = _scraper(Article(title="Metro", content="", link="/a/metro"))

        article = await scraper.scrape_source(sample_source, "es")

        assert article == Article(
            title="Metro", content="Body text", link="https://news.example/a/metro"
        )
        fetcher.fetch_content.assert_awaited_once_with(
            sample_source, "https://news.example/a/metro"
        )

    async def test_selection_failure_is_absent(self, sample_source: NewsSource):
        scraper, _, fetcher = _scraper(select_error=SelectionParseError("9:x", "out of range"))

        assert await scraper.scrape_source(sample_source, "es") is None
        fetcher.fetch_content.assert_not_awaited()

    async def test_fetch_failure_is_absent(self, sample_source: NewsSource):
        scraper, _, _ = _scraper(
            Article(title="Metro", content="", link="/a/metro"),
            fetch_error=FetchError("https://news.example/a/metro", "timeout"),
        )

        assert await scraper.scrape_source(sample_source, "es") is None

    async def test_missing_link_is_absent(self, sample_source: NewsSource):
        scraper, _, fetcher = _scraper(Article(title="Metro", content="", link=""))

        assert await scraper.scrape_source(sample_source, "es") is None
        fetcher.fetch_content.assert_not_awaited()

    async def test_empty_content_is_absent(self, sample_source: NewsSource):
        scraper, _, _ = _scraper(Article(title="Metro", content="", link="/a/metro"), content="")

        assert await scraper.scrape_source(sample_source, "es") is None

    async def test_unexpected_error_is_absent(self, sample_source: NewsSource):
        scraper, _, _ = _scraper(select_error=RuntimeError("llm down"))

        assert await scraper.scrape_source(sample_source, "es") is None


class TestScrapeAllSources:
    """Tests for SourceScraper.scrape_all_sources."""

    async def test_keeps_only_successes_in_order(self, sample_source: NewsSource):
        other = sample_source.model_copy(update={"url": "https://other.example/"})
        third = sample_source.model_copy(update={"url": "https://third.example/"})

        scraper = SourceScraper(MagicMock(), MagicMock())
        results = {
            sample_source.url: Article(title="A", content="a", link="https://news.example/a"),
            other.url: None,
            third.url: Article(title="C", content="c", link="https://third.example/c"),
        }

        async def fake_scrape(source, language):
            return results[source.url]

        scraper.scrape_source = fake_scrape

        articles = await scraper.scrape_all_sources([sample_source, other, third], "en")

        assert [a.title for a in articles] == ["A", "C"]

    async def test_sources_scraped_concurrently(self, sample_source: NewsSource):
        other = sample_source.model_copy(update={"url": "https://other.example/"})
        scraper = SourceScraper(MagicMock(), MagicMock())
        both_started = asyncio.Event()
        started = []

        async def fake_scrape(source, language):
            started.append(source.url)
            if len(started) == 2:
                both_started.set()
            await asyncio.wait_for(both_started.wait(), timeout=1)
            return None

        scraper.scrape_source = fake_scrape

        assert await scraper.scrape_all_sources([sample_source, other], "en") == []
        assert len(started) == 2

    async def test_empty_source_list(self):
        scraper = SourceScraper(MagicMock(), MagicMock())
        assert await scraper.scrape_all_sources([], "en") == []
