# ABOUTME: Article page fetcher and main-content extractor.
# ABOUTME: Resolves relative links against the source URL and reads the content selector.

import re
from urllib.parse import urljoin

import structlog
from bs4 import BeautifulSoup

from translated_newsletter.models import NewsSource
from translated_newsletter.scraper.pages import PageClient

log = structlog.get_logger()

ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)


def resolve_link(source: NewsSource, link: str) -> str:
    """Return link as an absolute URL, resolving relative links against source.url."""
    if not link:
        return ""
    if ABSOLUTE_URL.match(link):
        return link
    return urljoin(source.url, link)


def extract_content(html: str, selector: str) -> str:
    """Text of every element matching selector, joined and trimmed ("" when none match)."""
    soup = BeautifulSoup(html, "html.parser")
    parts = [element.get_text(" ", strip=True) for element in soup.select(selector)]
    return "\n".join(part for part in parts if part).strip()


class ArticleFetcher:
    """Downloads an article page and extracts its text."""

    def __init__(self, pages: PageClient) -> None:
        self.pages = pages

    resolve_link = staticmethod(resolve_link)

    async def fetch_content(self, source: NewsSource, link: str) -> str:
        """Fetch the article behind link and extract source.content_selector.

        Returns:
            Trimmed article text, or "" when the selector matches nothing.

        Raises:
            FetchError: If the page cannot be retrieved.
        """
        url = resolve_link(source, link)
        html = await self.pages.get_html(url)
        content = extract_content(html, source.content_selector)

        if not content:
            log.warning("article_content_empty", url=url, selector=source.content_selector)
        return content
