# ABOUTME: LLM-driven headline selection for a news source listing page.
# ABOUTME: Extracts headlines and links, asks the LLM for an index and validates the reply.

import structlog
from bs4 import BeautifulSoup

from translated_newsletter.ai.prompts import SELECTION_PROMPT
from translated_newsletter.ai.service import AIService
from translated_newsletter.errors import SelectionParseError
from translated_newsletter.models import Article, NewsSource
from translated_newsletter.scraper.pages import PageClient

log = structlog.get_logger()


def extract_headlines(html: str, source: NewsSource) -> tuple[list[str], list[str]]:
    """Extract titles and links from a listing page.

    Titles are the trimmed text of every title_selector match and links the href of
    every link_selector match ("" when the attribute is missing). The two lists are
    correlated by position only and may differ in length.
    """
    soup = BeautifulSoup(html, "html.parser")
    titles = [element.get_text().strip() for element in soup.select(source.title_selector)]
    links = [str(element.get("href") or "") for element in soup.select(source.link_selector)]
    return titles, links


def build_selection_prompt(titles: list[str], language: str) -> str:
    headlines = "\n".join(f"{index}: {title}" for index, title in enumerate(titles))
    return SELECTION_PROMPT.format(language=language, headlines=headlines)


def parse_selection_reply(reply: str, count: int) -> int:
    """Parse an "index:title" reply into a headline index.

    Only the part before the first ':' matters.

    Raises:
        SelectionParseError: If that part is not an integer in [0, count).
    """
    head = reply.split(":", 1)[0].strip()
    try:
        index = int(head)
    except ValueError:
        raise SelectionParseError(reply, "index is not an integer") from None
    if not 0 <= index < count:
        raise SelectionParseError(reply, f"index {index} outside 0..{count - 1}")
    return index


class ArticleSelector:
    """Picks the most interesting headline of a source for a language group."""

    def __init__(self, pages: PageClient, ai_service: AIService) -> None:
        self.pages = pages
        self.ai_service = ai_service

    async def select_most_interesting(self, source: NewsSource, language: str) -> Article:
        """Return the chosen headline as an Article with empty content.

        Raises:
            FetchError: If the listing page cannot be retrieved.
            SelectionParseError: If there are no headlines or the reply is unusable.
        """
        html = await self.pages.get_html(source.url)
        titles, links = extract_headlines(html, source)

        if not titles:
            raise SelectionParseError("", f"no headlines match {source.title_selector!r}")

        log.debug("headlines_extracted", source_url=source.url, titles=len(titles), links=len(links))

        reply = await self.ai_service.complete(build_selection_prompt(titles, language))
        index = parse_selection_reply(reply, len(titles))

        log.info("headline_selected", source_url=source.url, language=language, index=index)
        return Article(
            title=titles[index],
            content="",
            link=links[index] if index < len(links) else "",
        )
