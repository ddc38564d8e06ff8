# ABOUTME: Article translation through the LLM completion service.
# ABOUTME: Translates content (as highlighted HTML) and title, isolating per-article failures.

import asyncio

import structlog

from translated_newsletter.ai.prompts import TRANSLATE_CONTENT_PROMPT, TRANSLATE_TITLE_PROMPT
from translated_newsletter.ai.service import AIService
from translated_newsletter.errors import ConfigError
from translated_newsletter.models import Article

log = structlog.get_logger()

CODE_FENCES = ("```html", "```")


def strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers wherever they appear.

    Only the literal markers are removed; surrounding text and whitespace are kept,
    so a string without fences comes back unchanged.
    """
    for fence in CODE_FENCES:
        text = text.replace(fence, "")
    return text


class Translator:
    """Translates articles into a subscriber group's language."""

    def __init__(self, ai_service: AIService) -> None:
        self.ai_service = ai_service

    async def translate(self, article: Article, language: str) -> Article:
        """Translate one article.

        Args:
            article: Scraped article.
            language: Target ISO 639-1 language code.

        Returns:
            A new Article with translated title and HTML content, same link.

        Raises:
            ConfigError: If no LLM API key is configured.
        """
        self.ai_service.ensure_configured()

        content, title = await asyncio.gather(
            self.ai_service.complete(
                TRANSLATE_CONTENT_PROMPT.format(
                    language=language, title=article.title, content=article.content
                )
            ),
            self.ai_service.complete(
                TRANSLATE_TITLE_PROMPT.format(language=language, title=article.title)
            ),
        )

        return Article(
            title=title.strip(),
            content=strip_code_fences(content),
            link=article.link,
        )

    async def translate_articles(self, articles: list[Article], language: str) -> list[Article]:
        """Translate a batch concurrently, dropping articles whose translation fails.

        A missing API key is not a per-article problem and propagates.
        """
        results = await asyncio.gather(
            *(self._translate_isolated(article, language) for article in articles)
        )
        translated = [article for article in results if article is not None]

        log.info(
            "articles_translated",
            language=language,
            translated=len(translated),
            failed=len(articles) - len(translated),
        )
        return translated

    async def _translate_isolated(self, article: Article, language: str) -> Article | None:
        try:
            return await self.translate(article, language)
        except ConfigError:
            raise
        except Exception as e:
            log.error(
                "article_translation_failed",
                link=article.link,
                language=language,
                error_type=type(e).__name__,
                error=str(e)[:200],
            )
            return None
