# ABOUTME: Tests for article translation.
# ABOUTME: Verifies fence stripping, per-article isolation and missing-key propagation.

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import SecretStr

from translated_newsletter.ai.service import AIService
from translated_newsletter.ai.translator import Translator, strip_code_fences
from translated_newsletter.config import Settings
from translated_newsletter.errors import ConfigError
from translated_newsletter.models import Article


class TestStripCodeFences:
    """Tests for strip_code_fences."""

    def test_removes_html_fence(self):
        assert strip_code_fences("```html<p>x</p>```") == "<p>x</p>"

    def test_keeps_surrounding_whitespace(self):
        assert strip_code_fences("```html\n<p>x</p>\n```") == "\n<p>x</p>\n"

    def test_plain_text_unchanged(self):
        assert strip_code_fences("<p>no fences</p>") == "<p>no fences</p>"

    def test_idempotent(self):
        once = strip_code_fences("```html<b>a</b>``` and ```more```")
        assert strip_code_fences(once) == once


def _translator_with(complete) -> tuple[Translator, MagicMock]:
    ai = MagicMock()
    ai.ensure_configured = MagicMock()
    ai.complete = AsyncMock(side_effect=complete)
    return Translator(ai), ai


class TestTranslate:
    """Tests for Translator.translate."""

    async def test_translates_title_and_content(self, sample_article: Article):
        async def complete(prompt: str) -> str:
            if "HTML" in prompt:
                return "```html<p><b>Nueva</b> línea</p>```"
            return "  Nueva línea de metro \n"

        translator, ai = _translator_with(complete)

        result = await translator.translate(sample_article, "es")

        assert result.title == "Nueva línea de metro"
        assert result.content == "<p><b>Nueva</b> línea</p>"
        assert result.link == sample_article.link
        assert ai.complete.await_count == 2
        assert all("es" in call.args[0] for call in ai.complete.await_args_list)

    async def test_missing_key_fails_before_any_call(
        self, mock_settings: Settings, sample_article: Article
    ):
        ai = AIService(mock_settings, api_key=None)
        ai._request = AsyncMock()
        translator = Translator(ai)

        with pytest.raises(ConfigError):
            await translator.translate(sample_article, "es")
        ai._request.assert_not_awaited()


class TestTranslateArticles:
    """Tests for Translator.translate_articles."""

    async def test_failed_article_is_dropped(self, sample_article: Article):
        broken = Article(title="Broken", content="x", link="https://news.example/broken")

        async def complete(prompt: str) -> str:
            if "Broken" in prompt:
                raise RuntimeError("rate limited")
            return "translated"

        translator, _ = _translator_with(complete)

        result = await translator.translate_articles([sample_article, broken], "de")

        assert [a.link for a in result] == [sample_article.link]

    async def test_config_error_propagates(self, sample_article: Article):
        translator, ai = _translator_with(lambda prompt: "unused")
        ai.ensure_configured.side_effect = ConfigError("openai API key is missing")

        with pytest.raises(ConfigError):
            await translator.translate_articles([sample_article], "de")

    async def test_empty_batch(self):
        translator, ai = _translator_with(lambda prompt: "unused")
        assert await translator.translate_articles([], "de") == []
        ai.complete.assert_not_awaited()

    async def test_works_with_real_service_and_fake_request(
        self, mock_settings: Settings, sample_article: Article
    ):
        ai = AIService(mock_settings, api_key=SecretStr("sk-test"))
        ai._request = AsyncMock(return_value="```html<p>Hallo</p>```")

        result = await Translator(ai).translate_articles([sample_article], "de")

        assert len(result) == 1
        assert result[0].content == "<p>Hallo</p>"
