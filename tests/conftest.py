# ABOUTME: Pytest fixtures and configuration for translated newsletter tests.
# ABOUTME: Provides mock settings, sample sources, subscribers, articles and configuration.

from pathlib import Path

import pytest
from pydantic import SecretStr

from translated_newsletter.config import Settings
from translated_newsletter.models import (
    Article,
    Configuration,
    EmailAuth,
    EmailConfig,
    NewsletterUser,
    NewsSource,
)

LISTING_HTML = """
<html><body>
  <div class="news">
    <h2 class="headline">Canal expansion approved</h2><a class="more" href="/a/canal">more</a>
    <h2 class="headline">  New metro line opens  </h2><a class="more" href="/a/metro">more</a>
    <h2 class="headline">Carnival dates announced</h2><a class="more">more</a>
  </div>
</body></html>
"""

ARTICLE_HTML = """
<html><body>
  <nav>Menu</nav>
  <article class="body"><p>The new metro line connects the city centre</p>
  <p>with the airport in twenty minutes.</p></article>
</body></html>
"""


@pytest.fixture
def mock_settings(tmp_path: Path) -> Settings:
    """Create mock settings for testing."""
    return Settings(
        llm_provider="openai",
        openai_model="gpt-test",
        openai_api_key=None,
        llm_timeout=5,
        llm_max_attempts=1,
        page_timeout=5,
        smtp_timeout=5,
        app_base_url="https://newsletter.example",
        config_document_id="defaultConfig",
        scheduler_enabled=False,
        log_level="DEBUG",
    )


@pytest.fixture
def sample_source() -> NewsSource:
    """A news source for Panama."""
    return NewsSource(
        type="html",
        url="https://news.example/",
        title_selector="h2.headline",
        link_selector="a.more",
        content_selector="article.body",
        country="PA",
    )


@pytest.fixture
def sample_email_config() -> EmailConfig:
    return EmailConfig(
        host="smtp.example.com",
        port=587,
        auth=EmailAuth(user="news@example.com", password=SecretStr("smtp-secret")),
        sender_name="Local News",
        newsletter_subject="Your local news",
    )


@pytest.fixture
def sample_config(sample_source: NewsSource, sample_email_config: EmailConfig) -> Configuration:
    """Configuration with one Panama source."""
    return Configuration(
        port=3000,
        schedule_time="0 8 * * *",
        news_sources=[sample_source],
        open_ai_api_key=SecretStr("sk-test"),
        email=sample_email_config,
    )


@pytest.fixture
def sample_config_document() -> dict:
    """Raw camelCase configuration document as stored."""
    return {
        "port": 3000,
        "scheduleTime": "0 8 * * *",
        "newsSources": [
            {
                "type": "html",
                "url": "https://news.example/",
                "titleSelector": "h2.headline",
                "linkSelector": "a.more",
                "contentSelector": "article.body",
                "country": "PA",
            }
        ],
        "openAiApiKey": "sk-test",
        "email": {
            "host": "smtp.example.com",
            "port": 587,
            "auth": {"user": "news@example.com", "pass": "smtp-secret"},
            "senderName": "Local News",
            "newsletterSubject": "Your local news",
        },
    }


@pytest.fixture
def sample_users() -> list[NewsletterUser]:
    return [
        NewsletterUser(email="ana@example.com", name="Ana", language="es", country_of_residence="PA"),
        NewsletterUser(email="bob@example.com", name="Bob", language="en", country_of_residence="PA"),
        NewsletterUser(email="cat@example.com", name="Cat", language="en", country_of_residence="pa"),
        NewsletterUser(email="dan@example.com", name="Dan", language="de", country_of_residence="CR"),
    ]


@pytest.fixture
def sample_article() -> Article:
    return Article(
        title="New metro line opens",
        content="The new metro line connects the city centre with the airport.",
        link="https://news.example/a/metro",
    )


@pytest.fixture
def listing_html() -> str:
    return LISTING_HTML


@pytest.fixture
def article_html() -> str:
    return ARTICLE_HTML
