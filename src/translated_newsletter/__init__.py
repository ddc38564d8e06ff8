# ABOUTME: Main package for the translated newsletter system.
# ABOUTME: Exports settings and the core data models.

from translated_newsletter.config import get_settings
from translated_newsletter.models import Article, Configuration, NewsletterUser, NewsSource

__all__ = [
    "get_settings",
    "Article",
    "Configuration",
    "NewsletterUser",
    "NewsSource",
]
