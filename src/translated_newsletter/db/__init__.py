# ABOUTME: Database module initialization.
# ABOUTME: Exports ORM models and session helpers for the subscriber and configuration store.

from translated_newsletter.db.models import Base, ConfigurationDocument, NewsletterUser
from translated_newsletter.db.session import close_db, get_session, init_db

__all__ = [
    "Base",
    "ConfigurationDocument",
    "NewsletterUser",
    "close_db",
    "get_session",
    "init_db",
]
