# ABOUTME: Routes module initialization.
# ABOUTME: Exports all route modules for FastAPI app.

from translated_newsletter.web.routes import api, configuration, subscription

__all__ = ["api", "configuration", "subscription"]
