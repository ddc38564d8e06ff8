# ABOUTME: Newsletter pipeline orchestration module.
# ABOUTME: Exports the per-run orchestrator.

from translated_newsletter.newsletter.orchestrator import NewsletterOrchestrator, SubscriberStore

__all__ = ["NewsletterOrchestrator", "SubscriberStore"]
