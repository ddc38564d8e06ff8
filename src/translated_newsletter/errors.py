# ABOUTME: Exception hierarchy for the newsletter pipeline.
# ABOUTME: Separates fatal configuration errors from per-source fetch and selection failures.


class NewsletterError(Exception):
    """Base class for pipeline errors."""


class ConfigError(NewsletterError):
    """Required configuration is missing or malformed."""


class FetchError(NewsletterError):
    """A page could not be retrieved."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class SelectionParseError(NewsletterError):
    """The LLM selection reply did not name a valid headline index."""

    def __init__(self, reply: str, reason: str) -> None:
        super().__init__(f"Unusable selection reply {reply[:80]!r}: {reason}")
        self.reply = reply
        self.reason = reason
