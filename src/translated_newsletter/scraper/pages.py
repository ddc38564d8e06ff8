# ABOUTME: Async HTTP page client for news source listing and article pages.
# ABOUTME: Wraps httpx with timeouts and a browser user agent, raising FetchError on failure.

import httpx
import structlog

from translated_newsletter.config import Settings, get_settings
from translated_newsletter.errors import FetchError

log = structlog.get_logger()


class PageClient:
    """Fetches raw HTML markup."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialized HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.page_timeout,
                headers={"User-Agent": self.settings.page_user_agent},
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "PageClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def get_html(self, url: str) -> str:
        """GET a page and return its markup.

        Raises:
            FetchError: On transport errors, timeouts or non-2xx responses.
        """
        log.debug("fetching_page", url=url)
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise FetchError(url, str(e) or type(e).__name__) from e
        return response.text
