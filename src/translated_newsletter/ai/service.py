# ABOUTME: LLM completion service over OpenAI or Google Gemini.
# ABOUTME: Single-turn prompt in, text out, with a per-call timeout and optional retries.

import asyncio

import structlog
from google import genai
from google.genai import types
from openai import AsyncOpenAI
from pydantic import SecretStr
from tenacity import (
    AsyncRetrying,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from translated_newsletter.config import Settings, get_settings
from translated_newsletter.errors import ConfigError

log = structlog.get_logger()


class AIService:
    """Stateless single-turn completions against the configured LLM provider."""

    def __init__(self, settings: Settings | None = None, api_key: SecretStr | None = None) -> None:
        self.settings = settings or get_settings()
        self._api_key = api_key
        self._openai: AsyncOpenAI | None = None
        self._gemini: genai.Client | None = None

    @property
    def api_key(self) -> SecretStr | None:
        """Key for the active provider; the configuration document wins over env for OpenAI."""
        if self.settings.llm_provider == "gemini":
            return self.settings.gemini_api_key
        return self._api_key or self.settings.openai_api_key

    @property
    def model(self) -> str:
        if self.settings.llm_provider == "gemini":
            return self.settings.gemini_model
        return self.settings.openai_model

    def ensure_configured(self) -> None:
        """Raise ConfigError when no API key is available for the active provider."""
        key = self.api_key
        if key is None or not key.get_secret_value():
            raise ConfigError(f"{self.settings.llm_provider} API key is missing")

    @property
    def openai_client(self) -> AsyncOpenAI:
        """Lazy-initialized OpenAI client."""
        if self._openai is None:
            self.ensure_configured()
            self._openai = AsyncOpenAI(
                api_key=self.api_key.get_secret_value(),
                timeout=self.settings.llm_timeout,
                max_retries=0,
            )
        return self._openai

    @property
    def gemini_client(self) -> genai.Client:
        """Lazy-initialized Gemini client."""
        if self._gemini is None:
            self.ensure_configured()
            self._gemini = genai.Client(api_key=self.api_key.get_secret_value())
        return self._gemini

    async def complete(self, prompt: str) -> str:
        """Send one prompt and return the model's text reply.

        Args:
            prompt: Complete user prompt.

        Returns:
            The reply text (may be empty).

        Raises:
            ConfigError: If no API key is configured.
            Exception: Provider or timeout errors, after llm_max_attempts attempts.
        """
        self.ensure_configured()

        reply = ""
        async for attempt in AsyncRetrying(
            retry=retry_if_not_exception_type(ConfigError),
            stop=stop_after_attempt(max(1, self.settings.llm_max_attempts)),
            wait=wait_exponential(multiplier=1, min=2, max=30),
            before_sleep=lambda retry_state: log.warning(
                "llm_retry",
                attempt=retry_state.attempt_number,
                wait=retry_state.next_action.sleep,
            ),
            reraise=True,
        ):
            with attempt:
                reply = await asyncio.wait_for(
                    self._request(prompt), timeout=self.settings.llm_timeout
                )

        if not reply.strip():
            log.warning(
                "empty_completion",
                provider=self.settings.llm_provider,
                prompt_preview=prompt[:200],
            )
        return reply

    async def _request(self, prompt: str) -> str:
        log.debug(
            "requesting_completion",
            provider=self.settings.llm_provider,
            model=self.model,
            prompt_length=len(prompt),
        )

        if self.settings.llm_provider == "gemini":
            response = await self.gemini_client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(response_modalities=["TEXT"]),
            )
            return response.text or ""

        completion = await self.openai_client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
        )
        return completion.choices[0].message.content or ""

    async def aclose(self) -> None:
        """Release the provider HTTP client."""
        if self._openai is not None:
            await self._openai.close()
            self._openai = None
        self._gemini = None
