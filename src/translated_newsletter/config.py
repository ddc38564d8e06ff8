# ABOUTME: Centralized process settings using Pydantic Settings.
# ABOUTME: Loads LLM, scraping, SMTP, database and scheduler settings from env and .env file.

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM
    llm_provider: Literal["openai", "gemini"] = "openai"
    openai_model: str = "gpt-4o"
    openai_api_key: SecretStr | None = None  # fallback when the config document has none
    gemini_model: str = "gemini-2.0-flash"
    gemini_api_key: SecretStr | None = None
    llm_timeout: float = 60.0
    llm_max_attempts: int = 1  # 1 = no retry

    # Scraping
    page_timeout: float = 15.0
    page_user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/18.3 Safari/605.1.15"
    )

    # Email
    smtp_timeout: float = 30.0
    templates_dir: Path = PACKAGE_DIR / "email" / "templates"

    # Database
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "newsletter"
    db_user: str = "newsletter"
    db_password: SecretStr | None = None
    db_pool_size: int = 5
    db_pool_max_overflow: int = 10
    db_connect_timeout: float = 10.0

    @property
    def database_url(self) -> str:
        """Build async PostgreSQL connection URL."""
        password = self.db_password.get_secret_value() if self.db_password else ""
        return f"postgresql+asyncpg://{self.db_user}:{password}@{self.db_host}:{self.db_port}/{self.db_name}"

    # Run configuration
    config_document_id: str = "defaultConfig"
    config_file: Path | None = None  # JSON document used instead of the store
    app_base_url: str = "http://localhost:3000"  # Base URL for unsubscribe links
    scheduler_enabled: bool = True
    run_on_startup: bool = False
    schedule_timezone: str = "UTC"

    @property
    def unsubscribe_base_link(self) -> str:
        return f"{self.app_base_url.rstrip('/')}/unsubscribe"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded from environment variables and .env file.
    The business configuration (news sources, SMTP account, schedule) lives in the
    configuration document, see services.configuration_service.
    """
    return Settings()
