# ABOUTME: Pydantic models for newsletter data structures.
# ABOUTME: Defines Article, NewsSource, NewsletterUser, Configuration and run summaries.

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model reading and writing camelCase JSON documents."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Article(BaseModel):
    """A news article, raw or translated."""

    title: str
    content: str = ""
    link: str

    @property
    def is_complete(self) -> bool:
        """True once title, content and link are all present."""
        return bool(self.title and self.content and self.link)


class NewsSource(CamelModel):
    """A news website plus the CSS selectors used to scrape it."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    type: str = "html"
    url: str
    title_selector: str
    link_selector: str
    content_selector: str
    country: str  # ISO 3166-1 alpha-2


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    if "@" not in value:
        raise ValueError("email must contain '@'")
    return value


class NewsletterUser(CamelModel):
    """A newsletter subscriber."""

    email: str
    name: str = ""
    bio: str = ""
    language: str = Field(min_length=2, max_length=8)  # ISO 639-1
    country_of_residence: str = Field(min_length=2, max_length=2)  # ISO 3166-1 alpha-2

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("language")
    @classmethod
    def _lower_language(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("country_of_residence")
    @classmethod
    def _upper_country(cls, value: str) -> str:
        return value.strip().upper()


class NewsletterUserUpdate(CamelModel):
    """Partial update of a subscriber. The email is the identity and cannot change."""

    name: str | None = None
    bio: str | None = None
    language: str | None = Field(default=None, min_length=2, max_length=8)
    country_of_residence: str | None = Field(default=None, min_length=2, max_length=2)

    @field_validator("language")
    @classmethod
    def _lower_language(cls, value: str | None) -> str | None:
        return value.strip().lower() if value else value

    @field_validator("country_of_residence")
    @classmethod
    def _upper_country(cls, value: str | None) -> str | None:
        return value.strip().upper() if value else value


class EmailAuth(BaseModel):
    """SMTP account credentials."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user: str
    password: SecretStr = Field(alias="pass")


class EmailConfig(CamelModel):
    """SMTP transport settings from the configuration document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    host: str = ""
    port: int = 0
    auth: EmailAuth | None = None
    sender_name: str = "No Reply"
    newsletter_subject: str = "Translated Articles"


class Configuration(CamelModel):
    """Business configuration document, immutable for a run."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    port: int = 3000
    schedule_time: str = "0 8 * * *"
    news_sources: list[NewsSource] = []
    open_ai_api_key: SecretStr | None = None
    email: EmailConfig = EmailConfig()


class GroupStatus(str, Enum):
    """Outcome of one (country, language) group."""

    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


class GroupOutcome(BaseModel):
    """What happened to one subscriber group during a run."""

    country: str
    language: str
    status: GroupStatus
    recipients: int = 0
    articles: int = 0
    reason: str = ""


class RunSummary(BaseModel):
    """Outcome of a complete newsletter run."""

    groups: list[GroupOutcome] = []

    def count(self, status: GroupStatus) -> int:
        return sum(1 for group in self.groups if group.status == status)
