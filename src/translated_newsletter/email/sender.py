# ABOUTME: Email dispatch of translated digests over SMTP.
# ABOUTME: Validates mail settings, renders per-recipient HTML and isolates failed sends.

import asyncio
import contextlib
import smtplib
from collections.abc import Mapping
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Any

import structlog
from jinja2 import Environment, FileSystemLoader

from translated_newsletter.config import Settings, get_settings
from translated_newsletter.errors import ConfigError
from translated_newsletter.models import EmailConfig

log = structlog.get_logger()

HTML_TEMPLATE = "newsletter_email.html"


class SmtpTransport:
    """Opens one SMTP connection per message; safe to share between threads."""

    def __init__(self, host: str, port: int, user: str, password: str, timeout: float) -> None:
        self.host = host
        self.port = port
        self.user = user
        self._password = password
        self.timeout = timeout

    def send(self, message: EmailMessage) -> None:
        """Send one message, raising smtplib/OSError errors to the caller."""
        log.debug("connecting_smtp", host=self.host, port=self.port)

        if self.port == 465:
            server: smtplib.SMTP = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)

        try:
            if self.port != 465:
                server.ehlo()
                server.starttls()
                server.ehlo()
            server.login(self.user, self._password)
            server.send_message(message)
        finally:
            with contextlib.suppress(smtplib.SMTPException, OSError):
                server.quit()


@dataclass(frozen=True)
class MailConfigPack:
    """Validated mail settings plus the transport shared by all sends of a run."""

    host: str
    port: int
    user: str
    sender_name: str
    newsletter_subject: str
    transport: SmtpTransport

    @property
    def sender(self) -> str:
        return f'"{self.sender_name}" <{self.user}>'

    @classmethod
    def from_config(cls, email: EmailConfig, settings: Settings | None = None) -> "MailConfigPack":
        """Build the pack, failing when host, port or credentials are missing.

        Raises:
            ConfigError: If the email configuration is incomplete.
        """
        settings = settings or get_settings()
        if not email.host or not email.port or email.auth is None:
            raise ConfigError("Email configuration is incomplete: host, port and auth are required")
        password = email.auth.password.get_secret_value()
        if not email.auth.user or not password:
            raise ConfigError("Email configuration is incomplete: auth.user and auth.pass are required")

        return cls(
            host=email.host,
            port=email.port,
            user=email.auth.user,
            sender_name=email.sender_name,
            newsletter_subject=email.newsletter_subject,
            transport=SmtpTransport(
                email.host, email.port, email.auth.user, password, settings.smtp_timeout
            ),
        )


def _field(article: Any, name: str) -> Any:
    if isinstance(article, Mapping):
        return article.get(name)
    return getattr(article, name, None)


def _is_valid_article(article: Any) -> bool:
    """Articles are Article objects or plain {title, content} mappings with string values."""
    return isinstance(_field(article, "title"), str) and isinstance(
        _field(article, "content"), str
    )


class EmailDispatcher:
    """Sends a rendered digest to every subscriber of a group."""

    def __init__(self, mail_config: MailConfigPack, settings: Settings | None = None) -> None:
        self.mail_config = mail_config
        self.settings = settings or get_settings()
        self._jinja_env: Environment | None = None

    @property
    def jinja_env(self) -> Environment:
        """Lazy-initialized Jinja2 environment."""
        if self._jinja_env is None:
            self._jinja_env = Environment(
                loader=FileSystemLoader(str(self.settings.templates_dir)),
                autoescape=True,
            )
        return self._jinja_env

    def render(self, articles: list[Any], unsubscribe_link: str) -> str:
        """Render the digest HTML for one recipient."""
        template = self.jinja_env.get_template(HTML_TEMPLATE)
        return template.render(
            subject=self.mail_config.newsletter_subject,
            articles=articles,
            unsubscribe_link=unsubscribe_link,
        )

    def build_message(self, recipient: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = self.mail_config.newsletter_subject
        message["From"] = self.mail_config.sender
        message["Reply-To"] = self.mail_config.user
        message["To"] = recipient
        message.set_content("This newsletter is best viewed in an HTML capable email client.")
        message.add_alternative(html, subtype="html")
        return message

    async def send_emails(
        self,
        subscribers: list[str],
        articles: list[Any],
        unsubscribe_base_link: str,
    ) -> None:
        """Send the digest to every subscriber concurrently.

        Invalid input is logged and nothing is sent. A failure for one recipient is
        logged and never affects the others.

        Args:
            subscribers: Recipient email addresses.
            articles: Translated Articles or {title, content} mappings with string values.
            unsubscribe_base_link: Base URL; the recipient address is appended to it.
        """
        if not isinstance(subscribers, list) or not all(
            isinstance(sub, str) and "@" in sub for sub in subscribers
        ):
            log.error("invalid_subscribers", hint="expected a list of email address strings")
            return

        if not isinstance(articles, list) or not all(_is_valid_article(a) for a in articles):
            log.error("invalid_articles", hint="expected articles with string title and content")
            return

        await asyncio.gather(
            *(self._send_one(sub, articles, unsubscribe_base_link) for sub in subscribers)
        )
        log.info("digest_dispatched", recipient_count=len(subscribers), articles=len(articles))

    async def _send_one(self, recipient: str, articles: list[Any], unsubscribe_base_link: str) -> bool:
        try:
            html = self.render(articles, f"{unsubscribe_base_link}/{recipient}")
            message = self.build_message(recipient, html)
            await asyncio.wait_for(
                asyncio.to_thread(self.mail_config.transport.send, message),
                timeout=self.settings.smtp_timeout,
            )
        except Exception as e:
            log.error(
                "email_send_failed",
                recipient=recipient,
                error_type=type(e).__name__,
                error=str(e)[:200],
            )
            return False

        log.info("email_sent", recipient=recipient)
        return True
