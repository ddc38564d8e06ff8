# ABOUTME: Email module for digest rendering and SMTP delivery.
# ABOUTME: Exports the dispatcher and the per-run mail configuration pack.

from translated_newsletter.email.sender import EmailDispatcher, MailConfigPack, SmtpTransport

__all__ = ["EmailDispatcher", "MailConfigPack", "SmtpTransport"]
