"""Select and construct the process-wide email sender from settings."""

from __future__ import annotations

import structlog

from contact_relay.config import Settings
from contact_relay.email.base import EmailSender
from contact_relay.email.console import ConsoleEmailSender
from contact_relay.email.resend import ResendEmailSender
from contact_relay.email.smtp import SmtpEmailSender
from contact_relay.errors import SenderConfigurationError

logger = structlog.get_logger()


def build_email_sender(settings: Settings) -> EmailSender:
    """Build the sender named by ``settings.email_provider``.

    Args:
        settings: The loaded application settings.

    Returns:
        An ``EmailSender`` ready for use.

    Raises:
        SenderConfigurationError: If the provider name is not supported.
    """
    provider = settings.email_provider
    if provider == "smtp":
        sender: EmailSender = SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password.get_secret_value(),
            timeout=settings.smtp_timeout,
        )
    elif provider == "resend":
        sender = ResendEmailSender(
            api_key=settings.resend_api_key.get_secret_value(),
            api_url=settings.resend_api_url,
            timeout=settings.resend_timeout,
        )
    elif provider == "console":
        sender = ConsoleEmailSender()
    else:
        raise SenderConfigurationError(provider)

    logger.info("Email sender initialized", provider=sender.name)
    return sender
