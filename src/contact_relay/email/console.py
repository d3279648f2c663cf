"""Development sender that logs the email instead of delivering it."""

from __future__ import annotations

import structlog

from contact_relay.contact.models import DeliveryOutcome, DeliverySuccess, EmailMessage

logger = structlog.get_logger()


class ConsoleEmailSender:
    """Log a summary of each email and report success.

    Used when ``EMAIL_PROVIDER=console`` (the development default) so the
    form can be exercised without provider credentials.
    """

    name = "console"

    async def send(self, message: EmailMessage) -> DeliveryOutcome:
        logger.info(
            "Email not sent (console provider)",
            to=message.to_address,
            reply_to=message.reply_to,
            subject=message.subject_line,
            text_length=len(message.text_body),
        )
        return DeliverySuccess()

    async def aclose(self) -> None:
        pass
