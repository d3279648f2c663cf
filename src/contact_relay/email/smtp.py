"""SMTP email sender (Gmail submission port by default).

``smtplib`` is blocking, so each delivery runs in a worker thread via
``asyncio.to_thread`` and the event loop stays free for other requests.
A fresh connection is opened per delivery; the sender itself holds only
immutable configuration.
"""

from __future__ import annotations

import asyncio
import smtplib
import ssl
from email.errors import MessageError
from email.message import EmailMessage as MimeMessage
from email.utils import make_msgid

import structlog

from contact_relay.contact.models import (
    DeliveryErrorKind,
    DeliveryFailure,
    DeliveryOutcome,
    DeliverySuccess,
    EmailMessage,
)

logger = structlog.get_logger()


class SmtpEmailSender:
    """Deliver rendered emails over SMTP with STARTTLS and login.

    Args:
        host: SMTP server hostname.
        port: SMTP submission port (STARTTLS).
        username: Login user, also used as the envelope sender.
        password: Login password or app password.
        timeout: Socket timeout in seconds for connect and each command.
    """

    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._timeout = timeout

    def build_mime(self, message: EmailMessage) -> MimeMessage:
        """Compose a multipart/alternative MIME message (text + HTML).

        Args:
            message: The rendered email.

        Returns:
            A MIME message with ``Message-ID`` set.
        """
        mime = MimeMessage()
        mime["From"] = message.from_display
        mime["To"] = message.to_address
        mime["Reply-To"] = message.reply_to
        mime["Subject"] = message.subject_line
        domain = self._username.partition("@")[2] or None
        mime["Message-ID"] = make_msgid(domain=domain)
        mime.set_content(message.full_text)
        mime.add_alternative(message.full_html, subtype="html")
        return mime

    def _deliver(self, mime: MimeMessage) -> None:
        context = ssl.create_default_context()
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
            smtp.starttls(context=context)
            smtp.login(self._username, self._password)
            smtp.send_message(mime, from_addr=self._username)

    async def send(self, message: EmailMessage) -> DeliveryOutcome:
        """Attempt one SMTP delivery of *message*.

        Args:
            message: The rendered email.

        Returns:
            ``DeliverySuccess`` carrying the ``Message-ID``, or a
            ``DeliveryFailure`` classifying the smtplib/socket error.
        """
        try:
            mime = self.build_mime(message)
        except (ValueError, MessageError) as exc:
            # header values with line breaks or unparsable addresses
            return _failure(DeliveryErrorKind.UNKNOWN, exc)

        try:
            await asyncio.to_thread(self._deliver, mime)
        except smtplib.SMTPAuthenticationError as exc:
            return _failure(DeliveryErrorKind.UNAUTHENTICATED, exc)
        except (
            smtplib.SMTPRecipientsRefused,
            smtplib.SMTPSenderRefused,
            smtplib.SMTPDataError,
        ) as exc:
            return _failure(DeliveryErrorKind.PROVIDER_REJECTED, exc)
        except (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected) as exc:
            return _failure(DeliveryErrorKind.NETWORK_ERROR, exc)
        except smtplib.SMTPException as exc:
            return _failure(DeliveryErrorKind.UNKNOWN, exc)
        except OSError as exc:
            # socket.timeout, ConnectionRefusedError, DNS failures, TLS errors
            return _failure(DeliveryErrorKind.NETWORK_ERROR, exc)

        message_id = mime["Message-ID"]
        logger.debug("SMTP delivery accepted", host=self._host, message_id=message_id)
        return DeliverySuccess(provider_message_id=message_id)

    async def aclose(self) -> None:
        """Nothing to release; connections are per delivery."""


def _failure(kind: DeliveryErrorKind, exc: BaseException) -> DeliveryFailure:
    return DeliveryFailure(kind=kind, detail=f"{type(exc).__name__}: {exc}")
