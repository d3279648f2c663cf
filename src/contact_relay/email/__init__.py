"""Email delivery: the sender protocol and its SMTP, Resend, and console implementations."""

from contact_relay.email.base import EmailSender
from contact_relay.email.console import ConsoleEmailSender
from contact_relay.email.factory import build_email_sender
from contact_relay.email.resend import ResendEmailSender
from contact_relay.email.smtp import SmtpEmailSender

__all__ = [
    "ConsoleEmailSender",
    "EmailSender",
    "ResendEmailSender",
    "SmtpEmailSender",
    "build_email_sender",
]
