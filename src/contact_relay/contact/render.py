"""Render a ``ContactSubmission`` into an ``EmailMessage``.

Rendering is pure string construction.  The only non-deterministic input,
the submission time, goes into the isolated ``footer`` field.
"""

from __future__ import annotations

import html
from datetime import datetime
from email.utils import formataddr

from contact_relay.contact.models import ContactSubmission, EmailMessage

SUBJECT_PREFIX = "PORTFOLIO CONTACT: "

_HTML_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; padding: 20px;">
  <h2>New Contact Form Submission</h2>
  <p><strong>Name:</strong> {name}</p>
  <p><strong>Email:</strong> {email}</p>
  <p><strong>Subject:</strong> {subject}</p>
  <p><strong>Message:</strong></p>
  <p style="background: #f5f5f5; padding: 15px; border-radius: 5px;">{message}</p>
</div>"""

_TEXT_TEMPLATE = """\
New Contact Form Submission

Name: {name}
Email: {email}
Subject: {subject}

Message:
{message}"""


def format_sender(name: str, address: str) -> str:
    """Build the ``From`` value, e.g. ``Portfolio Contact <me@example.com>``."""
    if not address:
        return name
    return formataddr((name, address))


def header_safe(value: str) -> str:
    """Collapse every run of whitespace, line breaks included, to one space."""
    return " ".join(value.split())


def message_to_html(message: str) -> str:
    """Escape *message* and turn each line ending into ``<br>``."""
    lines = message.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    return "<br>".join(html.escape(line) for line in lines)


def render_email(
    submission: ContactSubmission,
    *,
    to_address: str,
    from_display: str,
    submitted_at: datetime | None = None,
) -> EmailMessage:
    """Build the email relayed to the site owner.

    Args:
        submission: The validated submission.
        to_address: The site owner's mailbox.
        from_display: Display name/address the email is sent as.
        submitted_at: When the submission arrived.  Rendered only in the
            footer; omitted entirely when ``None``.

    Returns:
        The rendered ``EmailMessage``.
    """
    html_body = _HTML_TEMPLATE.format(
        name=html.escape(submission.name),
        email=html.escape(submission.email),
        subject=html.escape(submission.subject),
        message=message_to_html(submission.message),
    )
    text_body = _TEXT_TEMPLATE.format(
        name=submission.name,
        email=submission.email,
        subject=submission.subject,
        message=submission.message,
    )
    footer = ""
    if submitted_at is not None:
        footer = f"Submitted via portfolio contact form at {submitted_at.isoformat()}"

    return EmailMessage(
        from_display=from_display,
        reply_to=submission.email,
        to_address=to_address,
        subject_line=f"{SUBJECT_PREFIX}{header_safe(submission.subject)}",
        html_body=html_body,
        text_body=text_body,
        footer=footer,
    )
