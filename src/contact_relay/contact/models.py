"""Pydantic v2 models for the contact-relay workflow.

Provides frozen (immutable) models for the validated submission, the rendered
email, the delivery outcome reported by a sender, and the response returned
to the HTTP layer.  Nothing here outlives a single request.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class ValidationErrorKind(StrEnum):
    """Why a raw submission was rejected before any network call."""

    MISSING_FIELDS = "missing_fields"
    INVALID_EMAIL = "invalid_email"


class DeliveryErrorKind(StrEnum):
    """Coarse classification of a failed delivery attempt."""

    PROVIDER_REJECTED = "provider_rejected"
    NETWORK_ERROR = "network_error"
    UNAUTHENTICATED = "unauthenticated"
    UNKNOWN = "unknown"


class ContactSubmission(BaseModel):
    """A validated contact-form submission with trimmed fields."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    subject: str
    message: str


class EmailMessage(BaseModel):
    """A fully rendered email, ready to hand to a sender.

    ``footer`` carries the submission timestamp and is kept apart from the
    deterministic content; use ``content()`` to compare two renderings.
    """

    model_config = ConfigDict(frozen=True)

    from_display: str
    reply_to: str
    to_address: str
    subject_line: str
    html_body: str
    text_body: str
    footer: str = ""

    def content(self) -> dict[str, Any]:
        """Return every field except the timestamp footer."""
        return self.model_dump(exclude={"footer"})

    @property
    def full_html(self) -> str:
        """HTML body with the footer appended as a trailing paragraph."""
        if not self.footer:
            return self.html_body
        return f'{self.html_body}\n<p style="color: #888; font-size: 12px;">{self.footer}</p>'

    @property
    def full_text(self) -> str:
        """Plain-text body with the footer appended after a separator."""
        if not self.footer:
            return self.text_body
        return f"{self.text_body}\n\n--\n{self.footer}"


class DeliverySuccess(BaseModel):
    """The provider accepted the message."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    provider_message_id: str | None = None


class DeliveryFailure(BaseModel):
    """The provider or the network refused the message.

    ``detail`` is for operators only and must never reach the caller.
    """

    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    kind: DeliveryErrorKind
    detail: str


DeliveryOutcome = DeliverySuccess | DeliveryFailure


class ContactResponse(BaseModel):
    """HTTP-ready response produced by the handler."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    success: bool
    message: str

    def body(self) -> dict[str, Any]:
        """JSON body sent to the caller."""
        return {"success": self.success, "message": self.message}
