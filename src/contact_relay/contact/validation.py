"""Boundary validation for raw contact-form payloads.

The inbound JSON body is dynamically shaped.  ``parse_submission`` checks it
against ``ContactForm`` (four required, non-blank strings) and either returns
a typed ``ContactSubmission`` or a ``SubmissionRejected`` result.  It never
raises.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError, field_validator

from contact_relay.contact.models import ContactSubmission, ValidationErrorKind

# Characters that terminate or restructure an address in a mail header
_ADDRESS_SPECIALS = r"\s@()<>,;:\"\[\]\\"

# local@domain.tld with non-empty labels around each dot
EMAIL_PATTERN = re.compile(
    rf"^[^{_ADDRESS_SPECIALS}]+@[^{_ADDRESS_SPECIALS}.]+(\.[^{_ADDRESS_SPECIALS}.]+)+$"
)


class ContactForm(BaseModel):
    """Shape of the ``POST /contact`` body.  Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    name: StrictStr
    email: StrictStr
    subject: StrictStr
    message: StrictStr

    @field_validator("name", "email", "subject", "message")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        """Trim surrounding whitespace and reject whitespace-only values."""
        v = v.strip()
        if not v:
            raise ValueError("field must not be empty")
        return v


class SubmissionRejected(BaseModel):
    """The raw payload failed validation."""

    model_config = ConfigDict(frozen=True)

    kind: ValidationErrorKind


def is_valid_email(value: str) -> bool:
    """Return True if *value* looks like ``local@domain.tld``."""
    return EMAIL_PATTERN.fullmatch(value) is not None


def parse_submission(raw: Any) -> ContactSubmission | SubmissionRejected:
    """Validate a raw payload and build a ``ContactSubmission``.

    Args:
        raw: The decoded request body.  Anything other than a mapping is
            treated as having no fields.

    Returns:
        A trimmed ``ContactSubmission``, or ``SubmissionRejected`` with
        ``missing_fields`` or ``invalid_email``.
    """
    if not isinstance(raw, Mapping):
        return SubmissionRejected(kind=ValidationErrorKind.MISSING_FIELDS)

    try:
        form = ContactForm.model_validate(dict(raw))
    except ValidationError:
        return SubmissionRejected(kind=ValidationErrorKind.MISSING_FIELDS)

    if not is_valid_email(form.email):
        return SubmissionRejected(kind=ValidationErrorKind.INVALID_EMAIL)

    return ContactSubmission(**form.model_dump())
