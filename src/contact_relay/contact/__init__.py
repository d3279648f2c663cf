"""Contact domain: submission validation, email rendering, and the relay handler."""

from contact_relay.contact.handler import (
    ContactSubmissionHandler,
    HandlerResult,
    UnexpectedFault,
    to_response,
)
from contact_relay.contact.models import (
    ContactResponse,
    ContactSubmission,
    DeliveryErrorKind,
    DeliveryFailure,
    DeliveryOutcome,
    DeliverySuccess,
    EmailMessage,
    ValidationErrorKind,
)
from contact_relay.contact.render import format_sender, render_email
from contact_relay.contact.validation import SubmissionRejected, parse_submission

__all__ = [
    "ContactResponse",
    "ContactSubmission",
    "ContactSubmissionHandler",
    "DeliveryErrorKind",
    "DeliveryFailure",
    "DeliveryOutcome",
    "DeliverySuccess",
    "EmailMessage",
    "HandlerResult",
    "SubmissionRejected",
    "UnexpectedFault",
    "ValidationErrorKind",
    "format_sender",
    "parse_submission",
    "render_email",
    "to_response",
]
