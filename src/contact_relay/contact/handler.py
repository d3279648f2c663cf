"""The contact-submission workflow: validate, render, send, map.

``ContactSubmissionHandler.handle`` is the single boundary of the workflow.
Each internal step returns an explicit result; ``to_response`` is the only
place results become HTTP status codes and bodies.  No exception escapes
``handle`` and each call makes at most one delivery attempt.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, ConfigDict

from contact_relay.contact.models import (
    ContactResponse,
    DeliveryFailure,
    DeliverySuccess,
    ValidationErrorKind,
)
from contact_relay.contact.render import render_email
from contact_relay.contact.validation import SubmissionRejected, parse_submission
from contact_relay.observability.metrics import CONTACT_SUBMISSIONS

if TYPE_CHECKING:
    from contact_relay.email.base import EmailSender

logger = structlog.get_logger()

MISSING_FIELDS_MESSAGE = "All fields are required"
INVALID_EMAIL_MESSAGE = "Please provide a valid email address"
SUCCESS_MESSAGE = "Message sent successfully"
FAILURE_MESSAGE = "Failed to send message. Please try again later."


class UnexpectedFault(BaseModel):
    """Rendering or the sender raised instead of returning an outcome."""

    model_config = ConfigDict(frozen=True)

    detail: str


HandlerResult = SubmissionRejected | DeliverySuccess | DeliveryFailure | UnexpectedFault

_OUTCOME_LABELS: dict[type[BaseModel], str] = {
    SubmissionRejected: "rejected",
    DeliverySuccess: "sent",
    DeliveryFailure: "failed",
    UnexpectedFault: "error",
}


def to_response(result: HandlerResult) -> ContactResponse:
    """Convert a workflow result into the response returned to the caller.

    Delivery and fault details never appear in the body.
    """
    if isinstance(result, SubmissionRejected):
        message = (
            INVALID_EMAIL_MESSAGE
            if result.kind is ValidationErrorKind.INVALID_EMAIL
            else MISSING_FIELDS_MESSAGE
        )
        return ContactResponse(status_code=400, success=False, message=message)
    if isinstance(result, DeliverySuccess):
        return ContactResponse(status_code=200, success=True, message=SUCCESS_MESSAGE)
    return ContactResponse(status_code=500, success=False, message=FAILURE_MESSAGE)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class ContactSubmissionHandler:
    """Relay contact-form submissions to the site owner.

    The handler holds only immutable configuration and the shared sender,
    so one instance serves all concurrent requests.

    Args:
        sender: The process-wide email delivery capability.
        to_address: The site owner's mailbox.
        from_display: ``From`` header value for relayed emails.
        clock: Returns the current time for the email footer.
    """

    def __init__(
        self,
        sender: EmailSender,
        to_address: str,
        from_display: str,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sender = sender
        self._to_address = to_address
        self._from_display = from_display
        self._clock = clock

    @property
    def sender(self) -> EmailSender:
        return self._sender

    async def handle(self, raw_input: Any) -> ContactResponse:
        """Validate, render, send and map one raw submission.

        Args:
            raw_input: The decoded request body (any shape).

        Returns:
            The ``ContactResponse`` for the caller.  Never raises.
        """
        result = await self._process(raw_input)
        CONTACT_SUBMISSIONS.labels(outcome=_OUTCOME_LABELS.get(type(result), "error")).inc()
        return to_response(result)

    async def _process(self, raw_input: Any) -> HandlerResult:
        parsed = parse_submission(raw_input)
        if isinstance(parsed, SubmissionRejected):
            logger.info("Contact submission rejected", reason=str(parsed.kind))
            return parsed

        log = logger.bind(
            reply_to_domain=parsed.email.rpartition("@")[2],
            message_length=len(parsed.message),
        )

        try:
            message = render_email(
                parsed,
                to_address=self._to_address,
                from_display=self._from_display,
                submitted_at=self._clock(),
            )
            outcome = await self._sender.send(message)
        except Exception as exc:
            log.exception("Unexpected fault while relaying contact submission")
            return UnexpectedFault(detail=f"{type(exc).__name__}: {exc}")

        if isinstance(outcome, DeliverySuccess):
            log.info("Contact message sent", provider_message_id=outcome.provider_message_id)
            return outcome
        if isinstance(outcome, DeliveryFailure):
            log.error(
                "Contact message delivery failed",
                kind=str(outcome.kind),
                detail=outcome.detail,
            )
            return outcome

        log.error("Email sender returned an unrecognised outcome", outcome=repr(outcome))
        return UnexpectedFault(detail=f"Unrecognised outcome type {type(outcome).__name__}")
