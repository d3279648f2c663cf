"""Tests for ContactSubmissionHandler and the result-to-response mapping."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest
from fakes import FakeSender
from prometheus_client import REGISTRY

from contact_relay.contact.handler import (
    FAILURE_MESSAGE,
    MISSING_FIELDS_MESSAGE,
    SUCCESS_MESSAGE,
    ContactSubmissionHandler,
    UnexpectedFault,
    to_response,
)
from contact_relay.contact.models import (
    DeliveryErrorKind,
    DeliveryFailure,
    DeliverySuccess,
    ValidationErrorKind,
)
from contact_relay.contact.validation import SubmissionRejected

TO_ADDRESS = "owner@portfolio.dev"
FROM_DISPLAY = "Portfolio Contact <owner@portfolio.dev>"


def _make_handler(
    sender: FakeSender, clock: Callable[[], datetime] | None = None
) -> ContactSubmissionHandler:
    kwargs: dict[str, Any] = {}
    if clock is not None:
        kwargs["clock"] = clock
    return ContactSubmissionHandler(
        sender=sender, to_address=TO_ADDRESS, from_display=FROM_DISPLAY, **kwargs
    )


def _submissions(outcome: str) -> float:
    value = REGISTRY.get_sample_value("contact_submissions_total", {"outcome": outcome})
    return value or 0.0


# ---------------------------------------------------------------------------
# to_response
# ---------------------------------------------------------------------------


class TestToResponse:
    """The single mapping from workflow result to HTTP response."""

    def test_missing_fields_is_400(self) -> None:
        response = to_response(SubmissionRejected(kind=ValidationErrorKind.MISSING_FIELDS))
        assert response.status_code == 400
        assert response.success is False
        assert response.message == MISSING_FIELDS_MESSAGE

    def test_invalid_email_is_400(self) -> None:
        response = to_response(SubmissionRejected(kind=ValidationErrorKind.INVALID_EMAIL))
        assert response.status_code == 400
        assert response.success is False

    def test_success_is_200(self) -> None:
        response = to_response(DeliverySuccess())
        assert response.status_code == 200
        assert response.body() == {"success": True, "message": SUCCESS_MESSAGE}

    def test_failure_is_500_without_detail(self) -> None:
        response = to_response(
            DeliveryFailure(kind=DeliveryErrorKind.NETWORK_ERROR, detail="secret relay host")
        )
        assert response.status_code == 500
        assert response.body() == {"success": False, "message": FAILURE_MESSAGE}

    def test_unexpected_fault_is_500(self) -> None:
        response = to_response(UnexpectedFault(detail="KeyError: 'x'"))
        assert response.status_code == 500
        assert response.message == FAILURE_MESSAGE


# ---------------------------------------------------------------------------
# handle: validation short-circuits
# ---------------------------------------------------------------------------


class TestHandleValidation:
    """Invalid submissions return 400 and never reach the sender."""

    @pytest.mark.anyio()
    @pytest.mark.parametrize("field", ["name", "email", "subject", "message"])
    async def test_missing_field_returns_400(
        self, fake_sender: FakeSender, valid_payload: dict[str, Any], field: str
    ) -> None:
        del valid_payload[field]
        response = await _make_handler(fake_sender).handle(valid_payload)

        assert response.status_code == 400
        assert response.success is False
        assert fake_sender.sent == []

    @pytest.mark.anyio()
    @pytest.mark.parametrize("value", ["", "  ", None, 123])
    async def test_empty_or_non_string_returns_400(
        self, fake_sender: FakeSender, valid_payload: dict[str, Any], value: object
    ) -> None:
        valid_payload["subject"] = value
        response = await _make_handler(fake_sender).handle(valid_payload)

        assert response.status_code == 400
        assert fake_sender.sent == []

    @pytest.mark.anyio()
    @pytest.mark.parametrize("email", ["not-an-email", "a@b", "a@b.com extra"])
    async def test_invalid_email_returns_400(
        self, fake_sender: FakeSender, valid_payload: dict[str, Any], email: str
    ) -> None:
        valid_payload["email"] = email
        response = await _make_handler(fake_sender).handle(valid_payload)

        assert response.status_code == 400
        assert response.success is False
        assert fake_sender.sent == []

    @pytest.mark.anyio()
    async def test_non_mapping_input_returns_400(self, fake_sender: FakeSender) -> None:
        response = await _make_handler(fake_sender).handle(["not", "a", "dict"])

        assert response.status_code == 400
        assert fake_sender.sent == []

    @pytest.mark.anyio()
    async def test_rejection_counted(
        self, fake_sender: FakeSender, valid_payload: dict[str, Any]
    ) -> None:
        before = _submissions("rejected")
        valid_payload["email"] = "nope"
        await _make_handler(fake_sender).handle(valid_payload)
        assert _submissions("rejected") == before + 1


# ---------------------------------------------------------------------------
# handle: dispatch and outcome mapping
# ---------------------------------------------------------------------------


class TestHandleDispatch:
    """Valid submissions are rendered, sent once, and mapped."""

    @pytest.mark.anyio()
    async def test_success_returns_200(
        self, fake_sender: FakeSender, valid_payload: dict[str, Any]
    ) -> None:
        response = await _make_handler(fake_sender).handle(valid_payload)

        assert response.status_code == 200
        assert response.success is True
        assert len(fake_sender.sent) == 1

    @pytest.mark.anyio()
    async def test_sent_message_rendered_from_submission(
        self, fake_sender: FakeSender, valid_payload: dict[str, Any]
    ) -> None:
        await _make_handler(fake_sender).handle(valid_payload)

        message = fake_sender.sent[0]
        assert message.subject_line == "PORTFOLIO CONTACT: Hi"
        assert message.reply_to == "jane@example.com"
        assert message.to_address == TO_ADDRESS
        assert message.from_display == FROM_DISPLAY
        assert "Line1<br>Line2" in message.html_body
        assert "Line1\nLine2" not in message.html_body

    @pytest.mark.anyio()
    async def test_footer_uses_clock(
        self,
        fake_sender: FakeSender,
        valid_payload: dict[str, Any],
        fixed_clock: Callable[[], datetime],
    ) -> None:
        await _make_handler(fake_sender, clock=fixed_clock).handle(valid_payload)
        assert "2026-01-15T09:30:00+00:00" in fake_sender.sent[0].footer

    @pytest.mark.anyio()
    async def test_repeated_submissions_render_identical_content(
        self, fake_sender: FakeSender, valid_payload: dict[str, Any]
    ) -> None:
        handler = _make_handler(fake_sender)
        await handler.handle(valid_payload)
        await handler.handle(dict(valid_payload))

        first, second = fake_sender.sent
        assert first.content() == second.content()

    @pytest.mark.anyio()
    async def test_failure_returns_500_without_detail(
        self, failing_sender: FakeSender, valid_payload: dict[str, Any]
    ) -> None:
        response = await _make_handler(failing_sender).handle(valid_payload)

        assert response.status_code == 500
        assert response.success is False
        detail = failing_sender.outcome.detail  # type: ignore[union-attr]
        assert detail not in str(response.body())
        assert "internal-relay-host" not in response.message
        assert len(failing_sender.sent) == 1

    @pytest.mark.anyio()
    async def test_raising_sender_returns_500(
        self, raising_sender: FakeSender, valid_payload: dict[str, Any]
    ) -> None:
        response = await _make_handler(raising_sender).handle(valid_payload)

        assert response.status_code == 500
        assert response.body() == {"success": False, "message": FAILURE_MESSAGE}
        assert "transport exploded" not in response.message

    @pytest.mark.anyio()
    async def test_raising_clock_returns_500(
        self, fake_sender: FakeSender, valid_payload: dict[str, Any]
    ) -> None:
        def broken_clock() -> datetime:
            raise ValueError("clock unavailable")

        response = await _make_handler(fake_sender, clock=broken_clock).handle(valid_payload)

        assert response.status_code == 500
        assert fake_sender.sent == []

    @pytest.mark.anyio()
    async def test_unrecognised_outcome_returns_500(
        self, valid_payload: dict[str, Any]
    ) -> None:
        sender = FakeSender(outcome={"ok": True})  # type: ignore[arg-type]
        response = await _make_handler(sender).handle(valid_payload)

        assert response.status_code == 500

    @pytest.mark.anyio()
    async def test_outcomes_counted(
        self,
        fake_sender: FakeSender,
        failing_sender: FakeSender,
        raising_sender: FakeSender,
        valid_payload: dict[str, Any],
    ) -> None:
        sent, failed, error = _submissions("sent"), _submissions("failed"), _submissions("error")

        await _make_handler(fake_sender).handle(valid_payload)
        await _make_handler(failing_sender).handle(valid_payload)
        await _make_handler(raising_sender).handle(valid_payload)

        assert _submissions("sent") == sent + 1
        assert _submissions("failed") == failed + 1
        assert _submissions("error") == error + 1
