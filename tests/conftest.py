"""Shared pytest fixtures for the contact relay test suite."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest
from fakes import FakeSender

from contact_relay.contact.models import DeliveryErrorKind, DeliveryFailure

FIXED_NOW = datetime(2026, 1, 15, 9, 30, tzinfo=UTC)


@pytest.fixture
def valid_payload() -> dict[str, Any]:
    """A representative valid contact-form body."""
    return {
        "name": "Jane",
        "email": "jane@example.com",
        "subject": "Hi",
        "message": "Line1\nLine2",
    }


@pytest.fixture
def fake_sender() -> FakeSender:
    """A sender that accepts every message."""
    return FakeSender()


@pytest.fixture
def failing_sender() -> FakeSender:
    """A sender whose provider rejects every message."""
    return FakeSender(
        outcome=DeliveryFailure(
            kind=DeliveryErrorKind.PROVIDER_REJECTED,
            detail="550 5.7.1 internal-relay-host.example rejected sender",
        )
    )


@pytest.fixture
def raising_sender() -> FakeSender:
    """A sender that violates its contract by raising."""
    return FakeSender(error=RuntimeError("transport exploded"))


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """A clock frozen at ``FIXED_NOW``."""
    return lambda: FIXED_NOW


@pytest.fixture
def anyio_backend() -> str:
    """Run anyio-marked tests on asyncio, the loop the app runs on."""
    return "asyncio"
