"""The email delivery capability consumed by the contact handler."""

from __future__ import annotations

from typing import Protocol

from contact_relay.contact.models import DeliveryOutcome, EmailMessage


class EmailSender(Protocol):
    """Anything that can attempt one delivery of a rendered email.

    Implementations report provider and network problems as a
    ``DeliveryFailure`` instead of raising.
    """

    name: str

    async def send(self, message: EmailMessage) -> DeliveryOutcome: ...

    async def aclose(self) -> None: ...
