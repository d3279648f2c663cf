"""Resend HTTP API email sender.

Holds one ``httpx.AsyncClient`` for the process lifetime; the client is
created at startup and closed from the application lifespan.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from contact_relay.contact.models import (
    DeliveryErrorKind,
    DeliveryFailure,
    DeliveryOutcome,
    DeliverySuccess,
    EmailMessage,
)

logger = structlog.get_logger()

DEFAULT_API_URL = "https://api.resend.com/emails"

# Provider error bodies can be long; only a prefix is kept for diagnosis.
_MAX_DETAIL_CHARS = 500


class ResendEmailSender:
    """Deliver rendered emails through the Resend ``POST /emails`` endpoint.

    Args:
        api_key: Resend API key, sent as a bearer token.
        api_url: Endpoint URL.  Overridable for testing and regional hosts.
        timeout: Request timeout in seconds.
        client: Pre-built async client.  When omitted one is created.
    """

    name = "resend"

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def build_payload(self, message: EmailMessage) -> dict[str, Any]:
        """Translate *message* into the Resend JSON request body."""
        return {
            "from": message.from_display,
            "to": [message.to_address],
            "reply_to": message.reply_to,
            "subject": message.subject_line,
            "html": message.full_html,
            "text": message.full_text,
        }

    async def send(self, message: EmailMessage) -> DeliveryOutcome:
        """Attempt one delivery of *message* through the Resend API.

        Args:
            message: The rendered email.

        Returns:
            ``DeliverySuccess`` with Resend's message ``id``, or a
            ``DeliveryFailure`` classifying the HTTP status or transport error.
        """
        try:
            response = await self._client.post(
                self._api_url,
                json=self.build_payload(message),
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.TransportError as exc:
            return DeliveryFailure(
                kind=DeliveryErrorKind.NETWORK_ERROR,
                detail=f"{type(exc).__name__}: {exc}",
            )

        if response.status_code in (401, 403):
            return DeliveryFailure(
                kind=DeliveryErrorKind.UNAUTHENTICATED,
                detail=_describe(response),
            )
        if response.is_error:
            return DeliveryFailure(
                kind=DeliveryErrorKind.PROVIDER_REJECTED,
                detail=_describe(response),
            )

        try:
            data = response.json()
        except ValueError:
            return DeliveryFailure(
                kind=DeliveryErrorKind.UNKNOWN,
                detail=f"Unparseable success body: {_describe(response)}",
            )

        message_id = data.get("id") if isinstance(data, dict) else None
        logger.debug("Resend delivery accepted", message_id=message_id)
        return DeliverySuccess(provider_message_id=message_id)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()


def _describe(response: httpx.Response) -> str:
    return f"HTTP {response.status_code}: {response.text[:_MAX_DETAIL_CHARS]}"
