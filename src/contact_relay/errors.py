"""Exception classes for the contact relay.

Request-level problems (bad input, failed delivery) are results, not
exceptions; these cover misconfiguration detected at startup.
"""


class ContactRelayError(Exception):
    """Base class for all errors raised by the contact relay."""


class SenderConfigurationError(ContactRelayError):
    """Raised when the configured email provider is not supported.

    Attributes:
        provider: The provider name that was requested.
    """

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"Unsupported email provider '{provider}'")
