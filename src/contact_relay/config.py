"""Centralized, typed configuration using pydantic-settings.

Provides a single ``Settings`` class backed by ``.env`` file and environment
variables, a cached ``get_settings()`` accessor, and a ``validate_credentials()``
startup gate that enforces credential presence in production mode.

The legacy environment variable names from the first deployment
(``YOUR_EMAIL``, ``EMAIL_USER``, ``EMAIL_PASS``) are accepted as aliases.

IMPORTANT: This module has ZERO imports from the ``contact_relay`` package to
prevent circular imports.
"""

from __future__ import annotations

import sys
from functools import lru_cache
from typing import Literal

import structlog
from pydantic import AliasChoices, Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()

EmailProvider = Literal["smtp", "resend", "console"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables and ``.env`` file.

    Values are read once at process start and never mutated afterwards.
    ``SecretStr`` fields prevent accidental leaks in logs or error output.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # -- General ---------------------------------------------------------------
    production: bool = False
    port: int = 3000
    service_name: str = "portfolio-contact-api"
    cors_origins: str = "*"

    # -- Routing of contact mail -----------------------------------------------
    email_provider: EmailProvider = "console"
    contact_to_email: str = Field(
        default="",
        validation_alias=AliasChoices("contact_to_email", "your_email"),
    )
    sender_name: str = "Portfolio Contact"
    sender_email: str = ""

    # -- SMTP ------------------------------------------------------------------
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: str = Field(
        default="",
        validation_alias=AliasChoices("smtp_username", "email_user"),
    )
    smtp_password: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("smtp_password", "email_pass"),
    )
    smtp_timeout: float = 10.0

    # -- Resend ----------------------------------------------------------------
    resend_api_key: SecretStr = SecretStr("")
    resend_api_url: str = "https://api.resend.com/emails"
    resend_timeout: float = 10.0

    # -- Observability ---------------------------------------------------------
    sentry_dsn: str = ""

    @property
    def from_address(self) -> str:
        """The envelope sender: ``sender_email`` or, failing that, the SMTP user."""
        return self.sender_email or self.smtp_username

    @property
    def allowed_origins(self) -> list[str]:
        """``cors_origins`` split on commas with blanks dropped."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance.

    The ``@lru_cache`` decorator ensures environment variables are parsed
    exactly once.  Call ``get_settings.cache_clear()`` in tests to reset.

    Returns:
        The application ``Settings``.
    """
    try:
        return Settings()
    except ValidationError as exc:
        # Log only the structured errors list -- never the full exception
        # which may contain raw SecretStr values.
        logger.error("settings_validation_failed", errors=exc.errors())
        sys.exit(1)


def missing_credentials(settings: Settings) -> list[str]:
    """List human-readable problems with the configured email provider.

    Args:
        settings: The loaded application settings.

    Returns:
        One entry per missing credential; empty when the provider is usable.
    """
    errors: list[str] = []

    if settings.email_provider == "console":
        if settings.production:
            errors.append("EMAIL_PROVIDER=console cannot deliver mail in production")
        return errors

    if not settings.contact_to_email:
        errors.append("CONTACT_TO_EMAIL is empty or not set")

    if settings.email_provider == "smtp":
        if not settings.smtp_username:
            errors.append("SMTP_USERNAME is empty or not set")
        if not settings.smtp_password.get_secret_value():
            errors.append("SMTP_PASSWORD is empty or not set")
    elif settings.email_provider == "resend":
        if not settings.resend_api_key.get_secret_value():
            errors.append("RESEND_API_KEY is empty or not set")
        if not settings.sender_email:
            errors.append("SENDER_EMAIL is empty or not set")

    return errors


def validate_credentials(settings: Settings) -> None:
    """Enforce credential presence at startup.

    In **production** mode (``settings.production is True``), the application
    exits with a clear error block if any required credential is missing.

    In **development** mode, each missing credential is logged as a warning
    but the application continues to start.

    Args:
        settings: The loaded application settings.
    """
    errors = missing_credentials(settings)

    if not errors:
        logger.info("credential_validation_passed", provider=settings.email_provider)
        return

    if settings.production:
        for err in errors:
            logger.error("credential_missing", detail=err)
        print("\n=== STARTUP FAILED ===", file=sys.stderr)
        print("Missing required credentials for production mode:", file=sys.stderr)
        for err in errors:
            print(f"  - {err}", file=sys.stderr)
        print("======================\n", file=sys.stderr)
        sys.exit(1)
    else:
        for err in errors:
            logger.warning("credential_missing_dev", detail=err)
