"""Optional error reporting for the contact relay.

Sentry is enabled only when ``SENTRY_DSN`` is set.

Provides:
- ``init_sentry(dsn, environment)``: Initialize Sentry SDK without PII.
- ``get_sentry_processor()``: Return a structlog processor that forwards
  ERROR-level log events (delivery failures, unexpected faults) to Sentry.
"""

from __future__ import annotations

import logging

import sentry_sdk
import structlog
from sentry_sdk.integrations.logging import LoggingIntegration
from structlog_sentry import SentryProcessor


def init_sentry(dsn: str, environment: str = "development") -> None:
    """Initialize Sentry SDK with the given *dsn*.

    When *dsn* is empty nothing is initialized, so ``main()`` calls this
    unconditionally.  Events never include request bodies or client IPs.

    Args:
        dsn: Sentry DSN string.  Empty string disables Sentry.
        environment: Sentry environment tag.
    """
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=0.1,
        # Submissions carry visitor names and addresses.
        send_default_pii=False,
        integrations=[
            # Disable Sentry's default logging capture to prevent
            # double-reporting with structlog-sentry.
            LoggingIntegration(event_level=None, level=None),
        ],
    )


def get_sentry_processor() -> structlog.types.Processor:
    """Return a structlog processor that forwards ERROR events to Sentry.

    Insert this into the structlog processor chain **after** ``add_log_level``
    and **before** the renderer.

    Returns:
        A ``SentryProcessor`` instance configured for ERROR-level capture.
    """
    return SentryProcessor(event_level=logging.ERROR)
