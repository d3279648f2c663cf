"""Prometheus metrics instrumentation for the contact relay.

Provides:
- ``setup_metrics(app)``: Attach prometheus-fastapi-instrumentator to a FastAPI app,
  exposing ``/metrics`` with HTTP request duration/count plus the business counter.
- ``CONTACT_SUBMISSIONS``: Counter of handled submissions labelled by outcome
  (``sent``, ``rejected``, ``failed``, ``error``).

The counter is updated by the handler once per request.
"""

from __future__ import annotations

from fastapi import FastAPI
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator

CONTACT_SUBMISSIONS: Counter = Counter(
    "contact_submissions_total",
    "Total number of contact submissions handled, by outcome",
    ["outcome"],
)


def setup_metrics(app: FastAPI) -> None:
    """Instrument *app* with Prometheus HTTP metrics and expose ``/metrics``.

    ``/health`` polls and ``/metrics`` scrapes are not counted, so the HTTP
    series reflect browser traffic to ``/contact`` and ``/``.

    Args:
        app: The FastAPI application to instrument.
    """
    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        excluded_handlers=["/health", "/metrics"],
    ).instrument(app).expose(app, include_in_schema=False, should_gzip=True)
