"""Application entry point for the portfolio contact relay.

Configures:
- **structlog** with JSON rendering (production) or colored console (development),
  forwarding ERROR events to Sentry when a DSN is set
- **Email sender** built once at startup and shared by every request
- **Contact handler** stored on ``app.state`` for the ``POST /contact`` route
- **CORS**, request IDs, Prometheus metrics, and health routes
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contact_relay.config import Settings, get_settings, validate_credentials
from contact_relay.contact.handler import ContactSubmissionHandler
from contact_relay.contact.render import format_sender
from contact_relay.contact.router import router as contact_router
from contact_relay.email.factory import build_email_sender
from contact_relay.health import register_health_routes
from contact_relay.observability.metrics import setup_metrics
from contact_relay.observability.middleware import RequestIdMiddleware
from contact_relay.observability.sentry import get_sentry_processor, init_sentry

logger = structlog.get_logger()


def configure_logging(
    production: bool = False,
    service: str = "portfolio-contact-api",
    sentry_enabled: bool = False,
) -> None:
    """Configure structlog for production (JSON) or development (console).

    Production mode (*production=True*): JSON rendering at INFO level.
    Development mode: colored console rendering at DEBUG level.

    Args:
        production: Enable production mode if ``True``.
        service: Service name bound into every log event.
        sentry_enabled: Insert the structlog-sentry processor so ERROR
            events are reported to Sentry.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
    ]
    if sentry_enabled:
        shared_processors.append(get_sentry_processor())
    shared_processors += [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if production:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        processors = [*shared_processors, structlog.processors.format_exc_info, renderer]
        log_level = logging.INFO
    else:
        renderer = structlog.dev.ConsoleRenderer()
        processors = [*shared_processors, renderer]
        log_level = logging.DEBUG

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service=service)


def initialize_services(settings: Settings | None = None) -> dict[str, Any]:
    """Set up the shared, immutable services for the application.

    Builds the email sender named by ``EMAIL_PROVIDER`` and the
    ``ContactSubmissionHandler`` that uses it.

    Args:
        settings: Application settings.  If ``None``, ``get_settings()`` is used.

    Returns:
        A dict of initialized service instances keyed by name.
    """
    if settings is None:
        settings = get_settings()

    sender = build_email_sender(settings)
    handler = ContactSubmissionHandler(
        sender=sender,
        to_address=settings.contact_to_email,
        from_display=format_sender(settings.sender_name, settings.from_address),
    )

    if not settings.contact_to_email:
        logger.warning("CONTACT_TO_EMAIL not set, relayed mail has no recipient")

    return {
        "settings": settings,
        "email_sender": sender,
        "handler": handler,
    }


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Lifespan context manager for FastAPI startup and shutdown.

    On shutdown: closes the email sender (and its HTTP client, if any).

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application.
    """
    services = app.state.services
    logger.info(
        "FastAPI application starting",
        provider=services["email_sender"].name,
    )
    yield
    await services["email_sender"].aclose()
    logger.info("Email sender closed")


def create_app(services: dict[str, Any]) -> FastAPI:
    """Create the FastAPI app with middleware, metrics, and routes.

    Args:
        services: The initialized services dict from ``initialize_services``.

    Returns:
        The configured FastAPI application.
    """
    settings: Settings = services["settings"]

    fastapi_app = FastAPI(title="Portfolio Contact API", lifespan=lifespan)
    fastapi_app.state.services = services
    fastapi_app.state.settings = settings
    fastapi_app.state.handler = services["handler"]

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    fastapi_app.add_middleware(RequestIdMiddleware, service=settings.service_name)

    fastapi_app.include_router(contact_router)
    register_health_routes(fastapi_app)
    setup_metrics(fastapi_app)

    return fastapi_app


async def main() -> None:
    """Main entry point: configure, validate, and serve.

    1. Configure logging and Sentry
    2. Validate provider credentials
    3. Initialize services and create the FastAPI app
    4. Run uvicorn until shutdown
    """
    settings = get_settings()
    init_sentry(
        settings.sentry_dsn,
        environment="production" if settings.production else "development",
    )
    configure_logging(
        production=settings.production,
        service=settings.service_name,
        sentry_enabled=bool(settings.sentry_dsn),
    )
    logger.info("Application starting")

    validate_credentials(settings)

    services = initialize_services(settings)
    fastapi_app = create_app(services)

    config = uvicorn.Config(
        fastapi_app,
        host="0.0.0.0",
        port=settings.port,
        log_level="info",
    )
    server = uvicorn.Server(config)
    logger.info("Contact endpoint ready", url=f"http://localhost:{settings.port}/contact")
    await server.serve()


def run() -> None:
    """Console-script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
