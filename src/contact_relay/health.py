"""Liveness and service-description endpoints.

Provides two top-level routes:

- ``GET /health`` -- Liveness probe.  Returns 200 with the service name and the
  current UTC timestamp if the process is alive.
- ``GET /``       -- Describes the service and its public endpoints.
"""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import FastAPI, Request


def register_health_routes(app: FastAPI) -> None:
    """Register ``/health`` and ``/`` endpoints on *app*.

    The service name is read from ``app.state.settings``.

    Args:
        app: The FastAPI application instance.
    """

    @app.get("/health")
    async def health(request: Request) -> dict[str, str]:
        """Liveness probe -- always returns 200 if the process is running."""
        return {
            "status": "healthy",
            "service": request.app.state.settings.service_name,
            "timestamp": datetime.now(tz=UTC).isoformat(),
        }

    @app.get("/")
    async def root(request: Request) -> dict[str, object]:
        """Describe the API and list its endpoints."""
        return {
            "message": "Portfolio Contact API is running",
            "service": request.app.state.settings.service_name,
            "endpoints": {
                "contact": "POST /contact",
                "health": "GET /health",
                "metrics": "GET /metrics",
            },
        }
