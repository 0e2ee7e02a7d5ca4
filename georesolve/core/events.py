"""Application startup and shutdown events."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

import httpx
from prometheus_client import Counter

from georesolve.core.config import Settings, settings
from georesolve.geocoding.service import GeocodeService

# Prometheus metrics
REQUESTS_TOTAL = Counter(
    "app_http_requests_total",
    "Total number of HTTP requests",
    labelnames=["method", "path"],
)

RESPONSES_TOTAL = Counter(
    "app_http_responses_total",
    "Total number of HTTP responses",
    labelnames=["status_code"],
)

logger: logging.Logger = logging.getLogger("georesolve.core.events")


class AppState:
    """Per-process resources shared by all requests."""

    def __init__(self) -> None:
        """Initialize state."""
        self.http_client: httpx.AsyncClient | None = None
        self.geocode_service: GeocodeService | None = None

    def health_check(self) -> dict[str, Any]:
        """Report which parts of the service are ready.

        Returns:
            Dict containing health status and the active provider chain
        """
        providers = (
            self.geocode_service.provider_names if self.geocode_service else []
        )
        status = "healthy" if providers else "degraded"
        if self.http_client is None or self.http_client.is_closed:
            status = "unhealthy"
        return {"status": status, "providers": providers}


def create_http_client(app_settings: Settings) -> httpx.AsyncClient:
    """Create the shared outbound HTTP client."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(app_settings.GEOCODING_TIMEOUT, connect=5.0),
        follow_redirects=True,
    )


def create_start_app_handler(
    app: Any, app_settings: Settings = settings
) -> Callable[[], Awaitable[None]]:
    """Create startup event handler.

    Args:
        app: FastAPI application instance
        app_settings: Settings used to build the provider chain

    Returns:
        Startup handler function
    """

    async def start_app() -> None:
        client = create_http_client(app_settings)
        service = GeocodeService.from_settings(app_settings, client)

        state = AppState()
        state.http_client = client
        state.geocode_service = service
        app.state.resources = state

        logger.info(
            "Application startup complete - "
            f"Providers: {', '.join(service.provider_names) or 'none'}"
        )

    return start_app


def create_stop_app_handler(app: Any) -> Callable[[], Awaitable[None]]:
    """Create shutdown event handler.

    Args:
        app: FastAPI application instance

    Returns:
        Shutdown handler function
    """

    async def stop_app() -> None:
        state: AppState | None = getattr(app.state, "resources", None)
        client = state.http_client if state else None
        try:
            if client is not None:
                logger.info("Closing HTTP client...")
                await client.aclose()
            logger.info("Application shutdown complete")
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")
            raise

    return stop_app


def create_lifespan(
    app_settings: Settings = settings,
) -> Callable[[Any], Any]:
    """Combine the startup and shutdown handlers into a lifespan context."""

    @asynccontextmanager
    async def lifespan(app: Any) -> AsyncIterator[None]:
        await create_start_app_handler(app, app_settings)()
        try:
            yield
        finally:
            await create_stop_app_handler(app)()

    return lifespan
