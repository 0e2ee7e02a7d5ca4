"""Main FastAPI application module."""

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette import status

from georesolve.api.v1.router import router as v1_router
from georesolve.core.config import Settings, settings
from georesolve.core.events import create_lifespan
from georesolve.core.logging import configure_logging
from georesolve.middleware.correlation import CorrelationMiddleware
from georesolve.middleware.errors import (
    ErrorHandlingMiddleware,
    register_exception_handlers,
)
from georesolve.middleware.metrics import MetricsMiddleware
from georesolve.middleware.security import SecurityHeadersMiddleware


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Assemble the application.

    Args:
        app_settings: Settings used for routing, CORS and the provider chain

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=app_settings.app_name,
        description="Address resolution across multiple geocoding providers",
        version=app_settings.version,
        docs_url=f"{app_settings.api_prefix}/docs",
        redoc_url=f"{app_settings.api_prefix}/redoc",
        openapi_url=f"{app_settings.api_prefix}/openapi.json",
        default_response_class=JSONResponse,
        lifespan=create_lifespan(app_settings),
    )

    # Add middleware in order (last added runs first):
    # 1. CORS
    # 2. Security headers
    # 3. Correlation (adds request ID)
    # 4. Metrics (tracks all requests)
    # 5. Error handling (renders uncaught errors)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=app_settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(ErrorHandlingMiddleware)
    register_exception_handlers(app)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose Prometheus metrics."""
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/", include_in_schema=False)
    async def root_redirect() -> Response:
        """Redirect root path to docs."""
        return RedirectResponse(
            url=f"{app_settings.api_prefix}/docs",
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        )

    app.include_router(v1_router, prefix=app_settings.api_prefix)
    return app


configure_logging(testing=not settings.JSON_LOGS, level=settings.LOG_LEVEL)
app = create_app()
