"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .web import web_router
from .middleware.logging import LoggingMiddleware
from .middleware.redirect import ShortlinkRedirectMiddleware


def create_app(
    store_instance,
    resolver_instance,
    service_instance,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        store_instance: TieredCache instance
        resolver_instance: RedirectResolver instance
        service_instance: ShortlinkService instance
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Shortlink",
        description="URL shortener with tiered storage and password-gated keys",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Store instances in app state for access in routes and middleware
    app.state.store = store_instance
    app.state.resolver = resolver_instance
    app.state.service = service_instance
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Added last runs first: logging wraps the redirect decision
    app.add_middleware(ShortlinkRedirectMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])

    return app
