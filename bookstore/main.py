"""FastAPI application factory and process entry point."""

import asyncio
import sys
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from prometheus_client import CollectorRegistry
from prometheus_fastapi_instrumentator import Instrumentator

from bookstore import __version__
from bookstore.api.middleware import install_middleware
from bookstore.api.routes import books_router, health_router
from bookstore.config import Settings, get_settings
from bookstore.core.lifecycle import BookStoreServer, serve
from bookstore.core.registry import ProviderRegistry
from bookstore.core.store import BookStore, register_builtin_providers
from bookstore.utils.logging import setup_logging

logger = structlog.get_logger(__name__)


def create_app(
    store: BookStore,
    settings: Settings | None = None,
    provider_name: str | None = None,
) -> FastAPI:
    """Build the HTTP application around a storage provider."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup and shutdown."""
        logger.info("Application ready", provider=app.state.provider_name)
        yield
        logger.info("Application stopped")

    app = FastAPI(
        title=settings.app_name,
        description="Book record CRUD service with pluggable storage providers",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.store = store
    app.state.provider_name = provider_name or settings.store_provider

    install_middleware(app)

    app.include_router(health_router)
    app.include_router(books_router)

    # Prometheus metrics, one registry per app
    if settings.metrics_enabled:
        Instrumentator(registry=CollectorRegistry()).instrument(app).expose(
            app, endpoint="/metrics", include_in_schema=False
        )

    return app


def build_registry() -> ProviderRegistry:
    """Create the provider registry with every built-in provider registered."""
    registry = ProviderRegistry()
    register_builtin_providers(registry)
    return registry


def main() -> None:
    """Run the service until it is signalled to stop."""
    settings = get_settings()
    setup_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        debug=settings.debug,
    )

    registry = build_registry()
    # An unknown provider is a configuration error; let it end the process.
    store = registry.resolve(settings.store_provider)

    app = create_app(store, settings, provider_name=settings.store_provider)
    server = BookStoreServer(
        app,
        host=settings.host,
        port=settings.port,
        startup_grace=settings.startup_grace_seconds,
        shutdown_timeout=settings.shutdown_timeout_seconds,
    )
    sys.exit(asyncio.run(serve(server)))


if __name__ == "__main__":
    main()
