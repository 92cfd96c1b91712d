"""
FastAPI Application Entry Point.

This is the main entry point for the Second Brain backend.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from second_brain.backend.api import health
from second_brain.backend.api import router as api_router
from second_brain.backend.core.config import get_app_config
from second_brain.backend.core.database import create_tables, dispose_engine
from second_brain.backend.core.exception_handlers import register_exception_handlers
from second_brain.backend.core.logging import get_logger, setup_logging
from second_brain.backend.core.middleware import RequestContextMiddleware
from second_brain.backend.search.client import SearchIndexClient
from second_brain.backend.search.sync import SearchSynchronizer
from second_brain.backend.storage.object_store import CloudinaryObjectStore

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging(level=app_config.logging.level)

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
        },
    )

    if app_config.database.create_tables:
        await create_tables()

    search_client = SearchIndexClient.from_config()
    search_sync = SearchSynchronizer.from_config(search_client)
    if not await search_sync.ensure_collection():
        logger.warning("Search index unavailable at startup, continuing without it")

    app.state.search_sync = search_sync
    app.state.object_store = CloudinaryObjectStore.from_config()

    yield

    await search_client.close()
    await dispose_engine()
    logger.info("Application shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_settings = get_app_config().application

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_router)

    return app


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn second_brain.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
