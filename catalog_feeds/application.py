"""
Application factory

Importing this module has no side effects; catalog_feeds.main builds the
served app from the process environment.
"""
from contextlib import asynccontextmanager
import logging

import httpx
from fastapi import FastAPI

from catalog_feeds import __version__
from catalog_feeds.config import CustomSettings
from catalog_feeds.routers import main_router
from catalog_feeds.services import UpstreamFetcher


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("Starting Catalog Feeds service...")
    logger.info(
        "Upstream: %s",
        app.state.settings.media_url or "not configured"
    )

    yield

    logger.info("Catalog Feeds service stopped")


def create_app(
    settings: CustomSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None
) -> FastAPI:
    """
    Build the application around an explicit settings object

    Args:
        settings: Configuration; loaded from the environment when omitted
        transport: Optional httpx transport for the upstream fetcher

    Returns:
        Configured FastAPI application
    """
    settings = settings or CustomSettings()

    app = FastAPI(
        title="Catalog Feeds",
        version=__version__,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.field_policy = settings.resolved_field_policy()
    app.state.fetcher = UpstreamFetcher(
        check_status=settings.check_upstream_status,
        transport=transport,
    )

    app.include_router(main_router)
    return app
