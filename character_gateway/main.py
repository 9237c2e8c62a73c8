"""
Main FastAPI application entry point.

This module builds the character gateway from an explicit settings value and
runs it under uvicorn.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from character_gateway import __version__
from character_gateway.api.router import api_router
from character_gateway.config import Settings, load_settings, setup_logging
from character_gateway.gateway.proxy import UpstreamClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    logger.info(
        "Character gateway listening on port %s (upstream %s, credential %s)",
        settings.port,
        settings.upstream_base_url,
        "configured" if settings.has_api_key else "not configured"
    )

    yield

    await app.state.upstream_client.close()
    logger.info("Character gateway stopped")


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """
    Build the gateway application.

    Args:
        settings: Gateway settings; loaded from the environment when omitted.
        transport: Optional httpx transport for the upstream client.

    Returns:
        The configured FastAPI application.
    """
    if settings is None:
        settings = load_settings()

    app = FastAPI(
        title="Character Gateway",
        description="Proxies one upstream character resource and keeps its API key server-side",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.state.settings = settings
    app.state.upstream_client = UpstreamClient(settings, transport=transport)

    if settings.cors_enabled:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_methods=["*"],
            allow_headers=["*"]
        )

    app.include_router(api_router)

    return app


def run() -> None:
    """Load settings, configure logging and serve the gateway."""
    try:
        settings = load_settings()
    except ValidationError as e:
        setup_logging()
        logger.critical("Invalid configuration, refusing to start:\n%s", e)
        sys.exit(1)

    setup_logging(
        log_level=settings.log_level,
        log_format=settings.log_format.value,
        enable_access_log=settings.access_log
    )

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
        access_log=settings.access_log
    )


if __name__ == "__main__":
    run()
