"""FastAPI application for the Caro API server."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import ServiceConfig
from .models import ServiceInfo
from .routes import router

logger = logging.getLogger("caroserver.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    config: ServiceConfig = app.state.config

    errors = config.validate()
    if errors:
        raise ValueError(f"Configuration errors: {errors}")

    logger.info(
        f"Starting caro API server (rethinkdb: {config.rethinkdb.address}, "
        f"db: {config.rethinkdb.db_name})"
    )
    if not config.facebook.enabled:
        logger.warning("Facebook login is not configured")

    yield

    logger.info("Shutting down caro API server")


def create_app(config: Optional[ServiceConfig] = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        config: Loaded service configuration. If None, loads from the
            file named by ``CARO_CONFIG`` plus environment overrides.

    Returns:
        Configured FastAPI application.
    """
    if config is None:
        config = ServiceConfig.from_env()

    app = FastAPI(
        title="Caro API",
        description="Game API server for Caro (gomoku)",
        version=__version__,
        lifespan=lifespan,
    )

    # Read by the lifespan and by route dependencies
    app.state.config = config

    # The web client is served from a separate origin during development
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"http://(localhost|127\.0\.0\.1)(:\d+)?",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.get("/", response_model=ServiceInfo)
    async def root() -> ServiceInfo:
        return ServiceInfo(service="caro-server", version=__version__)

    return app


def run_server(
    config: Optional[ServiceConfig] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    log_level: str = "info",
):
    """Run the HTTP server.

    Args:
        config: Service configuration. If None, loads from environment.
        host: Override host from config.
        port: Override port from config.
        log_level: Logging level.
    """
    if config is None:
        config = ServiceConfig.from_env()

    app = create_app(config)

    uvicorn.run(
        app,
        host=host or config.server.host,
        port=port or int(config.server.port),
        log_level=log_level,
    )
