"""
FastAPI application entry point.
Mounts routes, error handling, CORS and Prometheus metrics.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from eventhub.api.v1.router import api_router
from eventhub.config import get_settings
from eventhub.core.errors import HttpError, http_error_handler
from eventhub.core.logging import setup_logging
from eventhub.db.session import engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: configure logging. Shutdown: release pooled DB connections."""
    setup_logging()
    logger.info("Starting %s", app.title)
    yield
    await engine.dispose()
    logger.info("Stopped %s", app.title)


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Users service for the sports events platform: profiles, registration and login.",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(HttpError, http_error_handler)

    # Prometheus metrics at /metrics
    app.mount("/metrics", make_asgi_app())

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
