"""
FastAPI application with assembled routers.

create_app() wires logging, middleware and the versioned routers. The
shared chunk store, embedding and completion clients are built in the
lifespan hook so the first request does not pay for them.

Dependencies: fastapi, uvicorn, reading_room.api.routers
System role: API entry point with router assembly and server launch
"""

from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reading_room.api.deps.dependencies import get_service_cache
from reading_room.configs import get_settings
from reading_room.observability.logger import configure_logging
from reading_room.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware
from .routers import (
    catalog_router,
    chat_router,
    health_router,
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared clients and pipeline on startup, drop them on shutdown."""
    cache = get_service_cache()
    # chat_service pulls in pipeline, chunk store, embedding and completion clients
    _ = cache.chat_service
    logger.info(f"{__name__}:lifespan - Retrieval pipeline ready")

    yield

    cache.clear()
    logger.info(f"{__name__}:lifespan - Service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance
    """
    configure_logging(get_settings().log_level)

    app = FastAPI(
        title="Reading Room RAG API",
        description="Document Q&A over a private reading room with multi-strategy retrieval",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID"],
    )
    # Added last so it wraps request logging and every log line carries the ID
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    for router in (health_router, chat_router, catalog_router):
        app.include_router(router, prefix=API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("reading_room.api.main:app", host="0.0.0.0", port=8000)
