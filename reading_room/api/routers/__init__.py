"""API routers."""

from .catalog import router as catalog_router
from .chat import router as chat_router
from .health import router as health_router

__all__ = [
    "catalog_router",
    "chat_router",
    "health_router",
]
