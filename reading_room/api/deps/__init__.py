"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_chat_service,
    get_chunk_store,
    get_service_cache,
    get_settings_dependency,
)

__all__ = [
    "get_chat_service",
    "get_chunk_store",
    "get_service_cache",
    "get_settings_dependency",
]
