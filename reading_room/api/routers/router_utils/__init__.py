"""
Router utility functions.

Contains helpers extracted from router endpoints to keep them clean.
"""

from reading_room.api.routers.router_utils.error_handling import (
    APOLOGY_MESSAGE,
    NO_DOCUMENTS_MESSAGE,
    handle_retrieval_errors,
)

__all__ = [
    "APOLOGY_MESSAGE",
    "NO_DOCUMENTS_MESSAGE",
    "handle_retrieval_errors",
]
