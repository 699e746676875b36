"""
Logging helpers for user text and structured failure context.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Render a value for a log record attribute.

    Collections are summarised by size; long strings are cut.
    """
    if value is None:
        return "None"
    if isinstance(value, (list, tuple, set)):
        rendered = ", ".join(str(item) for item in value)
    elif isinstance(value, dict):
        rendered = ", ".join(f"{key}={item}" for key, item in value.items())
    else:
        rendered = str(value)
    if len(rendered) > max_length:
        return f"{rendered[:max_length]}... ({len(rendered)} chars)"
    return rendered


def preview(text: str | None, length: int = 100) -> str:
    """Single-line preview of free text such as a user query."""
    if not text:
        return ""
    flat = " ".join(text.split())
    return flat if len(flat) <= length else flat[:length] + "..."


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """
    Log an exception with its traceback and extra record attributes.

    Args:
        logger: Logger to write to
        message: Log message
        exc: Exception being reported
        **context: Attributes attached to the record (strategy, query_type, ...)
    """
    extra = {f"ctx_{key}": safe_log_value(value) for key, value in context.items()}
    extra["error_type"] = type(exc).__name__
    logger.error(f"{message}: {type(exc).__name__}: {exc}", exc_info=exc, extra=extra)
