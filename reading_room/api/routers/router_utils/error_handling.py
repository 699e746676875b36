"""
Retrieval error handling utilities.

A decorator that maps domain exceptions raised by the chat and catalog
endpoints to HTTP responses. Internal detail is logged, never returned.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from reading_room.core.exceptions import (
    AllStrategiesFailedError,
    GenerationError,
    MalformedQueryError,
    ValidationError,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

APOLOGY_MESSAGE = "Sorry, something went wrong while answering your question. Please try again."
NO_DOCUMENTS_MESSAGE = "No documents could be searched right now. Please try again shortly."


def handle_retrieval_errors(func: F) -> F:
    """
    Decorator to turn retrieval pipeline errors into HTTPExceptions.

    - MalformedQueryError / ValidationError -> 400 with the validation message
    - AllStrategiesFailedError -> 503 "no documents could be searched"
    - GenerationError and anything else -> 500 with a generic apology
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except (MalformedQueryError, ValidationError) as e:
            logger.warning("Invalid retrieval request", extra={"error": e.message, "details": e.details})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except AllStrategiesFailedError as e:
            logger.error(
                "All retrieval strategies failed",
                extra={"strategies": e.strategies, "error": str(e)},
            )
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=NO_DOCUMENTS_MESSAGE)

        except GenerationError as e:
            logger.error("Answer generation failed", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=APOLOGY_MESSAGE)

        except Exception as e:
            logger.exception("Unexpected failure in retrieval request", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=APOLOGY_MESSAGE)

    return wrapper  # type: ignore
