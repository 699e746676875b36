"""
Embedding service.

Maps query text to a fixed-dimension vector for semantic search.

Dependencies: langchain_google_genai, tenacity
System role: Embedding capability consumed by the semantic strategy
"""

import logging

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from reading_room.boundary.llm.embeddings_wrapper import FixedDimensionEmbeddings
from reading_room.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)


class EmbeddingService:
    """Async query embedding with retries on provider failures."""

    def __init__(
        self,
        model: str,
        dimension: int,
        retry_attempts: int = 3,
        embeddings: FixedDimensionEmbeddings | None = None,
    ) -> None:
        """
        Initialize the embedding client.

        Args:
            model: Google embedding model ID
            dimension: Output vector dimension
            retry_attempts: Attempts before giving up
            embeddings: Prebuilt LangChain embeddings (tests inject a mock)
        """
        self.model = model
        self.dimension = dimension
        self._embeddings = embeddings or FixedDimensionEmbeddings(
            model=model,
            output_dimensionality=dimension,
        )
        self._retrying = AsyncRetrying(
            retry=retry_if_exception_type(Exception),
            stop=stop_after_attempt(retry_attempts),
            wait=wait_exponential_jitter(initial=1, max=10, jitter=2),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:embed - Retry {retry_state.attempt_number}/{retry_attempts} "
                f"after {type(retry_state.outcome.exception()).__name__}"
            ),
            reraise=True,
        )

    async def embed(self, text: str) -> list[float]:
        """
        Embed a single query string.

        Args:
            text: Query text

        Returns:
            list[float]: Vector of length `dimension`

        Raises:
            EmbeddingError: If the provider keeps failing or returns a wrong-sized vector
        """
        try:
            async for attempt in self._retrying.copy():
                with attempt:
                    vector = await self._embeddings.aembed_query(text)
        except Exception as e:
            logger.error(f"{__name__}:embed - {type(e).__name__}: {e}")
            raise EmbeddingError(
                "Embedding generation failed",
                details={"model": self.model, "error_type": type(e).__name__},
            ) from e

        if len(vector) != self.dimension:
            raise EmbeddingError(
                "Embedding has unexpected dimension",
                details={"expected": self.dimension, "actual": len(vector)},
            )
        return list(vector)
