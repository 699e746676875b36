"""
Language model boundary layer.

Embedding and completion clients backed by Google Generative AI
through LangChain integrations.
"""

from reading_room.boundary.llm.completion_service import CompletionService
from reading_room.boundary.llm.embedding_service import EmbeddingService

__all__ = ["CompletionService", "EmbeddingService"]
