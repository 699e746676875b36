"""
Retrieval orchestration.

Query classification, multi-strategy retrieval, aggregation, ranking and
context formatting for the chat endpoint.
"""

from reading_room.core.retrieval.pipeline import RetrievalPipeline

__all__ = ["RetrievalPipeline"]
