"""
Retrieval pipeline configuration settings.

Thresholds, result caps, pagination sizes, concurrency bounds and
feature toggles for the retrieval orchestration pipeline.

Dependencies: pydantic, pydantic_settings
System role: Retrieval tuning knobs
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from reading_room.configs.base import BaseSettings


class RetrievalSettings(BaseSettings):
    """Retrieval orchestration configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    similarity_threshold: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Minimum cosine similarity for semantic candidates (low favours recall)",
    )
    semantic_caps: dict[str, int] = Field(
        default={
            "catalog_browse": 200,
            "recommendation": 100,
            "specific_search": 30,
            "hybrid": 20,
            "direct_question": 10,
        },
        description="Nearest-neighbour result cap per query type",
    )

    catalog_page_size: int = Field(default=20, ge=1, description="Catalog page size")
    top_n: int = Field(default=8, ge=1, description="Documents returned for targeted intents")

    metadata_field_limit: int = Field(
        default=2,
        ge=1,
        description="Rows fetched per (term, field) metadata lookup",
    )
    entity_field_limit: int = Field(
        default=3,
        ge=1,
        description="Rows fetched per author full-name lookup",
    )
    metadata_concurrency: int = Field(
        default=8,
        ge=1,
        description="Maximum concurrent field lookups against the chunk store",
    )

    timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Wall-clock budget for all retrieval strategies of one request",
    )

    preview_length: int = Field(
        default=150,
        description="Content preview length for catalog entries",
    )
    history_window: int = Field(
        default=4,
        description="Conversation turns considered for pronoun resolution",
    )

    enable_query_analysis: bool = Field(
        default=True,
        description="Ask the completion service for entities/topics during classification",
    )
    enable_pronoun_resolution: bool = Field(
        default=True,
        description="Rewrite pronoun-bearing queries into standalone search queries",
    )
    enable_rerank: bool = Field(
        default=False,
        description="Re-rank targeted results with the completion service",
    )
