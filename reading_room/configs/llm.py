"""
Language model configuration settings.

Settings for the completion (chat) model and the embedding model.
Both are Google Generative AI models accessed through LangChain.

Dependencies: pydantic, pydantic_settings
System role: LLM and embedding configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from reading_room.configs.base import BaseSettings


class LLMSettings(BaseSettings):
    """Completion and embedding model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    chat_model: str = Field(
        default="gemini-2.5-flash",
        description="Google Gemini chat model used for answers and micro-reasoning",
    )
    temperature: float = Field(default=0.1, description="Sampling temperature")
    max_tokens: int = Field(default=2000, description="Default max output tokens")

    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Google embedding model ID",
    )
    embedding_dimension: int = Field(
        default=1024,
        description="Embedding vector dimension (must match the chunk table column)",
    )

    retry_attempts: int = Field(
        default=3,
        description="Attempts for transient provider failures",
    )
