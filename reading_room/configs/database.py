"""
Database configuration settings.

Manages PostgreSQL connection parameters for the chunk store.
The chunk table carries pgvector embeddings and is read-only for retrieval.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for the chunk store
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from reading_room.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """PostgreSQL database configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="postgres", description="PostgreSQL user")
    password: str = Field(default="postgres", description="PostgreSQL password")
    db: str = Field(default="readingroom", description="PostgreSQL database name")

    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=20, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Connection pool timeout in seconds")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    sslmode: str = Field(default="require", description="SSL mode for hosted Postgres")
    url: str | None = Field(
        default=None,
        description="Full connection string (POSTGRES_URL); overrides host/port/user/password/db",
    )

    chunk_table: str = Field(
        default="documents_enhanced",
        description="Table holding document chunks, metadata and embeddings",
    )

    @property
    def async_database_url(self) -> str:
        """
        SQLAlchemy URL for the asyncpg driver.

        A provider-style POSTGRES_URL (postgres:// or postgresql://) is rewritten
        to the asyncpg scheme; otherwise the URL is built from the parts.
        """
        if self.url:
            scheme, _, rest = self.url.partition("://")
            if scheme in ("postgres", "postgresql"):
                return f"postgresql+asyncpg://{rest}"
            return self.url

        query = "?ssl=require" if self.sslmode == "require" else ""
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db}{query}"
