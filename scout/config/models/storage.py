"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

SessionBackendType = Literal["inmemory", "redis"]


class SessionStoreConfig(BaseModel):
    """Configuration for the session snapshot store."""

    backend: SessionBackendType = Field(
        default="inmemory",
        description="Backend type",
    )
    connection_url: str | None = Field(
        default=None,
        description="Connection URL (from env var)",
    )
    key_prefix: str = Field(
        default="scout:session",
        description="Prefix for Redis keys",
    )


class StorageConfig(BaseModel):
    """Storage configuration for all stores."""

    session: SessionStoreConfig = Field(
        default_factory=SessionStoreConfig,
        description="Session store configuration",
    )
