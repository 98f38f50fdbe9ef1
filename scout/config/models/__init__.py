"""Configuration models for Scout."""

from scout.config.models.conversation import ConversationConfig
from scout.config.models.observability import LoggingConfig, MetricsConfig, ObservabilityConfig
from scout.config.models.profile import ProfileDetectionConfig
from scout.config.models.providers import LLMProviderConfig, ProvidersConfig
from scout.config.models.sessions import SessionManagerConfig
from scout.config.models.storage import SessionStoreConfig, StorageConfig

__all__ = [
    "ConversationConfig",
    "LLMProviderConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "ProfileDetectionConfig",
    "ProvidersConfig",
    "SessionManagerConfig",
    "SessionStoreConfig",
    "StorageConfig",
]
