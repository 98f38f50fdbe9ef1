"""Session store implementations."""

from scout.sessions.stores.inmemory import InMemorySessionStore
from scout.sessions.stores.redis import RedisSessionStore

__all__ = ["InMemorySessionStore", "RedisSessionStore"]
