"""Session lifecycle: state snapshots, stores, locking and the manager."""

from scout.sessions.manager import SessionManager
from scout.sessions.models import (
    HealthState,
    HealthStatus,
    Session,
    SessionAnalytics,
    SessionContext,
    SessionMetrics,
    SessionOptions,
)
from scout.sessions.mutex import RedisSessionMutex, SessionMutex
from scout.sessions.session import ManagedSession
from scout.sessions.store import SessionStore
from scout.sessions.stores import InMemorySessionStore, RedisSessionStore

__all__ = [
    "HealthState",
    "HealthStatus",
    "InMemorySessionStore",
    "ManagedSession",
    "RedisSessionMutex",
    "RedisSessionStore",
    "Session",
    "SessionAnalytics",
    "SessionContext",
    "SessionManager",
    "SessionMetrics",
    "SessionMutex",
    "SessionOptions",
    "SessionStore",
]
