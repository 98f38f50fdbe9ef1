"""SessionManager: creates, finds and retires sessions.

The manager is an explicitly constructed service. Storage and locking are
injected, so tests run against ``InMemorySessionStore`` and ``SessionMutex``
while deployments wire in the Redis variants.
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

from scout.config.models.sessions import SessionManagerConfig
from scout.errors import (
    DuplicateSessionError,
    InvalidDurationError,
    InvalidInputError,
    SessionBusyError,
)
from scout.observability.logging import get_logger
from scout.observability.metrics import ACTIVE_SESSIONS, SESSION_OPERATIONS
from scout.profile.models import utc_now
from scout.sessions.models import (
    HealthState,
    HealthStatus,
    Session,
    SessionAnalytics,
    SessionMetrics,
    SessionOptions,
)
from scout.sessions.mutex import SessionMutex
from scout.sessions.session import ManagedSession, Mutex, bounded
from scout.sessions.store import SessionStore

logger = get_logger(__name__)


class SessionManager:
    """Sole owner of persisted session state.

    Tracks the sessions handed out by this process and the request
    accounting behind analytics and health reports.
    """

    def __init__(
        self,
        store: SessionStore,
        config: SessionManagerConfig | None = None,
        mutex: Mutex | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._config = config or SessionManagerConfig()
        self._mutex = mutex or SessionMutex(blocking_timeout=self._config.lock_timeout)
        self._clock = clock
        self._sessions: dict[str, ManagedSession] = {}
        self._metrics: dict[str, SessionMetrics] = {}
        self._started_at = clock()
        self._last_cleanup_at: datetime | None = None

    @property
    def config(self) -> SessionManagerConfig:
        return self._config

    async def create_session(
        self,
        session_id: str | None = None,
        options: SessionOptions | None = None,
    ) -> ManagedSession:
        """Create a session and commit its initial snapshot.

        Args:
            session_id: Caller-supplied id; generated when absent
            options: Lifetime, initial metadata and auto-save

        Returns:
            Handle on the new session

        Raises:
            DuplicateSessionError: If a live session already has this id
            InvalidDurationError: If the requested ttl is not positive
        """
        options = options or SessionOptions()
        if session_id is not None and not session_id.strip():
            raise InvalidInputError("session_id must not be blank")

        ttl = (
            options.ttl
            if options.ttl is not None
            else timedelta(seconds=self._config.default_ttl_seconds)
        )
        if ttl.total_seconds() <= 0:
            raise InvalidDurationError(f"Session ttl must be positive, got {ttl!r}")

        if session_id is None:
            session_id = str(uuid4())

        async with self._mutex.acquire(
            session_id, blocking_timeout=self._config.lock_timeout
        ) as acquired:
            if not acquired:
                raise SessionBusyError(session_id)
            previous = self._sessions.get(session_id)
            if previous is not None and previous.is_active():
                raise self._duplicate(session_id)

            now = self._clock()
            state = Session(
                session_id=session_id,
                metadata=dict(options.metadata),
                created_at=now,
                last_activity_at=now,
                expires_at=now + ttl,
            )
            handle = self._handle(state, auto_save=options.auto_save, committed=False)
            # The store decides between concurrent creators in other processes
            if not await handle.write_initial():
                raise self._duplicate(session_id)

            if previous is not None:
                self._forget(session_id)
            self._track(handle)
        await bounded(self._store.increment("sessions_created"), self._storage_timeout, "increment")

        logger.info(
            "session_created",
            session_id=session_id,
            ttl_seconds=int(ttl.total_seconds()),
            auto_save=options.auto_save,
        )
        return handle

    async def get_session(self, session_id: str) -> ManagedSession | None:
        """Find a live session, loading it from the store if needed.

        Expired sessions are reported as missing.
        """
        handle = self._sessions.get(session_id)
        if handle is not None:
            if handle.is_active():
                return handle
            self._forget(session_id)
            self._mutex.discard(session_id)
            return None

        snapshot = await bounded(self._store.get(session_id), self._storage_timeout, "get")
        if snapshot is None or snapshot.expires_at <= self._clock():
            return None

        # Another caller may have loaded it while we waited on the store
        handle = self._sessions.get(session_id)
        if handle is None:
            handle = self._handle(snapshot, auto_save=False, committed=True)
            self._track(handle)
            logger.debug("session_loaded", session_id=session_id, revision=snapshot.revision)
        return handle

    async def delete_session(self, session_id: str) -> bool:
        """Delete a session from the store and the tracked population."""
        async with self._mutex.acquire(
            session_id, blocking_timeout=self._config.lock_timeout
        ) as acquired:
            if not acquired:
                raise SessionBusyError(session_id)
            existed = await bounded(
                self._store.delete(session_id), self._storage_timeout, "delete"
            )
            tracked = self._forget(session_id)

        self._mutex.discard(session_id)
        deleted = existed or tracked
        if deleted:
            await bounded(
                self._store.increment("sessions_deleted"), self._storage_timeout, "increment"
            )
            logger.info("session_deleted", session_id=session_id)
        SESSION_OPERATIONS.labels(
            operation="delete_session", status="ok" if deleted else "not_found"
        ).inc()
        return deleted

    async def cleanup_expired_sessions(self) -> int:
        """Evict expired sessions; returns how many were removed."""
        expired = [sid for sid, handle in self._sessions.items() if not handle.is_active()]
        for session_id in expired:
            self._forget(session_id)
            await bounded(self._store.delete(session_id), self._storage_timeout, "delete")
            self._mutex.discard(session_id)

        self._last_cleanup_at = self._clock()
        if expired:
            logger.info("expired_sessions_cleaned", count=len(expired))
        return len(expired)

    async def get_session_analytics(self) -> SessionAnalytics:
        """Aggregate request accounting plus the store's persisted counters."""
        counters = await bounded(self._store.get_counters(), self._storage_timeout, "counters")
        summary = self._summarize()
        return SessionAnalytics(**summary, counters=counters)

    def get_health_status(self) -> HealthStatus:
        """Health of the tracked population. Read-only."""
        summary = self._summarize()
        capacity_ratio = summary["active_sessions"] / self._config.max_concurrent_sessions
        error_rate = summary["error_rate"]

        warnings: list[str] = []
        status = HealthState.HEALTHY
        if error_rate > self._config.unhealthy_error_rate:
            status = HealthState.UNHEALTHY
            warnings.append(f"error rate {error_rate:.2f} is critical")
        elif error_rate > self._config.degraded_error_rate:
            status = HealthState.DEGRADED
            warnings.append(f"error rate {error_rate:.2f} is elevated")

        if capacity_ratio > self._config.capacity_degraded_ratio:
            if status is HealthState.HEALTHY:
                status = HealthState.DEGRADED
            warnings.append(f"session capacity at {capacity_ratio:.0%}")
        elif capacity_ratio > self._config.capacity_warning_ratio:
            warnings.append(f"session capacity approaching limit ({capacity_ratio:.0%})")

        return HealthStatus(
            status=status,
            active_sessions=summary["active_sessions"],
            total_sessions=summary["total_sessions"],
            error_rate=error_rate,
            capacity_ratio=capacity_ratio,
            warnings=warnings,
            uptime_seconds=(self._clock() - self._started_at).total_seconds(),
            last_cleanup_at=self._last_cleanup_at,
        )

    @property
    def _storage_timeout(self) -> float:
        return self._config.storage_timeout

    def _duplicate(self, session_id: str) -> DuplicateSessionError:
        SESSION_OPERATIONS.labels(operation="create_session", status="duplicate").inc()
        return DuplicateSessionError(session_id)

    def _handle(self, state: Session, *, auto_save: bool, committed: bool) -> ManagedSession:
        return ManagedSession(
            state,
            store=self._store,
            mutex=self._mutex,
            clock=self._clock,
            storage_timeout=self._config.storage_timeout,
            lock_timeout=self._config.lock_timeout,
            auto_save=auto_save,
            recorder=self._record_request,
            committed=committed,
        )

    def _track(self, handle: ManagedSession) -> None:
        state = handle.state
        self._sessions[state.session_id] = handle
        self._metrics.setdefault(
            state.session_id,
            SessionMetrics(
                session_id=state.session_id,
                created_at=state.created_at,
                expires_at=state.expires_at,
                last_activity_at=state.last_activity_at,
            ),
        )
        ACTIVE_SESSIONS.set(len(self._sessions))

    def _forget(self, session_id: str) -> bool:
        handle = self._sessions.pop(session_id, None)
        if handle is not None:
            handle.close()
        self._metrics.pop(session_id, None)
        ACTIVE_SESSIONS.set(len(self._sessions))
        return handle is not None

    def _record_request(self, session: Session, operation: str, error: bool) -> None:
        metrics = self._metrics.get(session.session_id)
        if metrics is None:
            return
        metrics.request_count += 1
        if error:
            metrics.error_count += 1
        metrics.last_activity_at = session.last_activity_at
        metrics.expires_at = session.expires_at

    def _summarize(self) -> dict[str, Any]:
        now = self._clock()
        total = len(self._metrics)
        active = sum(1 for handle in self._sessions.values() if handle.is_active())
        requests = sum(m.request_count for m in self._metrics.values())
        errors = sum(m.error_count for m in self._metrics.values())
        ages = [(now - m.created_at).total_seconds() for m in self._metrics.values()]
        return {
            "total_sessions": total,
            "active_sessions": active,
            "total_requests": requests,
            "total_errors": errors,
            "error_rate": errors / requests if requests else 0.0,
            "average_requests_per_session": requests / total if total else 0.0,
            "average_session_age_seconds": sum(ages) / total if total else 0.0,
        }
