"""Live handle on one session.

A ``ManagedSession`` holds the in-memory working state of a session and the
last snapshot known to be committed to the store. Mutations are serialized
per session id, applied to a copy and swapped in whole, so a failed mutation
never leaves a half-updated session behind. Nothing is persisted until
``save_state`` is called, unless the session was created with auto-save.
"""

import asyncio
import math
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any, Protocol

from pydantic import ValidationError

from scout.catalog.models import AgentInstance
from scout.conversation.models.enums import StageStatus
from scout.conversation.models.stage import StageProgress
from scout.errors import (
    InvalidDurationError,
    InvalidInputError,
    ScoutError,
    SessionBusyError,
    SessionNotFoundError,
    StorageTimeoutError,
)
from scout.observability.logging import get_logger
from scout.observability.metrics import SESSION_OPERATIONS, STORAGE_ERRORS
from scout.profile.models import UserProfile
from scout.sessions.models import Session, SessionContext
from scout.sessions.store import SessionStore

logger = get_logger(__name__)

Mutation = Callable[[Session], None]


class Mutex(Protocol):
    def acquire(self, session_id: str, blocking_timeout: float | None = None) -> Any: ...

    def discard(self, session_id: str) -> None: ...


class RequestRecorder(Protocol):
    def __call__(self, session: Session, operation: str, error: bool) -> None: ...


class ManagedSession:
    """Handle through which all reads and writes of one session flow."""

    def __init__(
        self,
        state: Session,
        *,
        store: SessionStore,
        mutex: Mutex,
        clock: Callable[[], datetime],
        storage_timeout: float,
        lock_timeout: float,
        auto_save: bool = False,
        recorder: RequestRecorder | None = None,
        committed: bool = True,
    ) -> None:
        self._state = state
        self._committed: Session | None = state.model_copy(deep=True) if committed else None
        self._store = store
        self._mutex = mutex
        self._clock = clock
        self._storage_timeout = storage_timeout
        self._lock_timeout = lock_timeout
        self._auto_save = auto_save
        self._recorder = recorder
        self._pending_write: asyncio.Task[Any] | None = None
        self._closed = False

    @property
    def session_id(self) -> str:
        return self._state.session_id

    @property
    def state(self) -> Session:
        """Copy of the in-memory working state."""
        return self._state.model_copy(deep=True)

    @property
    def auto_save(self) -> bool:
        return self._auto_save

    def is_active(self) -> bool:
        return not self._closed and self._clock() < self._state.expires_at

    def close(self) -> None:
        """Mark the handle dead after its session was deleted."""
        self._closed = True

    def get_uptime(self) -> timedelta:
        return self._clock() - self._state.created_at

    def get_context(self) -> SessionContext:
        """Context built from the last committed snapshot.

        Never waits on an in-flight mutation of this session.

        Raises:
            SessionNotFoundError: If nothing has been committed yet
        """
        if self._committed is None:
            raise SessionNotFoundError(self.session_id)
        return SessionContext.from_session(self._committed)

    def working_context(self) -> SessionContext:
        """Context built from the uncommitted working state."""
        return SessionContext.from_session(self._state)

    async def apply(self, mutation: Mutation, operation: str = "mutate") -> Session:
        """Apply a mutation atomically under the session lock.

        The mutation runs on a copy of the working state; the copy is
        validated and swapped in only if the mutation succeeds.
        """
        async with self._locked(operation):
            self._ensure_active()
            working = self._state.model_copy(deep=True)
            try:
                mutation(working)
                working.last_activity_at = self._clock()
                working.revision = self._state.revision + 1
                validated = Session.model_validate(working.model_dump())
            except ValidationError as e:
                raise InvalidInputError(f"Invalid session update: {e}", cause=e) from e
            self._state = validated

            if self._auto_save:
                await self._write(self._state)

            return self.state

    async def update_profile(self, profile: UserProfile) -> Session:
        if not isinstance(profile, UserProfile):
            raise InvalidInputError("profile must be a UserProfile")

        def mutate(session: Session) -> None:
            session.profile = profile.model_copy(deep=True)

        return await self.apply(mutate, "update_profile")

    async def register_agent(self, agent: AgentInstance) -> Session:
        """Attach an agent; the session enters the agent's first stage."""
        if not isinstance(agent, AgentInstance):
            raise InvalidInputError("agent must be an AgentInstance")

        now = self._clock()

        def mutate(session: Session) -> None:
            session.agent = agent.model_copy(deep=True)
            session.current_stage = agent.stages[0]
            session.stage_progress = {
                stage: StageProgress(stage=stage) for stage in agent.stages
            }
            first = session.stage_progress[agent.stages[0]]
            first.status = StageStatus.IN_PROGRESS
            first.started_at = now

        return await self.apply(mutate, "register_agent")

    async def update_metadata(self, updates: dict[str, Any], replace: bool = False) -> Session:
        if not isinstance(updates, dict):
            raise InvalidInputError("metadata updates must be a mapping")

        def mutate(session: Session) -> None:
            if replace:
                session.metadata = dict(updates)
            else:
                session.metadata = {**session.metadata, **updates}

        return await self.apply(mutate, "update_metadata")

    async def extend(self, duration: timedelta | float) -> datetime:
        """Push expiry later by duration; returns the new expiry.

        Raises:
            InvalidDurationError: If duration is not positive
        """
        seconds = duration.total_seconds() if isinstance(duration, timedelta) else duration
        if isinstance(seconds, bool) or not isinstance(seconds, int | float) or seconds <= 0:
            raise InvalidDurationError(f"Extension must be positive, got {duration!r}")

        def mutate(session: Session) -> None:
            session.expires_at = session.expires_at + timedelta(seconds=seconds)

        state = await self.apply(mutate, "extend")
        return state.expires_at

    async def save_state(self) -> None:
        """Commit the working state to the store as one snapshot.

        The write runs to completion even if the caller is cancelled.

        Raises:
            SessionNotFoundError: If the session has expired
            StorageTimeoutError: If the store did not answer in time
            StorageUnavailableError: If the store could not be reached
        """
        async with self._locked("save_state"):
            self._ensure_active()
            await self._write(self._state)

    async def load_state(self) -> Session:
        """Replace the working state with the latest committed snapshot.

        Raises:
            SessionNotFoundError: If there is no snapshot or it has expired
        """
        async with self._locked("load_state"):
            snapshot = await self._with_timeout(self._store.get(self.session_id), "get")
            if snapshot is None or snapshot.expires_at <= self._clock():
                raise SessionNotFoundError(self.session_id)
            self._state = snapshot
            self._committed = snapshot.model_copy(deep=True)
            return self.state

    async def wait_for_pending_write(self) -> None:
        pending = self._pending_write
        if pending is not None and not pending.done():
            await asyncio.wait([pending])

    def _ensure_active(self) -> None:
        if not self.is_active():
            raise SessionNotFoundError(self.session_id)

    def _locked(self, operation: str) -> "_SessionOperation":
        return _SessionOperation(self, operation)

    def _record(self, operation: str, error: bool) -> None:
        SESSION_OPERATIONS.labels(operation=operation, status="error" if error else "ok").inc()
        if self._recorder is not None:
            self._recorder(self._state, operation, error)

    async def _with_timeout(self, awaitable: Any, operation: str) -> Any:
        return await bounded(awaitable, self._storage_timeout, operation)

    async def write_initial(self) -> bool:
        """Commit the first snapshot unless the id is already taken.

        The caller holds the session lock.
        """
        return await self._write(self._state, create=True)

    async def _write(self, snapshot: Session, *, create: bool = False) -> bool:
        ttl = math.ceil((snapshot.expires_at - self._clock()).total_seconds())
        if ttl <= 0:
            raise SessionNotFoundError(snapshot.session_id)

        # Writes land in the order they were issued
        await self.wait_for_pending_write()

        frozen = snapshot.model_copy(deep=True)
        if create:
            put = self._store.put_if_absent(frozen, ttl)
        else:
            put = self._store.put(frozen, ttl)
        task = asyncio.ensure_future(put)
        task.add_done_callback(_consume_exception)
        self._pending_write = task

        written = await self._with_timeout(asyncio.shield(task), "put")
        if create and not written:
            return False
        self._committed = frozen
        logger.debug(
            "session_saved",
            session_id=frozen.session_id,
            revision=frozen.revision,
            ttl_seconds=ttl,
        )
        return True


class _SessionOperation:
    """Async context: take the session lock and account for the request."""

    def __init__(self, session: ManagedSession, operation: str) -> None:
        self._session = session
        self._operation = operation
        self._lock_cm: Any = None

    async def __aenter__(self) -> None:
        session = self._session
        self._lock_cm = session._mutex.acquire(
            session.session_id, blocking_timeout=session._lock_timeout
        )
        acquired = await self._lock_cm.__aenter__()
        if not acquired:
            await self._lock_cm.__aexit__(None, None, None)
            session._record(self._operation, error=True)
            raise SessionBusyError(session.session_id)

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        try:
            await self._lock_cm.__aexit__(exc_type, exc, tb)
        finally:
            failed = exc is not None and not isinstance(exc, asyncio.CancelledError)
            if failed and not isinstance(exc, ScoutError):
                logger.error(
                    "session_operation_failed",
                    session_id=self._session.session_id,
                    operation=self._operation,
                    error=str(exc),
                )
            self._session._record(self._operation, error=failed)


def _consume_exception(task: asyncio.Task[Any]) -> None:
    if not task.cancelled():
        task.exception()


async def bounded(awaitable: Any, timeout: float, operation: str) -> Any:
    """Await a store call, surfacing a stall as StorageTimeoutError."""
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        STORAGE_ERRORS.labels(operation=operation, error_type="timeout").inc()
        raise StorageTimeoutError(f"Session store {operation} timed out after {timeout}s") from e
