"""Per-session mutual exclusion.

At most one mutating operation runs per session id at a time.
``SessionMutex`` guards sessions within one process; ``RedisSessionMutex``
extends the rule across processes sharing a Redis instance.
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from redis.asyncio import Redis

from scout.observability.logging import get_logger

logger = get_logger(__name__)


class SessionMutex:
    """In-process lock per session id."""

    def __init__(self, blocking_timeout: float = 5.0) -> None:
        self._blocking_timeout = blocking_timeout
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def acquire(
        self,
        session_id: str,
        blocking_timeout: float | None = None,
    ) -> AsyncGenerator[bool, None]:
        """Acquire the lock for a session.

        Yields:
            True if the lock was acquired, False if waiting timed out

        Usage:
            async with mutex.acquire(session_id) as acquired:
                if acquired:
                    # Safe to mutate
        """
        timeout = self._blocking_timeout if blocking_timeout is None else blocking_timeout
        lock = self._lock(session_id)

        if timeout <= 0:
            # Try once without waiting
            acquired = not lock.locked()
            if acquired:
                await lock.acquire()
        else:
            try:
                await asyncio.wait_for(lock.acquire(), timeout=timeout)
                acquired = True
            except asyncio.TimeoutError:
                acquired = False
        if not acquired:
            logger.warning("session_lock_timeout", session_id=session_id, timeout=timeout)

        try:
            yield acquired
        finally:
            if acquired:
                lock.release()

    def is_locked(self, session_id: str) -> bool:
        lock = self._locks.get(session_id)
        return lock is not None and lock.locked()

    def discard(self, session_id: str) -> None:
        """Forget the lock of a deleted session if nobody holds it."""
        lock = self._locks.get(session_id)
        if lock is not None and not lock.locked():
            del self._locks[session_id]


class RedisSessionMutex:
    """Redis-backed distributed lock per session id.

    Lock key format: {prefix}:lock:{session_id}
    """

    def __init__(
        self,
        redis: Redis,
        lock_timeout: int = 30,
        blocking_timeout: float = 5.0,
        key_prefix: str = "scout:session",
    ) -> None:
        """Initialize the mutex.

        Args:
            redis: Redis client instance
            lock_timeout: How long a lock is held before auto-release (seconds)
            blocking_timeout: How long to wait when trying to acquire (seconds)
            key_prefix: Prefix shared with the session store keys
        """
        self._redis = redis
        self._lock_timeout = lock_timeout
        self._blocking_timeout = blocking_timeout
        self._prefix = key_prefix

    def _key(self, session_id: str) -> str:
        return f"{self._prefix}:lock:{session_id}"

    @asynccontextmanager
    async def acquire(
        self,
        session_id: str,
        blocking_timeout: float | None = None,
    ) -> AsyncGenerator[bool, None]:
        """Acquire the distributed lock for a session.

        Yields:
            True if the lock was acquired, False if waiting timed out
        """
        timeout = self._blocking_timeout if blocking_timeout is None else blocking_timeout
        lock = self._redis.lock(
            self._key(session_id),
            timeout=self._lock_timeout,
            blocking_timeout=timeout,
        )

        acquired = await lock.acquire()
        try:
            yield acquired
        finally:
            if acquired:
                try:
                    await lock.release()
                except Exception as e:
                    # The lock may have expired while held
                    logger.warning("session_lock_release_failed", session_id=session_id, error=str(e))

    async def is_locked(self, session_id: str) -> bool:
        return await self._redis.exists(self._key(session_id)) > 0

    async def force_release(self, session_id: str) -> bool:
        """Force release a lock. Only for cleanup after failures."""
        return await self._redis.delete(self._key(session_id)) > 0

    def discard(self, session_id: str) -> None:
        """Nothing to forget locally; Redis locks expire on their own."""
