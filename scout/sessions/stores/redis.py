"""Redis implementation of SessionStore.

Key structure:
- {prefix}:snapshot:{session_id} - JSON snapshot, expires with the session
- {prefix}:counters - hash of analytics counters
"""

import redis.asyncio as redis

from scout.config.models.storage import SessionStoreConfig
from scout.errors import StorageTimeoutError, StorageUnavailableError
from scout.observability.logging import get_logger
from scout.sessions.models import Session
from scout.sessions.store import SessionStore

logger = get_logger(__name__)


class RedisSessionStore(SessionStore):
    """Redis-backed snapshot store.

    ``SET ... EX`` replaces a snapshot and its TTL in one command, so
    readers never observe a partially written snapshot.
    """

    def __init__(
        self,
        client: redis.Redis,
        config: SessionStoreConfig | None = None,
    ) -> None:
        self._client = client
        self._config = config or SessionStoreConfig()
        self._prefix = self._config.key_prefix

    @classmethod
    def from_config(cls, config: SessionStoreConfig) -> "RedisSessionStore":
        if not config.connection_url:
            raise ValueError("Redis session store requires storage.session.connection_url")
        client = redis.from_url(config.connection_url, decode_responses=True)
        return cls(client, config)

    def _snapshot_key(self, session_id: str) -> str:
        return f"{self._prefix}:snapshot:{session_id}"

    def _counters_key(self) -> str:
        return f"{self._prefix}:counters"

    def _wrap(self, operation: str, session_id: str | None, error: redis.RedisError) -> Exception:
        logger.error(
            "redis_session_store_error",
            operation=operation,
            session_id=session_id,
            error=str(error),
            error_type=type(error).__name__,
        )
        if isinstance(error, redis.TimeoutError):
            return StorageTimeoutError(f"Redis {operation} timed out: {error}", cause=error)
        return StorageUnavailableError(f"Redis {operation} failed: {error}", cause=error)

    async def put(self, session: Session, ttl_seconds: int) -> None:
        try:
            await self._client.set(
                self._snapshot_key(session.session_id),
                session.model_dump_json(),
                ex=ttl_seconds,
            )
        except redis.RedisError as e:
            raise self._wrap("put", session.session_id, e) from e

        logger.debug(
            "session_snapshot_written",
            session_id=session.session_id,
            ttl_seconds=ttl_seconds,
            revision=session.revision,
        )

    async def put_if_absent(self, session: Session, ttl_seconds: int) -> bool:
        try:
            created = await self._client.set(
                self._snapshot_key(session.session_id),
                session.model_dump_json(),
                ex=ttl_seconds,
                nx=True,
            )
        except redis.RedisError as e:
            raise self._wrap("put_if_absent", session.session_id, e) from e
        return bool(created)

    async def get(self, session_id: str) -> Session | None:
        try:
            data = await self._client.get(self._snapshot_key(session_id))
        except redis.RedisError as e:
            raise self._wrap("get", session_id, e) from e

        if not data:
            return None
        return Session.model_validate_json(data)

    async def delete(self, session_id: str) -> bool:
        try:
            deleted = await self._client.delete(self._snapshot_key(session_id))
        except redis.RedisError as e:
            raise self._wrap("delete", session_id, e) from e
        return deleted > 0

    async def increment(self, counter: str, amount: int = 1) -> int:
        try:
            return int(await self._client.hincrby(self._counters_key(), counter, amount))
        except redis.RedisError as e:
            raise self._wrap("increment", None, e) from e

    async def get_counters(self) -> dict[str, int]:
        try:
            raw = await self._client.hgetall(self._counters_key())
        except redis.RedisError as e:
            raise self._wrap("get_counters", None, e) from e
        return {
            (k.decode() if isinstance(k, bytes) else k): int(v) for k, v in raw.items()
        }
