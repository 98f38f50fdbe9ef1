"""In-memory implementation of SessionStore."""

from collections.abc import Callable
from datetime import datetime, timedelta

from scout.profile.models import utc_now
from scout.sessions.models import Session
from scout.sessions.store import SessionStore


class InMemorySessionStore(SessionStore):
    """In-memory implementation of SessionStore for testing and development.

    Snapshots are held as serialized JSON, so a stored value can never be
    mutated through a live Session object. Not suitable for production use.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock
        self._snapshots: dict[str, tuple[str, datetime]] = {}
        self._counters: dict[str, int] = {}

    async def put(self, session: Session, ttl_seconds: int) -> None:
        expires = self._clock() + timedelta(seconds=ttl_seconds)
        # Single assignment replaces the whole snapshot
        self._snapshots[session.session_id] = (session.model_dump_json(), expires)

    async def put_if_absent(self, session: Session, ttl_seconds: int) -> bool:
        if self._live(session.session_id) is not None:
            return False
        await self.put(session, ttl_seconds)
        return True

    async def get(self, session_id: str) -> Session | None:
        data = self._live(session_id)
        if data is None:
            return None
        return Session.model_validate_json(data)

    def _live(self, session_id: str) -> str | None:
        entry = self._snapshots.get(session_id)
        if entry is None:
            return None
        data, expires = entry
        if expires <= self._clock():
            del self._snapshots[session_id]
            return None
        return data

    async def delete(self, session_id: str) -> bool:
        return self._snapshots.pop(session_id, None) is not None

    async def increment(self, counter: str, amount: int = 1) -> int:
        self._counters[counter] = self._counters.get(counter, 0) + amount
        return self._counters[counter]

    async def get_counters(self) -> dict[str, int]:
        return dict(self._counters)
