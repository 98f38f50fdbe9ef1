"""SessionStore abstract interface."""

from abc import ABC, abstractmethod

from scout.sessions.models import Session


class SessionStore(ABC):
    """Abstract interface for session snapshot storage.

    Snapshots are keyed by session id and written whole with a TTL, so a
    reader only ever sees a complete snapshot. A small counters facility
    backs aggregate analytics.

    Implementations raise ``StorageUnavailableError`` on connection-level
    failures and ``StorageTimeoutError`` when the backend times out.
    """

    @abstractmethod
    async def put(self, session: Session, ttl_seconds: int) -> None:
        """Atomically replace the snapshot for a session."""
        pass

    @abstractmethod
    async def put_if_absent(self, session: Session, ttl_seconds: int) -> bool:
        """Write the first snapshot for a session id.

        Returns False, writing nothing, if a live snapshot already exists.
        """
        pass

    @abstractmethod
    async def get(self, session_id: str) -> Session | None:
        """Get the latest committed snapshot, or None."""
        pass

    @abstractmethod
    async def delete(self, session_id: str) -> bool:
        """Delete a snapshot, returning whether one existed."""
        pass

    @abstractmethod
    async def increment(self, counter: str, amount: int = 1) -> int:
        """Increment a named counter, returning the new value."""
        pass

    @abstractmethod
    async def get_counters(self) -> dict[str, int]:
        """Read all counters."""
        pass
