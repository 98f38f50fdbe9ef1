"""Unit tests for ManagedSession."""

import asyncio
from datetime import timedelta

import pytest

from scout.catalog import InMemoryTemplateCatalog, default_templates
from scout.config.models.sessions import SessionManagerConfig
from scout.conversation.models import StageStatus
from scout.errors import (
    InvalidDurationError,
    InvalidInputError,
    SessionBusyError,
    SessionNotFoundError,
)
from scout.profile.enums import Industry
from scout.profile.models import UserProfile
from scout.sessions.manager import SessionManager
from scout.sessions.models import Session, SessionOptions
from scout.sessions.mutex import SessionMutex
from scout.sessions.stores.inmemory import InMemorySessionStore


class GatedStore(InMemorySessionStore):
    """Store whose writes wait until the gate opens."""

    def __init__(self, clock) -> None:
        super().__init__(clock=clock)
        self.gate = asyncio.Event()
        self.gate.set()

    async def put(self, session: Session, ttl_seconds: int) -> None:
        await self.gate.wait()
        await super().put(session, ttl_seconds)


@pytest.fixture
def store(clock) -> InMemorySessionStore:
    return InMemorySessionStore(clock=clock)


@pytest.fixture
def mutex() -> SessionMutex:
    return SessionMutex(blocking_timeout=0.05)


@pytest.fixture
def manager(store, mutex, clock) -> SessionManager:
    return SessionManager(
        store, SessionManagerConfig(lock_timeout=0.05), mutex=mutex, clock=clock
    )


def _fintech_agent():
    template = next(t for t in default_templates() if t.domain is Industry.FINTECH)
    return InMemoryTemplateCatalog.instantiate(template, None)


class TestMutations:
    """Tests for in-memory mutations."""

    @pytest.mark.asyncio
    async def test_update_metadata_merges(self, manager: SessionManager) -> None:
        """Metadata updates merge unless replace is requested."""
        handle = await manager.create_session(options=SessionOptions(metadata={"a": 1}))

        await handle.update_metadata({"b": 2})
        assert handle.state.metadata == {"a": 1, "b": 2}

        await handle.update_metadata({"c": 3}, replace=True)
        assert handle.state.metadata == {"c": 3}

    @pytest.mark.asyncio
    async def test_mutations_bump_revision(self, manager: SessionManager, clock) -> None:
        """Every applied mutation increments the revision and activity time."""
        handle = await manager.create_session()
        clock.advance(seconds=10)

        state = await handle.update_metadata({"k": "v"})

        assert state.revision == 1
        assert state.last_activity_at == clock()

    @pytest.mark.asyncio
    async def test_failed_mutation_leaves_state(self, manager: SessionManager) -> None:
        """A mutation that raises changes nothing."""
        handle = await manager.create_session()
        before = handle.state

        def broken(session: Session) -> None:
            session.metadata = {"half": "done"}
            raise ValueError("boom")

        with pytest.raises(ValueError):
            await handle.apply(broken)

        assert handle.state == before

    @pytest.mark.asyncio
    async def test_invalid_mutation_rejected(self, manager: SessionManager) -> None:
        """Validation failures surface as InvalidInputError."""
        handle = await manager.create_session()

        def invalid(session: Session) -> None:
            session.revision = -5

        with pytest.raises(InvalidInputError):
            await handle.apply(invalid)
        assert handle.state.revision == 0

    @pytest.mark.asyncio
    async def test_update_profile(self, manager: SessionManager) -> None:
        """The profile is stored as a copy."""
        handle = await manager.create_session()
        profile = UserProfile(industry=Industry.HEALTHCARE)

        await handle.update_profile(profile)
        profile.industry = Industry.FINTECH

        assert handle.state.profile is not None
        assert handle.state.profile.industry is Industry.HEALTHCARE
        assert handle.state.domain is Industry.HEALTHCARE

    @pytest.mark.asyncio
    async def test_update_profile_type_checked(self, manager: SessionManager) -> None:
        """Only UserProfile instances are accepted."""
        handle = await manager.create_session()

        with pytest.raises(InvalidInputError):
            await handle.update_profile({"industry": "fintech"})  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_register_agent_enters_first_stage(
        self, manager: SessionManager, clock
    ) -> None:
        """Registering an agent starts its first stage."""
        handle = await manager.create_session()
        agent = _fintech_agent()

        state = await handle.register_agent(agent)

        assert state.current_stage == agent.stages[0]
        assert state.domain is Industry.FINTECH
        assert list(state.stage_progress) == agent.stages
        first = state.stage_progress[agent.stages[0]]
        assert first.status is StageStatus.IN_PROGRESS
        assert first.started_at == clock()
        assert state.stage_progress[agent.stages[1]].status is StageStatus.NOT_STARTED


class TestExtend:
    """Tests for ManagedSession.extend."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("duration", [0, -1, 0.0, timedelta(0), timedelta(seconds=-30)])
    async def test_non_positive_rejected(self, manager: SessionManager, duration) -> None:
        """Zero or negative durations raise InvalidDurationError."""
        handle = await manager.create_session()

        with pytest.raises(InvalidDurationError):
            await handle.extend(duration)

    @pytest.mark.asyncio
    async def test_extend_pushes_expiry(self, manager: SessionManager, clock) -> None:
        """Extension keeps the session alive past its original expiry."""
        handle = await manager.create_session(options=SessionOptions(ttl=timedelta(minutes=1)))
        original = handle.state.expires_at

        new_expiry = await handle.extend(timedelta(minutes=30))
        clock.advance(minutes=5)

        assert new_expiry == original + timedelta(minutes=30)
        assert handle.is_active()

    @pytest.mark.asyncio
    async def test_extend_accepts_seconds(self, manager: SessionManager) -> None:
        """Plain numbers are seconds."""
        handle = await manager.create_session()
        original = handle.state.expires_at

        assert await handle.extend(90) == original + timedelta(seconds=90)


class TestPersistence:
    """Tests for save_state, load_state and contexts."""

    @pytest.mark.asyncio
    async def test_nothing_persisted_until_saved(
        self, manager: SessionManager, store: InMemorySessionStore
    ) -> None:
        """Mutations stay in memory until save_state."""
        handle = await manager.create_session()
        await handle.update_metadata({"k": "v"})

        stored = await store.get(handle.session_id)
        assert stored is not None
        assert "k" not in stored.metadata

        await handle.save_state()
        stored = await store.get(handle.session_id)
        assert stored is not None
        assert stored.metadata == {"k": "v"}
        assert stored.revision == 1

    @pytest.mark.asyncio
    async def test_auto_save(self, manager: SessionManager, store: InMemorySessionStore) -> None:
        """Auto-save sessions persist every mutation."""
        handle = await manager.create_session(options=SessionOptions(auto_save=True))

        await handle.update_metadata({"k": "v"})

        stored = await store.get(handle.session_id)
        assert stored is not None
        assert stored.metadata == {"k": "v"}

    @pytest.mark.asyncio
    async def test_context_reads_committed_snapshot(self, manager: SessionManager) -> None:
        """get_context ignores unsaved changes; working_context sees them."""
        handle = await manager.create_session()
        await handle.update_metadata({"k": "v"})

        assert "k" not in handle.get_context().metadata
        assert handle.working_context().metadata == {"k": "v"}

        await handle.save_state()
        assert handle.get_context().metadata == {"k": "v"}

    @pytest.mark.asyncio
    async def test_load_discards_unsaved_changes(self, manager: SessionManager) -> None:
        """load_state restores the last committed snapshot."""
        handle = await manager.create_session()
        await handle.update_metadata({"saved": True})
        await handle.save_state()
        await handle.update_metadata({"unsaved": True})

        state = await handle.load_state()

        assert state.metadata == {"saved": True}
        assert state.revision == 1

    @pytest.mark.asyncio
    async def test_load_after_expiry_fails(self, manager: SessionManager, clock) -> None:
        """An expired session cannot be loaded."""
        handle = await manager.create_session(options=SessionOptions(ttl=timedelta(minutes=1)))
        clock.advance(minutes=2)

        with pytest.raises(SessionNotFoundError):
            await handle.load_state()

    @pytest.mark.asyncio
    async def test_mutation_after_expiry_fails(self, manager: SessionManager, clock) -> None:
        """Expired sessions refuse mutations and saves."""
        handle = await manager.create_session(options=SessionOptions(ttl=timedelta(minutes=1)))
        clock.advance(minutes=1)

        assert handle.is_active() is False
        with pytest.raises(SessionNotFoundError):
            await handle.update_metadata({"k": "v"})
        with pytest.raises(SessionNotFoundError):
            await handle.save_state()

    @pytest.mark.asyncio
    async def test_cancelled_save_still_commits(self, clock) -> None:
        """A caller cancelled mid-save never leaves a partial snapshot behind."""
        store = GatedStore(clock)
        manager = SessionManager(store, clock=clock)
        handle = await manager.create_session()
        await handle.update_metadata({"k": "v"})

        store.gate.clear()
        save = asyncio.create_task(handle.save_state())
        for _ in range(10):
            await asyncio.sleep(0)
        save.cancel()
        with pytest.raises(asyncio.CancelledError):
            await save

        store.gate.set()
        await handle.wait_for_pending_write()

        stored = await store.get(handle.session_id)
        assert stored is not None
        assert stored.metadata == {"k": "v"}
        assert stored.revision == 1


class TestConcurrency:
    """Tests for per-session serialization."""

    @pytest.mark.asyncio
    async def test_busy_session_raises(self, manager: SessionManager, mutex: SessionMutex) -> None:
        """A mutation waiting too long on the lock raises SessionBusyError."""
        handle = await manager.create_session()

        async with mutex.acquire(handle.session_id):
            with pytest.raises(SessionBusyError):
                await handle.update_metadata({"k": "v"})

        assert handle.state.revision == 0

    @pytest.mark.asyncio
    async def test_concurrent_mutations_serialize(self, clock) -> None:
        """Concurrent mutations all apply, one after another."""
        manager = SessionManager(InMemorySessionStore(clock=clock), clock=clock)
        handle = await manager.create_session()

        async def bump(index: int) -> None:
            await handle.update_metadata({f"k{index}": index})

        await asyncio.gather(*(bump(i) for i in range(20)))

        state = handle.state
        assert state.revision == 20
        assert len(state.metadata) == 20

    @pytest.mark.asyncio
    async def test_context_never_blocks_on_lock(
        self, manager: SessionManager, mutex: SessionMutex
    ) -> None:
        """Reading the context works while the session is locked."""
        handle = await manager.create_session()

        async with mutex.acquire(handle.session_id):
            context = handle.get_context()

        assert context.session_id == handle.session_id
