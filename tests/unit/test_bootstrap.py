"""Tests for service wiring."""

import pytest

from scout.bootstrap import bootstrap
from scout.config import get_settings
from scout.providers.llm import LLMExecutor, MockLLMProvider
from scout.sessions.mutex import RedisSessionMutex
from scout.sessions.stores import InMemorySessionStore, RedisSessionStore


class TestBootstrap:
    """Tests for bootstrap."""

    def test_defaults_to_in_memory_backend(self) -> None:
        services = bootstrap(configure_logging=False)

        assert isinstance(services.sessions._store, InMemorySessionStore)
        assert isinstance(services.llm, LLMExecutor)
        assert services.llm.model == "mock/question-writer"
        assert services.engine.config == services.settings.conversation

    def test_overrides_are_used(self) -> None:
        llm = MockLLMProvider()

        services = bootstrap(llm=llm, configure_logging=False)

        assert services.llm is llm
        assert services.engine._llm is llm

    def test_redis_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCOUT_STORAGE__SESSION__BACKEND", "redis")
        monkeypatch.setenv("SCOUT_STORAGE__SESSION__CONNECTION_URL", "redis://localhost:6379/0")

        services = bootstrap(get_settings(), configure_logging=False)

        assert isinstance(services.sessions._store, RedisSessionStore)
        assert isinstance(services.sessions._mutex, RedisSessionMutex)

    def test_redis_backend_requires_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCOUT_STORAGE__SESSION__BACKEND", "redis")

        with pytest.raises(ValueError, match="connection_url"):
            bootstrap(get_settings(), configure_logging=False)

    @pytest.mark.asyncio
    async def test_wired_services_run_a_turn(self) -> None:
        services = bootstrap(llm=MockLLMProvider(), configure_logging=False)
        session = await services.sessions.create_session()

        await services.engine.initialize_session(session, "We sell running shoes online")
        turn = await services.engine.run_turn(session, "Mostly returning customers")
        await session.save_state()

        assert turn.question.stage == "idea-clarity"
        assert session.get_context().revision == session.state.revision
