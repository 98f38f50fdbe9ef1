"""Wire the Scout services together from configuration.

Every service is an explicitly constructed object; this module is the one
place that decides which store, lock and question writer they get.

Example usage:

    from scout.bootstrap import bootstrap

    services = bootstrap()
    session = await services.sessions.create_session()
    await services.engine.initialize_session(session, "We sell running shoes online")
    turn = await services.engine.run_turn(session, "Mostly returning customers")
    await session.save_state()
"""

from dataclasses import dataclass

import redis.asyncio as redis

from scout.catalog import InMemoryTemplateCatalog, TemplateCatalog
from scout.config import Settings, get_settings
from scout.conversation.engine import AdaptiveConversationEngine, EscapeHatchHandler
from scout.observability.logging import get_logger, setup_logging
from scout.profile.corrections import ProfileCorrectionManager
from scout.profile.detector import ProfileDetector
from scout.providers.llm import LLMProvider, create_executor
from scout.sessions.manager import SessionManager
from scout.sessions.mutex import RedisSessionMutex, SessionMutex
from scout.sessions.store import SessionStore
from scout.sessions.stores import InMemorySessionStore, RedisSessionStore

logger = get_logger(__name__)


@dataclass
class ScoutServices:
    """The constructed service graph."""

    settings: Settings
    detector: ProfileDetector
    corrections: ProfileCorrectionManager
    catalog: TemplateCatalog
    llm: LLMProvider
    sessions: SessionManager
    engine: AdaptiveConversationEngine


def bootstrap(
    settings: Settings | None = None,
    llm: LLMProvider | None = None,
    catalog: TemplateCatalog | None = None,
    on_escape_hatch: EscapeHatchHandler | None = None,
    configure_logging: bool = True,
) -> ScoutServices:
    """Build all services.

    Args:
        settings: Settings to use (default: loaded from config and environment)
        llm: Question writer override (default: executor from providers.llm)
        catalog: Template catalog override (default: in-memory defaults)
        on_escape_hatch: Receiver of confirmed escape-hatch triggers
        configure_logging: Whether to apply the logging settings

    Returns:
        ScoutServices with every component wired
    """
    settings = settings or get_settings()

    if configure_logging:
        logging_config = settings.observability.logging
        setup_logging(
            level=logging_config.level,
            format=logging_config.format,
            redact_pii=logging_config.redact_pii,
        )

    store, mutex = _session_backend(settings)
    detector = ProfileDetector(settings.profile)
    catalog = catalog or InMemoryTemplateCatalog()
    llm = llm or create_executor(settings.providers.llm)

    services = ScoutServices(
        settings=settings,
        detector=detector,
        corrections=ProfileCorrectionManager(),
        catalog=catalog,
        llm=llm,
        sessions=SessionManager(store, settings.sessions, mutex),
        engine=AdaptiveConversationEngine(
            llm,
            config=settings.conversation,
            detector=detector,
            catalog=catalog,
            on_escape_hatch=on_escape_hatch,
            max_tokens=settings.providers.llm.max_tokens,
        ),
    )

    logger.info(
        "scout_bootstrapped",
        session_backend=settings.storage.session.backend,
        model=settings.providers.llm.model,
    )
    return services


def _session_backend(settings: Settings) -> tuple[SessionStore, SessionMutex | RedisSessionMutex]:
    store_config = settings.storage.session
    lock_timeout = settings.sessions.lock_timeout

    if store_config.backend == "redis":
        if not store_config.connection_url:
            raise ValueError("storage.session.connection_url is required for the redis backend")
        client = redis.from_url(store_config.connection_url, decode_responses=True)
        mutex = RedisSessionMutex(
            client,
            blocking_timeout=lock_timeout,
            key_prefix=store_config.key_prefix,
        )
        return RedisSessionStore(client, store_config), mutex

    return InMemorySessionStore(), SessionMutex(blocking_timeout=lock_timeout)
