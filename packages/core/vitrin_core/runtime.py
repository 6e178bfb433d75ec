"""
Translation layer lifecycle.

Builds the process-wide TranslationService at startup and releases its
resources at shutdown.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from vitrin_database.session import close_database, get_session_context, init_database

from . import get_logger, init_logging
from .config import DatabaseSettings, TranslationSettings, database_settings, translation_settings
from .services.system_service import SystemService
from .services.translation_providers import create_translation_provider
from .services.translation_service import TranslationService
from .services.translation_store import TranslationStore

logger = get_logger(__name__)


@asynccontextmanager
async def translation_runtime(
    settings: TranslationSettings | None = None,
    db_settings: DatabaseSettings | None = None,
) -> AsyncGenerator[TranslationService, None]:
    """
    Translation layer lifecycle manager.

    Startup initializes logging and the database, builds the service and
    runs the cache-version check. Shutdown closes the provider clients and
    disposes of the engine.

    Args:
        settings: Translation settings. Defaults to the environment.
        db_settings: Database settings. Defaults to the environment.

    Yields:
        The TranslationService for this process.
    """
    settings = settings or translation_settings
    db_settings = db_settings or database_settings

    init_logging()
    init_database(db_settings.database_url, echo=db_settings.database_echo)

    service = TranslationService(
        store=TranslationStore(get_session_context),
        provider=create_translation_provider(settings),
        settings=settings,
    )

    try:
        async with get_session_context() as session:
            await service.check_cache_version(SystemService(session))
    except Exception:
        logger.exception("Translation cache version check failed")

    logger.info("Translation layer started", extra={"cache_version": settings.cache_version})
    try:
        yield service
    finally:
        service.clear_translation_cache()
        await service.provider.aclose()
        await close_database()
        logger.info("Translation layer stopped")
