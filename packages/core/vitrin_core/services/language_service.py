"""
Language service.

Lists the languages the site offers and tracks the selected display language.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vitrin_core.config import translation_settings
from vitrin_core.schemas import LanguageResponse
from vitrin_database.models import Language

from .system_service import SystemService

SELECTED_LANGUAGE_KEY = "translation.selected_language"


class LanguageService:
    """Site language management service."""

    def __init__(self, session: AsyncSession, source_language: str | None = None) -> None:
        self.session = session
        self.source_language = source_language or translation_settings.source_language
        self.system = SystemService(session)

    async def list_active(self) -> list[LanguageResponse]:
        """
        List active languages in display order.

        Returns:
            Active languages ordered by sort_order.
        """
        stmt = (
            select(Language)
            .where(Language.is_active.is_(True))
            .order_by(Language.sort_order, Language.code)
        )
        result = await self.session.execute(stmt)
        return [LanguageResponse.model_validate(lang) for lang in result.scalars().all()]

    async def get_default(self) -> LanguageResponse | None:
        """Get the default active language, if one is flagged."""
        stmt = select(Language).where(
            Language.is_active.is_(True),
            Language.is_default.is_(True),
        )
        result = await self.session.execute(stmt)
        language = result.scalars().first()
        return LanguageResponse.model_validate(language) if language else None

    async def get_current_language(self) -> str:
        """
        Resolve the display language.

        Order: persisted selection, then the default language, then the
        canonical source language.
        """
        selected = await self.system.get_setting(SELECTED_LANGUAGE_KEY)
        if selected:
            return selected
        default = await self.get_default()
        if default:
            return default.code
        return self.source_language

    async def set_current_language(self, code: str) -> None:
        """Persist the selected display language."""
        await self.system.set_setting(
            SELECTED_LANGUAGE_KEY, code, "Selected display language"
        )
