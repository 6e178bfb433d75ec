"""
System service.

Provides logic for persisted key-value state: the translation cache
version marker and client-side language preferences.
"""

from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from vitrin_database.models.system_setting import SystemSetting


class SystemService:
    """Service for system settings."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize system service.

        Args:
            session: Database session.
        """
        self.session = session

    async def get_setting(self, key: str, default: str | None = None) -> str | None:
        """
        Get a system setting by key.

        Args:
            key: Setting key.
            default: Default value if not found.

        Returns:
            Setting value or default.
        """
        result = await self.session.execute(select(SystemSetting).where(SystemSetting.key == key))
        setting = result.scalar_one_or_none()
        return setting.value if setting else default

    async def set_setting(self, key: str, value: str, description: str | None = None) -> SystemSetting:
        """
        Set a system setting.

        Args:
            key: Setting key.
            value: Setting value.
            description: Optional description.

        Returns:
            Updated setting.
        """
        result = await self.session.execute(select(SystemSetting).where(SystemSetting.key == key))
        setting = result.scalar_one_or_none()

        if setting:
            setting.value = value
            if description:
                setting.description = description
        else:
            setting = SystemSetting(key=key, value=value, description=description)
            self.session.add(setting)

        await self.session.commit()
        await self.session.refresh(setting)
        return setting

    async def delete_settings(self, prefix: str, keep: Iterable[str] = ()) -> int:
        """
        Delete every setting whose key starts with ``prefix``.

        Args:
            prefix: Key prefix to match.
            keep: Keys to preserve even if they match.

        Returns:
            Number of deleted settings.
        """
        stmt = delete(SystemSetting).where(SystemSetting.key.startswith(prefix, autoescape=True))
        kept = list(keep)
        if kept:
            stmt = stmt.where(SystemSetting.key.not_in(kept))
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0
