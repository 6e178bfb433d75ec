"""
Translation store.

Persistence adapter over the ``translations`` table. Each operation opens
its own session so a long-lived TranslationService never holds one open.
All writes upsert on (language_code, translation_key).
"""

from collections.abc import Callable, Iterable, Sequence
from contextlib import AbstractAsyncContextManager
from typing import Any, TypedDict

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from vitrin_database.models import Translation, generate_uuid
from vitrin_database.session import get_session_context

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]

DEFAULT_PAGE_SIZE = 1000

# Columns refreshed when an upsert hits an existing row
_UPDATE_COLUMNS = (
    "translation_value",
    "source_text",
    "translation_type",
    "context",
    "auto_translated",
)


class TranslationRow(TypedDict):
    """Values for one translation upsert."""

    translation_key: str
    translation_value: str
    source_text: str | None
    translation_type: str
    context: str
    auto_translated: bool


class TranslationStore:
    """Upsert/lookup access to persisted translations."""

    def __init__(self, session_factory: SessionFactory = get_session_context) -> None:
        self._session_factory = session_factory

    async def get(self, language: str, key: str) -> Translation | None:
        """
        Point lookup of one translation.

        Args:
            language: Language code.
            key: Translation key.

        Returns:
            Translation row or None.
        """
        stmt = select(Translation).where(
            Translation.language_code == language,
            Translation.translation_key == key,
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def get_many(self, language: str, keys: Iterable[str]) -> dict[str, str]:
        """
        Fetch translations for many keys of one language in a single query.

        Args:
            language: Language code.
            keys: Translation keys.

        Returns:
            Mapping of key to translation value for the rows that exist.
        """
        key_list = list(dict.fromkeys(keys))
        if not key_list:
            return {}

        stmt = select(Translation.translation_key, Translation.translation_value).where(
            Translation.language_code == language,
            Translation.translation_key.in_(key_list),
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return {row.translation_key: row.translation_value for row in result.all()}

    async def upsert(
        self,
        language: str,
        key: str,
        value: str,
        *,
        source_text: str | None,
        translation_type: str = "dynamic",
        context: str | None = None,
        auto_translated: bool,
    ) -> None:
        """Insert or update a single translation."""
        row: TranslationRow = {
            "translation_key": key,
            "translation_value": value,
            "source_text": source_text,
            "translation_type": translation_type,
            "context": translation_type if context is None else context,
            "auto_translated": auto_translated,
        }
        await self.upsert_many(language, [row])

    async def upsert_many(self, language: str, rows: Sequence[TranslationRow]) -> None:
        """
        Insert or update translations for one language in one statement.

        Args:
            language: Language code.
            rows: Row values; duplicate keys keep the last occurrence.
        """
        if not rows:
            return

        # ON CONFLICT cannot touch the same row twice in one statement
        deduped: dict[str, dict[str, Any]] = {}
        for row in rows:
            deduped[row["translation_key"]] = {
                "id": generate_uuid(),
                "language_code": language,
                **row,
            }

        stmt = insert(Translation).values(list(deduped.values()))
        update_values: dict[str, Any] = {
            column: stmt.excluded[column] for column in _UPDATE_COLUMNS
        }
        update_values["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(
            index_elements=[Translation.language_code, Translation.translation_key],
            set_=update_values,
        )

        async with self._session_factory() as session:
            await session.execute(stmt)
            await session.commit()

    async def load_language(self, language: str, page_size: int = DEFAULT_PAGE_SIZE) -> dict[str, str]:
        """
        Read every translation of one language, page by page.

        Args:
            language: Language code.
            page_size: Rows per query.

        Returns:
            Mapping of key to translation value.
        """
        values: dict[str, str] = {}
        offset = 0
        async with self._session_factory() as session:
            while True:
                stmt = (
                    select(Translation.translation_key, Translation.translation_value)
                    .where(Translation.language_code == language)
                    .order_by(Translation.translation_key)
                    .offset(offset)
                    .limit(page_size)
                )
                result = await session.execute(stmt)
                page = result.all()
                for row in page:
                    values[row.translation_key] = row.translation_value
                if len(page) < page_size:
                    break
                offset += page_size
        return values

    async def keys_by_language(self, page_size: int = DEFAULT_PAGE_SIZE) -> dict[str, set[str]]:
        """
        Map every stored translation key to the languages it exists in.

        Args:
            page_size: Rows per query.

        Returns:
            Mapping of key to the set of language codes with a row.
        """
        languages_by_key: dict[str, set[str]] = {}
        offset = 0
        async with self._session_factory() as session:
            while True:
                stmt = (
                    select(Translation.translation_key, Translation.language_code)
                    .order_by(Translation.translation_key, Translation.language_code)
                    .offset(offset)
                    .limit(page_size)
                )
                result = await session.execute(stmt)
                page = result.all()
                for row in page:
                    languages_by_key.setdefault(row.translation_key, set()).add(row.language_code)
                if len(page) < page_size:
                    break
                offset += page_size
        return languages_by_key
