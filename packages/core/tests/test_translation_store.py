"""Tests for the SQLAlchemy translation store."""

from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from vitrin_core.services.translation_store import TranslationStore


def _store_with_session(mock_session: AsyncMock) -> TranslationStore:
    @asynccontextmanager
    async def factory():
        yield mock_session

    return TranslationStore(factory)


def _compiled(statement) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


def _param_values(params: dict, column: str) -> list:
    return [value for name, value in params.items() if name == column or name.startswith(f"{column}_m")]


def _result_rows(rows) -> MagicMock:
    result = MagicMock()
    result.all.return_value = rows
    return result


class TestTranslationStoreReads:
    """Test TranslationStore lookups."""

    @pytest.mark.asyncio
    async def test_get_returns_row(self):
        row = SimpleNamespace(translation_value="Lighting")
        mock_session = AsyncMock()
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = row
        mock_session.execute.return_value = mock_result

        store = _store_with_session(mock_session)
        result = await store.get("en", "category.lighting.name")

        assert result is row
        sql = _compiled(mock_session.execute.await_args.args[0])
        assert "translations.language_code =" in sql
        assert "translations.translation_key =" in sql

    @pytest.mark.asyncio
    async def test_get_many_single_query(self):
        mock_session = AsyncMock()
        mock_session.execute.return_value = _result_rows(
            [
                SimpleNamespace(translation_key="k1", translation_value="Red"),
                SimpleNamespace(translation_key="k2", translation_value="Blue"),
            ]
        )

        store = _store_with_session(mock_session)
        result = await store.get_many("en", ["k1", "k2", "k1"])

        assert result == {"k1": "Red", "k2": "Blue"}
        mock_session.execute.assert_awaited_once()
        assert " IN " in _compiled(mock_session.execute.await_args.args[0])

    @pytest.mark.asyncio
    async def test_get_many_empty_keys_skips_query(self):
        mock_session = AsyncMock()
        store = _store_with_session(mock_session)

        assert await store.get_many("en", []) == {}
        mock_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_load_language_pages_until_short_page(self):
        mock_session = AsyncMock()
        mock_session.execute.side_effect = [
            _result_rows(
                [
                    SimpleNamespace(translation_key="a", translation_value="A"),
                    SimpleNamespace(translation_key="b", translation_value="B"),
                ]
            ),
            _result_rows([SimpleNamespace(translation_key="c", translation_value="C")]),
        ]

        store = _store_with_session(mock_session)
        result = await store.load_language("en", page_size=2)

        assert result == {"a": "A", "b": "B", "c": "C"}
        assert mock_session.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_keys_by_language(self):
        mock_session = AsyncMock()
        mock_session.execute.side_effect = [
            _result_rows(
                [
                    SimpleNamespace(translation_key="a", language_code="en"),
                    SimpleNamespace(translation_key="a", language_code="tr"),
                ]
            ),
            _result_rows([]),
        ]

        store = _store_with_session(mock_session)
        result = await store.keys_by_language(page_size=2)

        assert result == {"a": {"en", "tr"}}


class TestTranslationStoreWrites:
    """Test TranslationStore upserts."""

    @pytest.mark.asyncio
    async def test_upsert_targets_composite_key(self):
        mock_session = AsyncMock()
        store = _store_with_session(mock_session)

        await store.upsert(
            "en",
            "product.X.name",
            "LED Panel",
            source_text="LED Panel",
            translation_type="product",
            auto_translated=True,
        )

        statement = mock_session.execute.await_args.args[0]
        sql = _compiled(statement)
        assert "INSERT INTO translations" in sql
        assert "ON CONFLICT (language_code, translation_key) DO UPDATE" in sql
        assert "updated_at = now()" in sql
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_upsert_context_defaults_to_type(self):
        mock_session = AsyncMock()
        store = _store_with_session(mock_session)

        await store.upsert(
            "tr",
            "category.lighting.name",
            "Aydınlatma",
            source_text="Aydınlatma",
            translation_type="category",
            auto_translated=False,
        )

        params = mock_session.execute.await_args.args[0].compile(dialect=postgresql.dialect()).params
        assert _param_values(params, "context") == ["category"]
        assert _param_values(params, "auto_translated") == [False]
        assert _param_values(params, "language_code") == ["tr"]

    @pytest.mark.asyncio
    async def test_upsert_many_dedupes_keys(self):
        mock_session = AsyncMock()
        store = _store_with_session(mock_session)
        rows = [
            {
                "translation_key": key,
                "translation_value": value,
                "source_text": key,
                "translation_type": "dynamic",
                "context": "dynamic",
                "auto_translated": True,
            }
            for key, value in [("a", "first"), ("b", "B"), ("a", "second")]
        ]

        await store.upsert_many("en", rows)

        params = mock_session.execute.await_args.args[0].compile(dialect=postgresql.dialect()).params
        assert sorted(_param_values(params, "translation_key")) == ["a", "b"]
        assert sorted(_param_values(params, "translation_value")) == ["B", "second"]

    @pytest.mark.asyncio
    async def test_upsert_many_empty_is_noop(self):
        mock_session = AsyncMock()
        store = _store_with_session(mock_session)

        await store.upsert_many("en", [])

        mock_session.execute.assert_not_called()
        mock_session.commit.assert_not_called()
