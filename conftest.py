"""Global pytest fixtures for testing."""

import contextlib
from collections.abc import Iterable, Sequence
from typing import Any

import dotenv
import pytest

from vitrin_core.config import TranslationSettings
from vitrin_core.services.translation_cache import TranslationCache
from vitrin_core.services.translation_providers import (
    TranslationProvider,
    TranslationProviderError,
)
from vitrin_core.services.translation_service import TranslationService
from vitrin_core.services.translation_store import TranslationRow
from vitrin_database.models import Translation

with contextlib.suppress(OSError):
    dotenv.load_dotenv()


class MockTranslationStore:
    """In-memory stand-in for TranslationStore."""

    def __init__(self) -> None:
        self.rows: dict[tuple[str, str], Translation] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.fail_reads = False
        self.fail_writes = False

    def _check_read(self) -> None:
        if self.fail_reads:
            raise RuntimeError("store unavailable")

    def _check_write(self) -> None:
        if self.fail_writes:
            raise RuntimeError("store unavailable")

    async def get(self, language: str, key: str) -> Translation | None:
        self.calls.append(("get", (language, key)))
        self._check_read()
        return self.rows.get((language, key))

    async def get_many(self, language: str, keys: Iterable[str]) -> dict[str, str]:
        key_list = list(keys)
        self.calls.append(("get_many", (language, tuple(key_list))))
        self._check_read()
        return {
            key: self.rows[(language, key)].translation_value
            for key in key_list
            if (language, key) in self.rows
        }

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
        self.calls.append(("upsert", (language, key)))
        self._check_write()
        self._write(
            language,
            {
                "translation_key": key,
                "translation_value": value,
                "source_text": source_text,
                "translation_type": translation_type,
                "context": translation_type if context is None else context,
                "auto_translated": auto_translated,
            },
        )

    async def upsert_many(self, language: str, rows: Sequence[TranslationRow]) -> None:
        self.calls.append(("upsert_many", (language, tuple(r["translation_key"] for r in rows))))
        self._check_write()
        for row in rows:
            self._write(language, dict(row))

    async def load_language(self, language: str, page_size: int = 1000) -> dict[str, str]:
        self.calls.append(("load_language", (language,)))
        self._check_read()
        return {
            key: row.translation_value
            for (lang, key), row in sorted(self.rows.items())
            if lang == language
        }

    async def keys_by_language(self, page_size: int = 1000) -> dict[str, set[str]]:
        self.calls.append(("keys_by_language", ()))
        self._check_read()
        languages_by_key: dict[str, set[str]] = {}
        for lang, key in self.rows:
            languages_by_key.setdefault(key, set()).add(lang)
        return languages_by_key

    def _write(self, language: str, values: dict[str, Any]) -> None:
        existing = self.rows.get((language, values["translation_key"]))
        if existing is not None:
            for field, value in values.items():
                setattr(existing, field, value)
            return
        self.rows[(language, values["translation_key"])] = Translation(
            language_code=language, **values
        )

    def seed(
        self,
        language: str,
        key: str,
        value: str,
        source_text: str | None = None,
        auto_translated: bool = True,
    ) -> None:
        """Seed a row directly for tests."""
        self._write(
            language,
            {
                "translation_key": key,
                "translation_value": value,
                "source_text": source_text,
                "translation_type": "dynamic",
                "context": "",
                "auto_translated": auto_translated,
            },
        )

    def has_row(self, language: str, key: str) -> bool:
        return (language, key) in self.rows

    def row(self, language: str, key: str) -> Translation:
        return self.rows[(language, key)]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def reset_calls(self) -> None:
        self.calls.clear()


class MockTranslationProvider(TranslationProvider):
    """Deterministic provider recording every request."""

    def __init__(self, translations: dict[str, str] | None = None) -> None:
        super().__init__()
        self.translations = dict(translations or {})
        self.calls: list[tuple[str, str, str]] = []
        self.batch_calls: list[tuple[list[str], str, str]] = []
        self.fail = False
        self.fail_languages: set[str] = set()

    def _lookup(self, text: str, target: str) -> str:
        return self.translations.get(text, f"{text} [{target}]")

    def _check(self, target: str) -> None:
        if self.fail or target in self.fail_languages:
            raise TranslationProviderError("provider unavailable")

    async def translate(self, text: str, source: str, target: str) -> str:
        self.calls.append((text, source, target))
        self._check(target)
        return self._lookup(text, target)

    async def translate_batch(self, texts: list[str], source: str, target: str) -> list[str]:
        self.batch_calls.append((list(texts), source, target))
        self._check(target)
        return [self._lookup(text, target) for text in texts]

    @property
    def request_count(self) -> int:
        return len(self.calls) + len(self.batch_calls)


@pytest.fixture
def translation_settings() -> TranslationSettings:
    """Settings isolated from the environment's provider configuration."""
    return TranslationSettings(
        provider="edge",
        endpoint_url="",
        api_key="",
        google_api_key="",
        source_language="tr",
        default_target_language="en",
        target_languages=["en", "fr", "de", "ar", "ru"],
        batch_size=50,
        cache_version="test-1",
    )


@pytest.fixture
def mock_store() -> MockTranslationStore:
    return MockTranslationStore()


@pytest.fixture
def mock_provider() -> MockTranslationProvider:
    return MockTranslationProvider()


@pytest.fixture
def translation_service(
    mock_store: MockTranslationStore,
    mock_provider: MockTranslationProvider,
    translation_settings: TranslationSettings,
) -> TranslationService:
    """TranslationService wired to in-memory fakes with its own cache."""
    return TranslationService(
        store=mock_store,  # type: ignore[arg-type]
        provider=mock_provider,
        cache=TranslationCache(),
        settings=translation_settings,
    )
