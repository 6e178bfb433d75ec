"""
Translation service.

Resolves Turkish catalog strings into target languages through three
layers: the in-memory cache, the translations table and the remote
translation provider. Each miss back-fills the layers above it.

Translation is best effort. Store and provider failures are logged and
the caller gets source text instead of an error.
"""

from collections.abc import Iterable, Sequence

from vitrin_core import get_logger
from vitrin_core.config import TranslationSettings, translation_settings
from vitrin_core.schemas import TranslationItem, TranslationRecordResponse

from .language_service import SELECTED_LANGUAGE_KEY
from .system_service import SystemService
from .translation_cache import TranslationCache
from .translation_providers import TranslationProvider
from .translation_store import DEFAULT_PAGE_SIZE, TranslationRow, TranslationStore

logger = get_logger(__name__)

CACHE_VERSION_KEY = "translation_cache_version"
CLIENT_STATE_PREFIX = "translation."

BatchItem = TranslationItem | tuple[str, str]


class TranslationService:
    """Layered translation cache service."""

    def __init__(
        self,
        store: TranslationStore,
        provider: TranslationProvider,
        cache: TranslationCache | None = None,
        settings: TranslationSettings | None = None,
    ) -> None:
        self.store = store
        self.provider = provider
        self.cache = cache if cache is not None else TranslationCache()
        self.settings = settings or translation_settings

    @property
    def source_language(self) -> str:
        return self.settings.source_language

    async def translate(
        self,
        source_text: str,
        target_language: str,
        translation_key: str,
        *,
        translation_type: str | None = None,
        force_refresh: bool = False,
    ) -> str:
        """
        Translate one keyed source string.

        Resolution order is cache, store, provider. ``force_refresh`` skips
        both reads and goes straight to the provider, then rewrites the store
        row and the cache entry.

        Args:
            source_text: Text in the canonical source language.
            target_language: Target language code.
            translation_key: Stable key identifying the content.
            translation_type: Call-site tag stored on first write (default "dynamic").
            force_refresh: Bypass cached and stored values.

        Returns:
            Translated text, or ``source_text`` when translation fails.
        """
        if target_language == self.source_language:
            return source_text

        if not source_text or not source_text.strip():
            return ""

        if not force_refresh:
            cached = self.cache.get(target_language, translation_key)
            if cached is not None:
                return cached

            stored = await self._read_stored(target_language, translation_key)
            if stored:
                self.cache.set(target_language, translation_key, stored)
                return stored

        try:
            translated = await self.provider.translate(
                source_text, self.source_language, target_language
            )
        except Exception:
            logger.exception(
                "Translation failed; returning source text",
                extra={"language": target_language, "translation_key": translation_key},
            )
            return source_text

        if not translated:
            logger.warning(
                "Provider returned empty translation; returning source text",
                extra={"language": target_language, "translation_key": translation_key},
            )
            return source_text

        try:
            await self.store.upsert(
                target_language,
                translation_key,
                translated,
                source_text=source_text,
                translation_type=translation_type or "dynamic",
                context=translation_type or "",
                auto_translated=True,
            )
        except Exception:
            logger.exception(
                "Failed to persist translation",
                extra={"language": target_language, "translation_key": translation_key},
            )

        self.cache.set(target_language, translation_key, translated)
        return translated

    async def translate_batch(
        self,
        items: Iterable[BatchItem],
        target_language: str,
        translation_type: str = "dynamic",
    ) -> dict[str, str]:
        """
        Translate many keyed source strings.

        Stored translations are fetched in one query. The rest are sent to
        the provider in chunks of ``settings.batch_size``; response item ``i``
        belongs to request item ``i``. Items that cannot be translated map to
        their own source text, so every input key is present in the result.

        Args:
            items: TranslationItem objects or ``(key, text)`` pairs.
            target_language: Target language code.
            translation_type: Tag stored on newly translated rows.

        Returns:
            Mapping of key to translated (or source) text.
        """
        texts = self._normalize_items(items)

        if target_language == self.source_language:
            return dict(texts)

        result: dict[str, str] = {}

        try:
            existing = await self.store.get_many(target_language, texts.keys())
        except Exception:
            logger.exception(
                "Batch translation lookup failed; treating as cache miss",
                extra={"language": target_language, "count": len(texts)},
            )
            existing = {}

        for key, value in existing.items():
            if key in texts:
                if value:
                    self.cache.set(target_language, key, value)
                result[key] = value or texts[key]

        pending: list[tuple[str, str]] = []
        for key, text in texts.items():
            if key in result:
                continue
            if not text or not text.strip():
                result[key] = ""
                continue
            pending.append((key, text))

        if not pending:
            return {key: result[key] for key in texts}

        batch_size = self.settings.batch_size
        for start in range(0, len(pending), batch_size):
            batch = pending[start : start + batch_size]
            result.update(
                await self._translate_chunk(batch, target_language, translation_type)
            )

        return {key: result[key] for key in texts}

    async def _translate_chunk(
        self,
        batch: Sequence[tuple[str, str]],
        target_language: str,
        translation_type: str,
    ) -> dict[str, str]:
        source_texts = [text for _, text in batch]
        try:
            translated = await self.provider.translate_batch(
                source_texts, self.source_language, target_language
            )
            if len(translated) != len(batch):
                raise ValueError(
                    f"Provider returned {len(translated)} translations for {len(batch)} texts"
                )
        except Exception:
            logger.exception(
                "Batch translation failed; using source text",
                extra={"language": target_language, "count": len(batch)},
            )
            return dict(batch)

        chunk: dict[str, str] = {}
        rows: list[TranslationRow] = []
        for (key, text), value in zip(batch, translated):
            value = value or text
            chunk[key] = value
            self.cache.set(target_language, key, value)
            rows.append(
                {
                    "translation_key": key,
                    "translation_value": value,
                    "source_text": text,
                    "translation_type": translation_type,
                    "context": translation_type,
                    "auto_translated": True,
                }
            )

        try:
            await self.store.upsert_many(target_language, rows)
        except Exception:
            logger.exception(
                "Failed to persist batch translations",
                extra={"language": target_language, "count": len(rows)},
            )

        logger.info(
            "Batch translated",
            extra={"language": target_language, "count": len(rows)},
        )
        return chunk

    async def save_and_translate(
        self,
        source_text: str,
        translation_key: str,
        translation_type: str = "dynamic",
        target_languages: Sequence[str] | None = None,
    ) -> None:
        """
        Save canonical source text and propagate it to target languages.

        The source-language row is always rewritten. Each target language is
        then re-translated with ``force_refresh`` so edits replace stale rows.
        A failure for one language does not stop the others.

        Args:
            source_text: New canonical text.
            translation_key: Stable key identifying the content.
            translation_type: Call-site tag for every written row.
            target_languages: Languages to propagate to; the default first
                target is always included.
        """
        self.cache.clear_for_key(translation_key)

        try:
            await self.store.upsert(
                self.source_language,
                translation_key,
                source_text,
                source_text=source_text,
                translation_type=translation_type,
                context=translation_type,
                auto_translated=False,
            )
        except Exception:
            logger.exception(
                "Failed to save source text",
                extra={"translation_key": translation_key},
            )

        if target_languages is None:
            target_languages = self.settings.target_languages

        languages = [
            lang
            for lang in dict.fromkeys([self.settings.default_target_language, *target_languages])
            if lang != self.source_language
        ]

        for lang in languages:
            await self.translate(
                source_text,
                lang,
                translation_key,
                translation_type=translation_type,
                force_refresh=True,
            )

        logger.info(
            "Saved and propagated translation",
            extra={"translation_key": translation_key, "languages": languages},
        )

    def clear_translation_cache(self) -> None:
        """Drop every in-memory translation."""
        self.cache.clear()

    def clear_translation_cache_for_key(self, translation_key: str) -> int:
        """Drop in-memory entries of ``translation_key`` across all languages."""
        return self.cache.clear_for_key(translation_key)

    async def check_cache_version(self, system: SystemService) -> bool:
        """
        Wipe cached state left by an older cache format.

        Compares the persisted version marker with
        ``settings.cache_version``. On mismatch clears the in-memory cache
        and every persisted ``translation.*`` setting except the selected
        language, then records the current version.

        Args:
            system: System settings service.

        Returns:
            True if a wipe happened.
        """
        stored = await system.get_setting(CACHE_VERSION_KEY)
        if stored == self.settings.cache_version:
            return False

        self.cache.clear()
        removed = await system.delete_settings(CLIENT_STATE_PREFIX, keep=[SELECTED_LANGUAGE_KEY])
        await system.set_setting(
            CACHE_VERSION_KEY,
            self.settings.cache_version,
            "Translation cache format version",
        )
        logger.info(
            "Translation cache version changed; cached state cleared",
            extra={
                "previous_version": stored,
                "version": self.settings.cache_version,
                "removed_settings": removed,
            },
        )
        return True

    async def load_language(self, language: str) -> dict[str, str]:
        """
        Load every stored translation of one language into the cache.

        Args:
            language: Language code.

        Returns:
            Mapping of key to value, empty if the store is unavailable.
        """
        try:
            values = await self.store.load_language(language)
        except Exception:
            logger.exception("Failed to load translations", extra={"language": language})
            return {}

        self.cache.update(language, values)
        logger.info(
            "Loaded translations",
            extra={"language": language, "count": len(values)},
        )
        return values

    def t(self, key: str, language: str, fallback: str | None = None) -> str:
        """Look up a loaded translation; falls back to ``fallback`` then the key."""
        return self.cache.get(language, key) or fallback or key

    async def get_record(self, language: str, key: str) -> TranslationRecordResponse | None:
        """
        Get the stored translation row for a key.

        Args:
            language: Language code.
            key: Translation key.

        Returns:
            TranslationRecordResponse, or None if not found or the store is unavailable.
        """
        try:
            record = await self.store.get(language, key)
        except Exception:
            logger.exception(
                "Failed to read translation record",
                extra={"language": language, "translation_key": key},
            )
            return None
        if record is None:
            return None
        return TranslationRecordResponse.model_validate(record)

    async def find_missing_translations(
        self, languages: Iterable[str] | None = None
    ) -> dict[str, list[str]]:
        """
        Report keys that lack a row for some language.

        Args:
            languages: Languages every key should exist in. Defaults to the
                source language plus the configured target languages.

        Returns:
            Mapping of key to the missing language codes, in ``languages`` order.
            Empty if the store is unavailable.
        """
        wanted = self._languages(languages)
        try:
            languages_by_key = await self.store.keys_by_language()
        except Exception:
            logger.exception("Failed to scan translation keys", extra={"languages": wanted})
            return {}

        missing: dict[str, list[str]] = {}
        for key, present in sorted(languages_by_key.items()):
            absent = [lang for lang in wanted if lang not in present]
            if absent:
                missing[key] = absent
        return missing

    async def fill_missing_translations(
        self,
        languages: Iterable[str] | None = None,
        translation_type: str = "dynamic",
        chunk_size: int = DEFAULT_PAGE_SIZE,
    ) -> int:
        """
        Translate every missing (key, language) pair that has source text.

        Missing keys are processed ``chunk_size`` at a time so no single
        query binds more keys than one store page.

        Args:
            languages: Languages to fill. Defaults as in find_missing_translations.
            translation_type: Tag stored on the new rows.
            chunk_size: Keys per source lookup and per translate_batch call.

        Returns:
            Number of (key, language) pairs sent for translation.
        """
        missing = await self.find_missing_translations(languages)
        if not missing:
            return 0

        keys = list(missing)
        attempted = 0
        filled_languages: set[str] = set()
        for start in range(0, len(keys), chunk_size):
            chunk = keys[start : start + chunk_size]
            try:
                sources = await self.store.get_many(self.source_language, chunk)
            except Exception:
                logger.exception(
                    "Failed to read source texts; skipping chunk",
                    extra={"offset": start, "count": len(chunk)},
                )
                continue

            by_language: dict[str, list[TranslationItem]] = {}
            for key in chunk:
                text = sources.get(key)
                if not text:
                    continue
                for lang in missing[key]:
                    if lang == self.source_language:
                        continue
                    by_language.setdefault(lang, []).append(TranslationItem(key=key, text=text))

            for lang, items in by_language.items():
                await self.translate_batch(items, lang, translation_type)
                attempted += len(items)
                filled_languages.add(lang)

        logger.info(
            "Filled missing translations",
            extra={"attempted": attempted, "languages": sorted(filled_languages)},
        )
        return attempted

    def _languages(self, languages: Iterable[str] | None) -> list[str]:
        if languages is None:
            languages = [self.source_language, *self.settings.target_languages]
        return list(dict.fromkeys(languages))

    @staticmethod
    def _normalize_items(items: Iterable[BatchItem]) -> dict[str, str]:
        texts: dict[str, str] = {}
        for item in items:
            if isinstance(item, TranslationItem):
                texts[item.key] = item.text
            else:
                key, text = item
                texts[key] = text
        return texts

    async def _read_stored(self, language: str, key: str) -> str | None:
        try:
            record = await self.store.get(language, key)
        except Exception:
            logger.exception(
                "Translation lookup failed; treating as cache miss",
                extra={"language": language, "translation_key": key},
            )
            return None
        if record is None:
            return None
        return record.translation_value or None


__all__ = ["TranslationService"]
