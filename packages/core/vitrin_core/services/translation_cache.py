"""
In-memory translation cache.

Process-lifetime map from (language, translation key) to translated text.
Owned by a single TranslationService; never evicts on its own.
"""

from collections.abc import Iterator, Mapping
from typing import NamedTuple


class CacheKey(NamedTuple):
    """Composite cache key. ``str(key)`` gives the ``"{language}:{key}"`` form."""

    language: str
    key: str

    def __str__(self) -> str:
        return f"{self.language}:{self.key}"


class TranslationCache:
    """Unbounded in-memory translation cache."""

    def __init__(self) -> None:
        self._entries: dict[CacheKey, str] = {}

    def get(self, language: str, key: str) -> str | None:
        return self._entries.get(CacheKey(language, key))

    def set(self, language: str, key: str, value: str) -> None:
        self._entries[CacheKey(language, key)] = value

    def update(self, language: str, values: Mapping[str, str]) -> None:
        """Bulk-populate entries for one language."""
        for key, value in values.items():
            self._entries[CacheKey(language, key)] = value

    def clear(self) -> None:
        self._entries.clear()

    def clear_for_key(self, translation_key: str) -> int:
        """
        Drop every entry whose composite key contains ``translation_key``.

        Matching is a substring test on the ``"{language}:{key}"`` form, so a
        single call covers all languages of a key (and any key nested under it).

        Args:
            translation_key: Key or key fragment to invalidate.

        Returns:
            Number of entries removed.
        """
        stale = [entry for entry in self._entries if translation_key in str(entry)]
        for entry in stale:
            del self._entries[entry]
        return len(stale)

    def keys(self) -> Iterator[CacheKey]:
        return iter(list(self._entries))

    def __contains__(self, item: object) -> bool:
        return item in self._entries

    def __len__(self) -> int:
        return len(self._entries)
