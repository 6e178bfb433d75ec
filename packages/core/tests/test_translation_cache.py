"""Tests for the in-memory translation cache."""

from vitrin_core.services.translation_cache import CacheKey, TranslationCache


def test_cache_key_string_form() -> None:
    assert str(CacheKey("en", "product.42.name")) == "en:product.42.name"


def test_get_set_roundtrip() -> None:
    cache = TranslationCache()
    cache.set("en", "ui.nav.home", "Home")

    assert cache.get("en", "ui.nav.home") == "Home"
    assert cache.get("fr", "ui.nav.home") is None
    assert CacheKey("en", "ui.nav.home") in cache
    assert len(cache) == 1


def test_clear_for_key_covers_all_languages() -> None:
    cache = TranslationCache()
    for lang in ("en", "fr", "de"):
        cache.set(lang, "product.42.name", f"name-{lang}")
    cache.set("en", "product.43.name", "other")

    removed = cache.clear_for_key("product.42.name")

    assert removed == 3
    assert cache.get("en", "product.42.name") is None
    assert cache.get("en", "product.43.name") == "other"


def test_clear_for_key_matches_substring() -> None:
    """Nested keys under the invalidated key are dropped too."""
    cache = TranslationCache()
    cache.set("en", "category.lighting.name", "Lighting")
    cache.set("en", "category.lighting.name.short", "Light")
    cache.set("en", "category.cables.name", "Cables")

    removed = cache.clear_for_key("category.lighting")

    assert removed == 2
    assert [str(k) for k in cache.keys()] == ["en:category.cables.name"]


def test_clear_for_unknown_key_removes_nothing() -> None:
    cache = TranslationCache()
    cache.set("en", "a", "A")

    assert cache.clear_for_key("zzz") == 0
    assert len(cache) == 1


def test_update_and_clear() -> None:
    cache = TranslationCache()
    cache.update("en", {"a": "A", "b": "B"})

    assert cache.get("en", "b") == "B"

    cache.clear()

    assert len(cache) == 0
