"""
Service layer.

Translation cache, persistence, provider and language services.
"""

from .language_service import LanguageService
from .system_service import SystemService
from .translation_cache import CacheKey, TranslationCache
from .translation_providers import (
    DisabledProvider,
    EdgeFunctionProvider,
    FallbackProvider,
    GoogleCloudProvider,
    HTTPTranslationProvider,
    TranslationProvider,
    TranslationProviderError,
    create_rate_limiter,
    create_translation_provider,
)
from .translation_service import TranslationService
from .translation_store import TranslationStore

__all__ = [
    "CacheKey",
    "DisabledProvider",
    "EdgeFunctionProvider",
    "FallbackProvider",
    "GoogleCloudProvider",
    "HTTPTranslationProvider",
    "LanguageService",
    "SystemService",
    "TranslationCache",
    "TranslationProvider",
    "TranslationProviderError",
    "TranslationService",
    "TranslationStore",
    "create_rate_limiter",
    "create_translation_provider",
]
