"""
Translation provider abstraction.

Supports the hosted ``translate-text`` edge function and Google Cloud
Translation v2 as configurable backends. Every outbound request is paced
by an AsyncLimiter shared between the provider clients, and every failure
surfaces as TranslationProviderError so callers can degrade uniformly.
"""

from abc import ABC, abstractmethod
from typing import Any

import httpx
from aiolimiter import AsyncLimiter

from vitrin_core import get_logger
from vitrin_core.config import TranslationSettings

logger = get_logger(__name__)

_GOOGLE_TRANSLATE_URL = "https://translation.googleapis.com/language/translate/v2"


class TranslationProviderError(Exception):
    """Raised when a provider cannot produce a translation."""


def create_rate_limiter(settings: TranslationSettings) -> AsyncLimiter:
    """
    Build the limiter shared by all provider clients.

    Allows ``settings.burst`` requests per ``burst / requests_per_second``
    seconds. With the defaults (10/s, burst 1) requests are spaced 100ms apart.
    """
    return AsyncLimiter(settings.burst, settings.burst / settings.requests_per_second)


class TranslationProvider(ABC):
    """Base class for translation providers."""

    def __init__(self, limiter: AsyncLimiter | None = None) -> None:
        self.limiter = limiter

    async def _throttle(self) -> None:
        if self.limiter is not None:
            await self.limiter.acquire()

    @abstractmethod
    async def translate(self, text: str, source: str, target: str) -> str:
        """Translate a single text string."""

    async def translate_batch(self, texts: list[str], source: str, target: str) -> list[str]:
        """Translate a list of texts, preserving order. Default: one by one."""
        return [await self.translate(t, source, target) for t in texts]

    async def aclose(self) -> None:
        """Release network resources held by the provider."""


class HTTPTranslationProvider(TranslationProvider):
    """Provider backed by one reusable httpx client."""

    def __init__(
        self,
        timeout: float = 10.0,
        limiter: AsyncLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(limiter)
        self.timeout = timeout
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client shared by this provider's requests."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None


class DisabledProvider(TranslationProvider):
    """Placeholder used when no provider is configured; always fails."""

    async def translate(self, text: str, source: str, target: str) -> str:
        raise TranslationProviderError("Translation provider is not configured")

    async def translate_batch(self, texts: list[str], source: str, target: str) -> list[str]:
        raise TranslationProviderError("Translation provider is not configured")


class FallbackProvider(TranslationProvider):
    """Provider wrapper that falls back to another provider on failures."""

    def __init__(self, primary: TranslationProvider, fallback: TranslationProvider) -> None:
        super().__init__()
        self.primary = primary
        self.fallback = fallback

    async def translate(self, text: str, source: str, target: str) -> str:
        try:
            return await self.primary.translate(text, source, target)
        except TranslationProviderError:
            logger.exception("Primary translation provider failed; using fallback")
            return await self.fallback.translate(text, source, target)

    async def translate_batch(self, texts: list[str], source: str, target: str) -> list[str]:
        try:
            return await self.primary.translate_batch(texts, source, target)
        except TranslationProviderError:
            logger.exception("Primary batch translation failed; using fallback")
            return await self.fallback.translate_batch(texts, source, target)

    async def aclose(self) -> None:
        await self.primary.aclose()
        await self.fallback.aclose()


class EdgeFunctionProvider(HTTPTranslationProvider):
    """
    Hosted ``translate-text`` function.

    Request body is ``{"text", "sourceLanguage", "targetLanguage"}`` where
    ``text`` is a string or a list of strings. A successful response is
    ``{"success": true, "translations": ...}`` with a single
    ``{"translatedText": ...}`` object or an order-preserving list of them.
    """

    def __init__(
        self,
        endpoint_url: str,
        api_key: str = "",
        timeout: float = 10.0,
        limiter: AsyncLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(timeout, limiter, transport)
        self.endpoint_url = endpoint_url
        self.api_key = api_key

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
            headers["apikey"] = self.api_key
        return headers

    async def _post(self, text: str | list[str], source: str, target: str) -> Any:
        payload: dict[str, Any] = {
            "text": text,
            "sourceLanguage": source,
            "targetLanguage": target,
        }
        await self._throttle()
        client = await self._get_http_client()
        try:
            response = await client.post(
                self.endpoint_url,
                json=payload,
                headers=self._headers(),
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise TranslationProviderError(
                f"Translation endpoint returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise TranslationProviderError(f"Translation request failed: {exc}") from exc
        except ValueError as exc:
            raise TranslationProviderError("Translation response is not valid JSON") from exc

        if not isinstance(data, dict) or data.get("success") is not True:
            raise TranslationProviderError("Translation endpoint reported failure")
        return data.get("translations")

    @staticmethod
    def _extract_single(item: Any) -> str | None:
        if isinstance(item, dict):
            value = item.get("translatedText")
            if isinstance(value, str):
                return value
        return None

    async def translate(self, text: str, source: str, target: str) -> str:
        if not text or not text.strip():
            return text

        translations = await self._post(text, source, target)
        translated = self._extract_single(translations)
        if not translated:
            raise TranslationProviderError("Translation response does not contain translated text")
        return translated

    async def translate_batch(self, texts: list[str], source: str, target: str) -> list[str]:
        if not texts:
            return []

        translations = await self._post(texts, source, target)
        if not isinstance(translations, list):
            raise TranslationProviderError("Batch translation response is not a list")
        if len(translations) != len(texts):
            raise TranslationProviderError(
                f"Batch translation returned {len(translations)} items for {len(texts)} texts"
            )
        # Missing entries come back empty; the caller substitutes source text
        return [self._extract_single(item) or "" for item in translations]


class GoogleCloudProvider(HTTPTranslationProvider):
    """Google Cloud Translation v2 REST API."""

    def __init__(
        self,
        api_key: str,
        timeout: float = 10.0,
        limiter: AsyncLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        base_url: str = _GOOGLE_TRANSLATE_URL,
    ) -> None:
        super().__init__(timeout, limiter, transport)
        self.api_key = api_key
        self.base_url = base_url

    async def _request(self, texts: list[str], source: str, target: str) -> list[str]:
        body: dict[str, Any] = {"q": texts, "target": target, "format": "text"}
        if source and source != "auto":
            body["source"] = source

        await self._throttle()
        client = await self._get_http_client()
        try:
            response = await client.post(
                self.base_url,
                params={"key": self.api_key},
                json=body,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise TranslationProviderError(
                f"Google Translate returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise TranslationProviderError(f"Google Translate request failed: {exc}") from exc
        except ValueError as exc:
            raise TranslationProviderError("Google Translate response is not valid JSON") from exc

        try:
            items = data["data"]["translations"]
            results = [str(item["translatedText"]) for item in items]
        except (KeyError, TypeError) as exc:
            raise TranslationProviderError("Unexpected Google Translate response format") from exc

        if len(results) != len(texts):
            raise TranslationProviderError(
                f"Google Translate returned {len(results)} items for {len(texts)} texts"
            )
        return results

    async def translate(self, text: str, source: str, target: str) -> str:
        if not text or not text.strip():
            return text
        return (await self._request([text], source, target))[0]

    async def translate_batch(self, texts: list[str], source: str, target: str) -> list[str]:
        if not texts:
            return []
        return await self._request(texts, source, target)


def create_translation_provider(settings: TranslationSettings) -> TranslationProvider:
    """
    Create a translation provider from settings.

    ``settings.provider`` picks the primary backend ("edge" or "google").
    When both backends are configured the other one becomes the fallback.
    With nothing configured a DisabledProvider is returned, so every
    translation degrades to source text.

    Args:
        settings: Translation settings.

    Returns:
        Provider instance sharing one rate limiter across backends.
    """
    limiter = create_rate_limiter(settings)

    edge: TranslationProvider | None = None
    if settings.endpoint_url:
        edge = EdgeFunctionProvider(
            settings.endpoint_url,
            api_key=settings.api_key,
            timeout=settings.timeout,
            limiter=limiter,
        )

    google: TranslationProvider | None = None
    if settings.google_api_key:
        google = GoogleCloudProvider(
            settings.google_api_key,
            timeout=settings.timeout,
            limiter=limiter,
        )

    if settings.provider == "google":
        primary, secondary = google, edge
    else:
        primary, secondary = edge, google

    if primary is None:
        primary, secondary = secondary, None

    if primary is None:
        logger.warning(
            "No translation provider configured; translations will fall back to source text",
            extra={"provider": settings.provider},
        )
        return DisabledProvider()

    logger.info(
        "Using translation provider",
        extra={"provider": type(primary).__name__, "has_fallback": secondary is not None},
    )
    if secondary is not None:
        return FallbackProvider(primary=primary, fallback=secondary)
    return primary
