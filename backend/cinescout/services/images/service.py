"""Image search services for guide photos.

Providers:
- PixabayImageService:  Pixabay search API (primary)
- UnsplashImageService: Unsplash search API (alternative)

Architecture:
- Shared httpx client with connection pooling, created lazily
- Fixed per-call timeout
- Any failure (network, non-2xx, empty result set) returns None
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from cinescout.config import Settings

logger = logging.getLogger(__name__)


class ImageLookupService(ABC):
    """Query → best-match image URL lookup."""

    HEADERS = {
        "User-Agent": "CineScout/0.1",
        "Accept": "application/json",
    }

    def __init__(
        self,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers=self.HEADERS,
                limits=httpx.Limits(max_connections=8, max_keepalive_connections=4),
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    @property
    @abstractmethod
    def provider_name(self) -> str:
        ...

    @abstractmethod
    async def _fetch(self, client: httpx.AsyncClient, query: str) -> Optional[str]:
        """Run the provider request; may raise on HTTP or decoding errors."""
        ...

    async def search(self, query: str) -> Optional[str]:
        """Return the best image URL for ``query``, or None if nothing usable."""
        query = query.strip()
        if not query:
            return None
        try:
            return await self._fetch(self._get_client(), query)
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            logger.warning(f"[IMAGES] {self.provider_name} lookup failed for \"{query}\": {type(e).__name__}: {e}")
            return None


class PixabayImageService(ImageLookupService):
    """Pixabay photo search."""

    API_URL = "https://pixabay.com/api/"

    def __init__(self, api_key: str, **kwargs) -> None:
        super().__init__(**kwargs)
        if not api_key:
            raise ValueError("PIXABAY_API_KEY not provided")
        self._api_key = api_key

    @property
    def provider_name(self) -> str:
        return "Pixabay"

    async def _fetch(self, client: httpx.AsyncClient, query: str) -> Optional[str]:
        params = {
            "key": self._api_key,
            "q": query,
            "image_type": "photo",
            "orientation": "horizontal",
            "per_page": 3,
            "safesearch": "true",
        }
        response = await client.get(self.API_URL, params=params, timeout=self._timeout)
        response.raise_for_status()
        hits = response.json().get("hits") or []
        if not hits:
            return None
        return hits[0].get("webformatURL") or None


class UnsplashImageService(ImageLookupService):
    """Unsplash photo search."""

    API_URL = "https://api.unsplash.com/search/photos"

    def __init__(self, access_key: str, **kwargs) -> None:
        super().__init__(**kwargs)
        if not access_key:
            raise ValueError("UNSPLASH_ACCESS_KEY not provided")
        self._access_key = access_key

    @property
    def provider_name(self) -> str:
        return "Unsplash"

    async def _fetch(self, client: httpx.AsyncClient, query: str) -> Optional[str]:
        response = await client.get(
            self.API_URL,
            params={"page": 1, "per_page": 1, "query": query},
            headers={"Authorization": f"Client-ID {self._access_key}"},
            timeout=self._timeout,
        )
        response.raise_for_status()
        results = response.json().get("results") or []
        if not results:
            return None
        return (results[0].get("urls") or {}).get("regular") or None


def create_image_service(settings: Settings) -> ImageLookupService | None:
    """Create the configured image provider.  Pixabay first, then Unsplash.

    Returns None when no provider key is set; enrichment then becomes a no-op.
    """
    if settings.pixabay_api_key:
        return PixabayImageService(
            api_key=settings.pixabay_api_key,
            timeout=settings.image_timeout_seconds,
        )
    if settings.unsplash_access_key:
        return UnsplashImageService(
            access_key=settings.unsplash_access_key,
            timeout=settings.image_timeout_seconds,
        )
    logger.warning("[IMAGES] No PIXABAY_API_KEY or UNSPLASH_ACCESS_KEY; guides will have no photos")
    return None
