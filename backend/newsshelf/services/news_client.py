import httpx
from typing import Dict, Optional, Tuple
import logging

from newsshelf.core.config import settings
from newsshelf.core.errors import UpstreamError

logger = logging.getLogger(__name__)


class NewsClient:
    """Pass-through client for the NewsAPI search endpoints."""

    def __init__(self, base_url: str = None, timeout: float = None):
        self.base_url = (base_url or settings.NEWS_API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.NEWS_API_TIMEOUT

    async def _get(self, path: str, params: Dict) -> Dict:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(f"{self.base_url}{path}", params=params)
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"News API request to {path} failed: {str(e)}")
            raise UpstreamError("Failed to fetch news") from e

    async def search(
        self,
        api_key: str,
        query: str,
        page_size: Optional[int] = None,
        page: int = 1,
        sort_by: str = "publishedAt",
    ) -> Dict:
        """Search everything matching ``query``; returns the upstream payload unchanged."""
        data = await self._get(
            "/everything",
            {
                "q": query,
                "pageSize": page_size or settings.NEWS_DEFAULT_PAGE_SIZE,
                "page": page,
                "language": settings.NEWS_LANGUAGE,
                "sortBy": sort_by,
                "apiKey": api_key,
            },
        )

        if data.get("status") == "error":
            logger.warning(f"News API error: {data.get('message')}")
            raise UpstreamError(data.get("message") or "Failed to fetch news", 400)

        return data

    async def validate_key(self, api_key: str) -> Tuple[bool, Optional[str]]:
        """Probe the key with a one-article headline request."""
        data = await self._get(
            "/top-headlines", {"country": "us", "pageSize": 1, "apiKey": api_key}
        )
        if data.get("status") == "ok":
            return True, None
        return False, data.get("message") or "Invalid API key"
