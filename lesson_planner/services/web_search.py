import logging
import time
from dataclasses import dataclass

import httpx

from lesson_planner.config import Settings, settings as default_settings
from lesson_planner.core.exceptions import LessonPipelineError

logger = logging.getLogger(__name__)


class WebSearchError(LessonPipelineError):
    """Search provider call failed or returned an unreadable body."""

    pass


@dataclass(frozen=True)
class SearchResult:
    title: str
    url: str
    content: str
    relevance_score: float


class WebSearchClient:
    """
    Serper (Google Search API) client.

    When no API key is configured, is_configured is False and callers are
    expected to skip search entirely.
    """

    def __init__(
        self,
        api_key: str | None = None,
        url: str | None = None,
        timeout: float | None = None,
        max_results: int | None = None,
        client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or default_settings
        self.api_key = api_key if api_key is not None else settings.serper_api_key
        self.url = url or settings.serper_url
        self.timeout = timeout or settings.search_timeout_seconds
        self.max_results = max_results or settings.search_results_per_query
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def search(self, query: str) -> list[SearchResult]:
        """
        Run one web search.

        Raises:
            WebSearchError: If the client is unconfigured or the provider call fails
        """
        if not self.is_configured:
            raise WebSearchError("SERPER_API_KEY is not configured")

        start_time = time.time()
        logger.info(f"🔍 Searching via Serper for: {query}")

        try:
            response = await self._get_client().post(
                self.url,
                json={"q": query, "num": self.max_results},
                headers={"X-API-KEY": self.api_key, "Content-Type": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise WebSearchError(f"Serper HTTP error: {e.response.status_code}") from e
        except httpx.TimeoutException as e:
            raise WebSearchError(f"Serper request timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            raise WebSearchError(f"Serper request failed: {e}") from e
        except ValueError as e:
            raise WebSearchError("Serper returned a non-JSON body") from e

        organic = data.get("organic") or data.get("results") or []
        results = [
            SearchResult(
                title=item.get("title") or f"Search Result {idx + 1}",
                url=item.get("link") or item.get("url") or "",
                content=item.get("snippet") or item.get("description") or item.get("title") or "",
                relevance_score=max(0.1, 1.0 - idx * 0.1),
            )
            for idx, item in enumerate(organic[: self.max_results])
        ]

        duration = time.time() - start_time
        logger.info(f"✅ Found {len(results)} search results in {duration:.2f}s")
        return results
