"""Tavily web search service."""
import asyncio

from tavily import TavilyClient

from vidyagiri.core.config import settings
from vidyagiri.schemas.evidence import SearchHit
from vidyagiri.services.search.base import SearchProviderError, normalize_hits


class TavilySearch:
    """Service for web search via Tavily API."""

    def __init__(self, api_key: str | None = None, excluded_domains: list[str] | None = None):
        """
        Initialize Tavily service.

        Args:
            api_key: Tavily API key (falls back to settings)
            excluded_domains: Domains filtered out of results (falls back to settings)
        """
        self.api_key = api_key or settings.tavily_api_key
        self.excluded_domains = (
            excluded_domains if excluded_domains is not None else settings.search_excluded_domains
        )
        self._client: TavilyClient | None = None

    @property
    def client(self) -> TavilyClient:
        """Lazy-load Tavily client."""
        if not self._client:
            self._client = TavilyClient(api_key=self.api_key)
        return self._client

    async def search(
        self,
        query: str,
        count: int = 5,
        search_depth: str = "basic",
    ) -> list[SearchHit]:
        """
        Search the web using Tavily.

        Args:
            query: Search query
            count: Maximum results to return
            search_depth: "basic" or "advanced"

        Returns:
            Normalized, filtered search hits

        Raises:
            SearchProviderError: On missing key or any provider failure
        """
        if not self.api_key:
            raise SearchProviderError("Tavily API key not configured")

        # Tavily client is sync; keep it off the event loop
        try:
            response = await asyncio.to_thread(
                self.client.search,
                query=query,
                max_results=count,
                search_depth=search_depth,
            )
        except Exception as e:
            raise SearchProviderError(f"Tavily search failed: {e}") from e

        results = (response.get("results") or []) if isinstance(response, dict) else None
        if not isinstance(results, list):
            raise SearchProviderError("Tavily returned an unexpected response shape")

        return normalize_hits(
            [item for item in results if isinstance(item, dict)],
            self.excluded_domains,
            link_key="url",
            snippet_key="content",
        )
