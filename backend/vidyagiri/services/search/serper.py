"""Serper (Google results) web search client."""
import httpx

from vidyagiri.core.config import settings
from vidyagiri.schemas.evidence import SearchHit
from vidyagiri.services.search.base import SearchProviderError, normalize_hits

SERPER_SEARCH_URL = "https://google.serper.dev/search"


class SerperSearch:
    """Web search via the Serper API."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        excluded_domains: list[str] | None = None,
    ):
        """
        Initialize Serper client.

        Args:
            api_key: Serper API key (falls back to settings)
            timeout: Request timeout in seconds (falls back to settings, then httpx default)
            excluded_domains: Domains filtered out of results (falls back to settings)
        """
        self.api_key = api_key or settings.serper_api_key
        self.timeout = timeout if timeout is not None else settings.search_timeout
        self.excluded_domains = (
            excluded_domains if excluded_domains is not None else settings.search_excluded_domains
        )

    async def search(self, query: str, count: int = 10) -> list[SearchHit]:
        """
        Search the web.

        Args:
            query: Search query
            count: Number of results to request

        Returns:
            Normalized, filtered search hits

        Raises:
            SearchProviderError: On missing key, transport failure or non-2xx status
        """
        if not self.api_key:
            raise SearchProviderError("Serper API key not configured")

        client_kwargs = {"timeout": self.timeout} if self.timeout is not None else {}
        try:
            async with httpx.AsyncClient(**client_kwargs) as client:
                response = await client.post(
                    SERPER_SEARCH_URL,
                    headers={"X-API-KEY": self.api_key, "Content-Type": "application/json"},
                    json={"q": query, "num": count},
                )
        except httpx.HTTPError as e:
            raise SearchProviderError(f"Serper request failed: {e}") from e

        if not response.is_success:
            raise SearchProviderError(
                f"Serper API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SearchProviderError(f"Serper returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise SearchProviderError("Serper returned an unexpected response shape")
        organic = data.get("organic") or []
        if not isinstance(organic, list):
            raise SearchProviderError("Serper returned an unexpected response shape")

        return normalize_hits(
            [item for item in organic if isinstance(item, dict)], self.excluded_domains
        )
