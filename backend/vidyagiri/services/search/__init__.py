"""Web search providers."""
from vidyagiri.core.config import settings
from vidyagiri.services.search.base import SearchClient, SearchProviderError, normalize_hits
from vidyagiri.services.search.serper import SerperSearch
from vidyagiri.services.search.tavily import TavilySearch


def get_search_client(provider: str | None = None) -> SearchClient:
    """Build the search client named by `provider` (defaults to settings)."""
    provider = (provider or settings.search_provider).lower()
    if provider == "serper":
        return SerperSearch()
    if provider == "tavily":
        return TavilySearch()
    raise ValueError(f"Unknown search provider: {provider}")


__all__ = [
    "SearchClient",
    "SearchProviderError",
    "SerperSearch",
    "TavilySearch",
    "get_search_client",
    "normalize_hits",
]
