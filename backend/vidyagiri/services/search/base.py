"""Search provider contract and result normalization."""
from typing import Any, Iterable, Protocol
from urllib.parse import urlparse

from vidyagiri.schemas.evidence import SearchHit


class SearchProviderError(Exception):
    """Raised when a search provider call fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SearchClient(Protocol):
    async def search(self, query: str, count: int) -> list[SearchHit]:
        ...


def is_excluded(link: str, excluded_domains: Iterable[str]) -> bool:
    """True if the link's host is one of the domains or a subdomain of one."""
    host = (urlparse(link).hostname or "").lower()
    for domain in excluded_domains:
        domain = domain.lower()
        if host == domain or host.endswith(f".{domain}"):
            return True
    return False


def normalize_hits(
    items: Iterable[dict[str, Any]],
    excluded_domains: Iterable[str] = (),
    link_key: str = "link",
    snippet_key: str = "snippet",
) -> list[SearchHit]:
    """
    Convert raw provider results into SearchHits.

    Results without a link, or pointing at an excluded domain (such as the
    provider's own pages), are dropped.

    Args:
        items: Raw result dicts from the provider
        excluded_domains: Domains whose links are discarded
        link_key: Key holding the result URL
        snippet_key: Key holding the result summary

    Returns:
        List of SearchHit in provider order
    """
    excluded = list(excluded_domains)
    hits = []
    for item in items:
        link = item.get(link_key)
        if not link or is_excluded(link, excluded):
            continue
        hits.append(SearchHit(
            title=item.get("title") or "",
            link=link,
            snippet=item.get(snippet_key) or "",
        ))
    return hits
