"""Tests for web search providers."""
import json

import httpx
import pytest
import respx
from unittest.mock import MagicMock, patch

from vidyagiri.services.search import (
    SearchProviderError,
    SerperSearch,
    TavilySearch,
    get_search_client,
    normalize_hits,
)
from vidyagiri.services.search.serper import SERPER_SEARCH_URL


def test_normalize_hits_filters_excluded_and_missing_links():
    """Test provider results are cleaned up before use."""
    items = [
        {"title": "Mitosis", "link": "https://example.com/mitosis", "snippet": "Cell division"},
        {"title": "Google page", "link": "https://www.google.com/search?q=x", "snippet": "x"},
        {"title": "No link", "snippet": "Dropped"},
        {"link": "https://bio.example.org/cells"},
    ]

    hits = normalize_hits(items, excluded_domains=["google.com"])

    assert [hit.link for hit in hits] == [
        "https://example.com/mitosis",
        "https://bio.example.org/cells",
    ]
    assert hits[1].title == ""
    assert hits[1].snippet == ""


def test_normalize_hits_does_not_match_partial_domains():
    """Test that a domain suffix only matches whole labels."""
    hits = normalize_hits(
        [{"title": "A", "link": "https://notgoogle.com/page"}],
        excluded_domains=["google.com"],
    )

    assert len(hits) == 1


@pytest.mark.asyncio
@respx.mock
async def test_serper_search_returns_hits():
    """Test Serper results are mapped to SearchHits."""
    route = respx.post(SERPER_SEARCH_URL).mock(
        return_value=httpx.Response(200, json={
            "organic": [
                {"title": "Mitosis - Wikipedia", "link": "https://en.wikipedia.org/wiki/Mitosis",
                 "snippet": "Mitosis is a part of the cell cycle."},
                {"title": "Google", "link": "https://google.com/about", "snippet": "skip"},
                {"title": "Khan Academy", "link": "https://www.khanacademy.org/mitosis",
                 "snippet": "Phases of mitosis."},
            ]
        })
    )

    client = SerperSearch(api_key="test-key", excluded_domains=["google.com"])
    hits = await client.search("mitosis", count=4)

    assert [hit.title for hit in hits] == ["Mitosis - Wikipedia", "Khan Academy"]
    assert hits[0].snippet == "Mitosis is a part of the cell cycle."

    request = route.calls.last.request
    assert request.headers["X-API-KEY"] == "test-key"
    assert json.loads(request.content) == {"q": "mitosis", "num": 4}


@pytest.mark.asyncio
@respx.mock
async def test_serper_search_without_organic_results():
    """Test a response with no organic section yields no hits."""
    respx.post(SERPER_SEARCH_URL).mock(return_value=httpx.Response(200, json={}))

    hits = await SerperSearch(api_key="test-key").search("nothing")

    assert hits == []


@pytest.mark.asyncio
@respx.mock
async def test_serper_search_error_status():
    """Test non-2xx status raises SearchProviderError with the status."""
    respx.post(SERPER_SEARCH_URL).mock(return_value=httpx.Response(403, json={"message": "bad key"}))

    with pytest.raises(SearchProviderError) as exc_info:
        await SerperSearch(api_key="test-key").search("mitosis")

    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
@respx.mock
async def test_serper_search_transport_error():
    """Test network failures are wrapped in SearchProviderError."""
    respx.post(SERPER_SEARCH_URL).mock(side_effect=httpx.ConnectError("Connection refused"))

    with pytest.raises(SearchProviderError) as exc_info:
        await SerperSearch(api_key="test-key").search("mitosis")

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
@respx.mock
async def test_serper_search_non_json_body():
    """Test a 200 response that is not JSON raises SearchProviderError."""
    respx.post(SERPER_SEARCH_URL).mock(return_value=httpx.Response(200, text="<html>maintenance</html>"))

    with pytest.raises(SearchProviderError, match="invalid JSON"):
        await SerperSearch(api_key="test-key").search("mitosis")


@pytest.mark.asyncio
@respx.mock
@pytest.mark.parametrize("body", [[{"organic": []}], {"organic": {"title": "Mitosis"}}, "organic"])
async def test_serper_search_unexpected_shape(body):
    """Test JSON that is not an object with an organic list raises SearchProviderError."""
    respx.post(SERPER_SEARCH_URL).mock(return_value=httpx.Response(200, json=body))

    with pytest.raises(SearchProviderError, match="unexpected response shape"):
        await SerperSearch(api_key="test-key").search("mitosis")


@pytest.mark.asyncio
@respx.mock
async def test_serper_search_skips_non_object_results():
    respx.post(SERPER_SEARCH_URL).mock(return_value=httpx.Response(200, json={
        "organic": ["stray", {"title": "Mitosis", "link": "https://example.com/mitosis"}]
    }))

    hits = await SerperSearch(api_key="test-key").search("mitosis")

    assert [hit.link for hit in hits] == ["https://example.com/mitosis"]


@pytest.mark.asyncio
async def test_serper_search_requires_api_key():
    """Test Serper client raises when no API key."""
    with patch("vidyagiri.services.search.serper.settings") as mock_settings:
        mock_settings.serper_api_key = None
        mock_settings.search_timeout = None
        mock_settings.search_excluded_domains = []

        with pytest.raises(SearchProviderError, match="Serper API key not configured"):
            await SerperSearch(api_key=None).search("mitosis")


@pytest.mark.asyncio
async def test_tavily_search_returns_hits():
    """Test Tavily results are mapped to SearchHits."""
    mock_response = {
        "results": [
            {"title": "Result 1", "url": "https://example.com/1", "content": "Content 1", "score": 0.9},
            {"title": "Result 2", "url": "https://example.com/2", "content": "Content 2", "score": 0.8},
        ]
    }

    with patch("vidyagiri.services.search.tavily.TavilyClient") as MockClient:
        mock_instance = MockClient.return_value
        mock_instance.search = MagicMock(return_value=mock_response)

        service = TavilySearch(api_key="test-key", excluded_domains=[])
        hits = await service.search("test query", count=4)

        assert [hit.link for hit in hits] == ["https://example.com/1", "https://example.com/2"]
        assert hits[0].snippet == "Content 1"
        mock_instance.search.assert_called_once_with(
            query="test query", max_results=4, search_depth="basic"
        )


@pytest.mark.asyncio
async def test_tavily_search_wraps_errors():
    """Test Tavily client failures raise SearchProviderError."""
    with patch("vidyagiri.services.search.tavily.TavilyClient") as MockClient:
        MockClient.return_value.search = MagicMock(side_effect=RuntimeError("rate limited"))

        with pytest.raises(SearchProviderError, match="rate limited"):
            await TavilySearch(api_key="test-key").search("test query")


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [None, ["result"], {"results": "none"}])
async def test_tavily_search_unexpected_shape(response):
    """Test a malformed Tavily response raises SearchProviderError."""
    with patch("vidyagiri.services.search.tavily.TavilyClient") as MockClient:
        MockClient.return_value.search = MagicMock(return_value=response)

        with pytest.raises(SearchProviderError, match="unexpected response shape"):
            await TavilySearch(api_key="test-key").search("test query")


@pytest.mark.asyncio
async def test_tavily_search_requires_api_key():
    """Test Tavily client raises when no API key."""
    with patch("vidyagiri.services.search.tavily.settings") as mock_settings:
        mock_settings.tavily_api_key = None
        mock_settings.search_excluded_domains = []

        with pytest.raises(SearchProviderError, match="Tavily API key not configured"):
            await TavilySearch(api_key=None).search("test query")


def test_get_search_client_by_name():
    """Test provider names map to clients."""
    assert isinstance(get_search_client("serper"), SerperSearch)
    assert isinstance(get_search_client("Tavily"), TavilySearch)


def test_get_search_client_unknown_provider():
    with pytest.raises(ValueError, match="Unknown search provider"):
        get_search_client("bing")
