"""Web page fetching with SSRF protection and failure tolerance."""
import asyncio
import logging
from urllib.parse import urljoin

import httpx

from vidyagiri.core.config import settings
from vidyagiri.core.security import validate_url

logger = logging.getLogger(__name__)

# Maximum number of redirects to follow
MAX_REDIRECTS = 10


def build_fetch_client() -> httpx.AsyncClient:
    """HTTP client configured for page fetches (timeout, browser-like headers)."""
    return httpx.AsyncClient(
        timeout=settings.fetch_timeout,
        follow_redirects=False,
        headers={"User-Agent": settings.fetch_user_agent},
    )


def _check_url(url: str) -> None:
    if settings.block_private_urls:
        validate_url(url)


async def _check_url_off_loop(url: str) -> None:
    """Run the blocking DNS-based check in a worker thread, bounded by the fetch timeout."""
    await asyncio.wait_for(asyncio.to_thread(_check_url, url), timeout=settings.fetch_timeout)


async def fetch_page(url: str, client: httpx.AsyncClient | None = None) -> str:
    """
    Fetch the raw HTML of a page.

    Redirects are followed manually so every hop is validated. One
    unreachable source must never abort a batch, so all failures (blocked
    URL, timeout, non-2xx status, network error) are logged and turn into an
    empty string.

    Args:
        url: The URL to fetch
        client: Optional shared client (one is created if not provided)

    Returns:
        Response body as text, or empty string on any failure
    """
    try:
        await _check_url_off_loop(url)
    except ValueError as e:
        logger.warning(f"Skipping {url}: URL validation failed: {e}")
        return ""
    except TimeoutError:
        logger.warning(f"Timed out resolving {url}")
        return ""

    try:
        if client is None:
            async with build_fetch_client() as own_client:
                return await _fetch_following_redirects(url, own_client)
        return await _fetch_following_redirects(url, client)
    except httpx.HTTPStatusError as e:
        logger.warning(f"Failed to fetch {url}: HTTP {e.response.status_code}")
    except httpx.TimeoutException:
        logger.warning(f"Timed out fetching {url}")
    except httpx.HTTPError as e:
        logger.warning(f"Error fetching {url}: {e}")
    except TimeoutError:
        logger.warning(f"Timed out resolving a redirect from {url}")
    except ValueError as e:
        logger.warning(f"Blocked fetch of {url}: {e}")
    return ""


async def _fetch_following_redirects(url: str, client: httpx.AsyncClient) -> str:
    current_url = url
    redirect_count = 0

    while True:
        response = await client.get(current_url)

        if response.is_redirect:
            redirect_count += 1
            if redirect_count > MAX_REDIRECTS:
                raise ValueError(f"Too many redirects (>{MAX_REDIRECTS})")

            location = response.headers.get("location")
            if not location:
                raise ValueError("Redirect without Location header")

            # Relative locations resolve against the current URL
            location = urljoin(current_url, location)
            await _check_url_off_loop(location)

            current_url = location
            continue

        response.raise_for_status()
        return response.text
