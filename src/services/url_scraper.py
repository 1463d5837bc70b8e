"""URL scraping service for fetching and extracting metadata from web pages."""
import asyncio
import ipaddress
import logging
import socket
from dataclasses import dataclass
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from services.utils import extract_domain

logger = logging.getLogger(__name__)

USER_AGENT = 'Mozilla/5.0 (compatible; BookmarkBot/1.0)'
DEFAULT_TIMEOUT = 10.0
INVALID_URL_TITLE = 'Invalid URL'


class SSRFBlockedError(Exception):
    """Raised when a URL targets a private/internal network address."""


def is_private_ip(ip_str: str) -> bool:
    """
    Check if an IP address is private, loopback, or otherwise internal.

    Args:
        ip_str: IP address string (IPv4 or IPv6).

    Returns:
        True if the IP is private/internal, False if public.
    """
    try:
        ip = ipaddress.ip_address(ip_str)
    except ValueError:
        # Unparseable addresses are treated as internal
        return True
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_multicast
        or ip.is_reserved
        or ip.is_unspecified
    )


async def validate_url_not_private(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,  # noqa: ASYNC109
) -> None:
    """
    Validate that a URL does not target a private/internal network.

    The hostname is resolved on the event loop's resolver (off the loop thread)
    and every address it maps to is checked, so a public-looking name that
    points at an internal address is refused too.

    Args:
        url: The URL to validate.
        timeout: Upper bound in seconds for the hostname lookup.

    Raises:
        SSRFBlockedError: If the URL targets a private network.
        ValueError: If the URL is malformed or the host does not resolve in time.
    """
    hostname = urlparse(url).hostname

    if not hostname:
        raise ValueError(f"Invalid URL (no hostname): {url}")

    if hostname.lower() in ('localhost', 'localhost.localdomain'):
        raise SSRFBlockedError(f"Blocked request to localhost: {url}")

    loop = asyncio.get_running_loop()
    try:
        addrinfo = await asyncio.wait_for(
            loop.getaddrinfo(hostname, None, family=socket.AF_UNSPEC, type=socket.SOCK_STREAM),
            timeout,
        )
    except TimeoutError as e:
        raise ValueError(f"Timed out resolving hostname: {hostname}") from e
    except socket.gaierror as e:
        raise ValueError(f"Could not resolve hostname: {hostname}") from e

    # sockaddr is (ip, port) for IPv4 or (ip, port, flow, scope) for IPv6
    for _, _, _, _, sockaddr in addrinfo:
        ip_str = sockaddr[0]
        if is_private_ip(ip_str):
            raise SSRFBlockedError(
                f"Blocked request to private/internal address: {url} resolves to {ip_str}",
            )


@dataclass
class FetchResult:
    """Result of fetching a URL."""

    html: str | None
    final_url: str
    status_code: int | None
    content_type: str | None
    error: str | None


@dataclass
class ExtractedMetadata:
    """Metadata found in an HTML document. Missing values are None."""

    title: str | None
    description: str | None
    image_url: str | None


@dataclass
class UrlMetadata:
    """Best-effort metadata for a URL. Always usable: title is never empty."""

    title: str
    description: str
    image_url: str


async def fetch_url(  # noqa: PLR0911
    url: str,
    timeout: float = DEFAULT_TIMEOUT,  # noqa: ASYNC109
    user_agent: str = USER_AGENT,
    block_private: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FetchResult:
    """
    Fetch raw HTML from a URL.

    Best-effort fetch that returns error info on failure rather than raising.
    Follows redirects and captures the final URL.

    Args:
        url:
            The URL to fetch.
        timeout:
            Request timeout in seconds.
        user_agent:
            Value of the User-Agent header identifying this client.
        block_private:
            Refuse URLs that resolve to private or internal addresses. Each
            redirect target is checked before it is requested.
        transport:
            Optional httpx transport, used by tests to avoid real network calls.

    Returns:
        FetchResult containing HTML content or error information.
    """
    async def refuse_private_hop(request: httpx.Request) -> None:
        await validate_url_not_private(str(request.url), timeout)

    event_hooks = {'request': [refuse_private_hop]} if block_private else {}

    try:
        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=timeout,
            headers={'User-Agent': user_agent},
            http2=True,
            transport=transport,
            event_hooks=event_hooks,
        ) as client:
            response = await client.get(url)
            final_url = str(response.url)
            content_type = response.headers.get('content-type', '')

            if not response.is_success:
                return FetchResult(
                    html=None,
                    final_url=final_url,
                    status_code=response.status_code,
                    content_type=content_type,
                    error=f"HTTP {response.status_code}",
                )

            if 'text/html' not in content_type.lower():
                return FetchResult(
                    html=None,
                    final_url=final_url,
                    status_code=response.status_code,
                    content_type=content_type,
                    error=f"Non-HTML content type: {content_type}",
                )

            return FetchResult(
                html=response.text,
                final_url=final_url,
                status_code=response.status_code,
                content_type=content_type,
                error=None,
            )
    except (SSRFBlockedError, ValueError) as e:
        return FetchResult(
            html=None,
            final_url=url,
            status_code=None,
            content_type=None,
            error=str(e),
        )
    except httpx.TimeoutException:
        return FetchResult(
            html=None,
            final_url=url,
            status_code=None,
            content_type=None,
            error="Request timed out",
        )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        return FetchResult(
            html=None,
            final_url=url,
            status_code=None,
            content_type=None,
            error=f"Request failed: {e}",
        )


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str | None:
    tag = soup.find('meta', attrs=attrs)
    if tag is None:
        return None
    content = tag.get('content')
    if not content or not content.strip():
        return None
    return content.strip()


def extract_metadata(html: str) -> ExtractedMetadata:
    """
    Extract title, description and preview image from HTML.

    Pure function with no I/O. Uses BeautifulSoup for tolerant parsing.

    Title: the first <title> element.

    Description extraction priority:
    1. <meta name="description">
    2. <meta property="og:description">

    Image extraction priority:
    1. <meta property="og:image">
    2. <meta name="twitter:image">

    Args:
        html:
            Raw HTML string to parse.

    Returns:
        ExtractedMetadata with fields set to None where nothing was found.
        The image URL is returned as written in the page (may be relative).
    """
    soup = BeautifulSoup(html, 'lxml')

    title = None
    title_tag = soup.find('title')
    if title_tag:
        title = title_tag.get_text().strip() or None

    description = (
        _meta_content(soup, name='description')
        or _meta_content(soup, property='og:description')
    )
    image_url = (
        _meta_content(soup, property='og:image')
        or _meta_content(soup, name='twitter:image')
    )

    return ExtractedMetadata(title=title, description=description, image_url=image_url)


def resolve_image_url(image_url: str, page_url: str) -> str:
    """Resolve a possibly relative image URL against the page it was found on."""
    if urlparse(image_url).scheme in ('http', 'https'):
        return image_url
    return urljoin(page_url, image_url)


def fallback_metadata(url: str) -> UrlMetadata:
    """Metadata used when the page cannot be fetched or parsed."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None
    return UrlMetadata(title=hostname or INVALID_URL_TITLE, description='', image_url='')


async def fetch_url_metadata(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,  # noqa: ASYNC109
    user_agent: str = USER_AGENT,
    block_private: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> UrlMetadata:
    """
    Fetch a page and return its title, description and preview image.

    Never raises. Malformed URLs, network failures, non-2xx responses and
    non-HTML content all fall back to the URL's hostname as title with empty
    description and image.

    Args:
        url:
            The page URL (must be http or https).
        timeout:
            Request timeout in seconds.
        user_agent:
            User-Agent header sent with the request.
        block_private:
            Refuse URLs that resolve to private or internal addresses.
        transport:
            Optional httpx transport (tests).

    Returns:
        UrlMetadata with a non-empty title.
    """
    if extract_domain(url) is None:
        logger.warning("Metadata fetch skipped, invalid URL", extra={"url": url})
        return fallback_metadata(url)

    result = await fetch_url(
        url,
        timeout=timeout,
        user_agent=user_agent,
        block_private=block_private,
        transport=transport,
    )
    if result.html is None:
        logger.warning(
            "Metadata fetch failed",
            extra={"url": url, "error": result.error, "status_code": result.status_code},
        )
        return fallback_metadata(url)

    fallback = fallback_metadata(url)
    try:
        metadata = extract_metadata(result.html)
    except Exception:
        logger.exception("Metadata extraction failed", extra={"url": url})
        return fallback

    image_url = ''
    if metadata.image_url:
        image_url = resolve_image_url(metadata.image_url, result.final_url)

    return UrlMetadata(
        title=metadata.title or fallback.title,
        description=metadata.description or '',
        image_url=image_url,
    )
