"""Sitemap fetching and parsing (XML and plain-text sitemaps)."""

import logging
from typing import List, Optional, Union
from urllib.parse import urlsplit
from xml.etree import ElementTree as ET

import httpx

from .config import settings
from .constants import DEFAULT_FETCH_TIMEOUT_SECONDS
from .exceptions import FetchError, ParseError

logger = logging.getLogger(__name__)


def build_client(timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS) -> httpx.AsyncClient:
    """Create the HTTP client used for robots.txt and sitemap requests."""
    return httpx.AsyncClient(
        headers={
            "User-Agent": settings.USER_AGENT,
            "Accept": "application/xml, text/xml, text/plain, */*",
        },
        timeout=timeout,
        follow_redirects=True,
    )


async def fetch_document(client: httpx.AsyncClient, url: str) -> httpx.Response:
    """
    GET a document and return the successful response.

    Raises:
        FetchError: On a transport failure or a non-2xx response
    """
    try:
        response = await client.get(url)
    except httpx.HTTPError as e:
        raise FetchError(url, reason=str(e) or type(e).__name__) from e

    if not response.is_success:
        raise FetchError(url, status_code=response.status_code)

    return response


async def fetch_text(client: httpx.AsyncClient, url: str) -> str:
    """GET a document and return its decoded body."""
    response = await fetch_document(client, url)
    return response.text


def _local_name(tag: str) -> str:
    return tag.split('}')[-1] if '}' in tag else tag


class SitemapParser:
    """
    Parse a single sitemap document into a flat list of URLs.

    Supports:
    - XML sitemaps (``<urlset><url><loc>``), any namespace
    - Plain-text sitemaps with one URL per line

    Sitemap index files are not expanded: the child sitemap locations are
    returned as a flat list of URLs and are not fetched.
    """

    def __init__(self, client: httpx.AsyncClient):
        """
        Initialize the sitemap parser.

        Args:
            client: HTTP client used to fetch documents
        """
        self.client = client

    async def parse(self, sitemap_url: str) -> List[str]:
        """
        Fetch and parse a sitemap.

        Args:
            sitemap_url: URL of the sitemap

        Returns:
            URLs in document order

        Raises:
            FetchError: If the sitemap could not be retrieved
            ParseError: If the content is malformed
        """
        logger.info(f"Fetching sitemap: {sitemap_url}")
        response = await fetch_document(self.client, sitemap_url)

        if urlsplit(sitemap_url).path.lower().endswith('.xml'):
            # Raw bytes so the XML declaration decides the charset
            urls = self.parse_xml(response.content, sitemap_url)
        else:
            urls = self.parse_text(response.text)

        logger.info(f"Extracted {len(urls)} URLs from {sitemap_url}")
        return urls

    @staticmethod
    def parse_xml(content: Union[bytes, str], sitemap_url: str = "") -> List[str]:
        """Extract every ``<loc>`` value from sitemap XML, in document order."""
        try:
            root = ET.fromstring(content.strip())
        except ET.ParseError as e:
            raise ParseError(sitemap_url, str(e)) from e

        root_tag = _local_name(root.tag)
        if root_tag == 'sitemapindex':
            entry_tag = 'sitemap'
            logger.info(f"{sitemap_url} is a sitemap index; child sitemaps are not expanded")
        elif root_tag == 'urlset':
            entry_tag = 'url'
        else:
            logger.warning(f"Unknown sitemap root element: {root_tag}")
            return []

        urls = []
        for url_elem in root:
            if _local_name(url_elem.tag) != entry_tag:
                continue
            for child in url_elem:
                if _local_name(child.tag) == 'loc' and child.text and child.text.strip():
                    urls.append(child.text.strip())
                    break
        return urls

    @staticmethod
    def parse_text(content: str) -> List[str]:
        """Split a plain-text sitemap into trimmed, non-empty lines."""
        return [line.strip() for line in content.splitlines() if line.strip()]


async def parse_sitemap(sitemap_url: str, client: Optional[httpx.AsyncClient] = None) -> List[str]:
    """
    Convenience function to parse a sitemap.

    Args:
        sitemap_url: URL of the sitemap
        client: Optional HTTP client (a temporary one is created otherwise)

    Returns:
        List of URLs from the sitemap
    """
    if client is not None:
        return await SitemapParser(client).parse(sitemap_url)

    async with build_client() as own_client:
        return await SitemapParser(own_client).parse(sitemap_url)
