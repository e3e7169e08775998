"""
Sitemap discovery for a site.

Discovery runs three independent steps and unions what they find:

1. robots.txt ``Sitemap:`` directives
2. the well-known ``/sitemap.xml`` and ``/sitemap_index.xml`` locations
3. order-preserving deduplication of every URL collected

A failure in any one step is logged and does not stop the others.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Union
from urllib.parse import urljoin, urlsplit

import httpx

from .constants import COMMON_SITEMAP_PATHS, OTHER_GROUP_LABEL
from .exceptions import CrawlerError, NoSitemapFoundError
from .models import DiscoveredUrlSet, UrlGroup
from .sitemap_parser import SitemapParser, build_client, fetch_text
from .url_utils import NormalizedUrl, normalize_url

logger = logging.getLogger(__name__)


def extract_sitemap_directives(robots_content: str) -> List[str]:
    """
    Collect the values of ``Sitemap:`` lines in robots.txt content.

    Args:
        robots_content: Raw robots.txt text

    Returns:
        Referenced sitemap locations, in file order
    """
    references = []
    for line in robots_content.splitlines():
        stripped = line.strip()
        if not stripped.lower().startswith('sitemap:'):
            continue
        value = stripped.split(':', 1)[1].strip()
        if value:
            references.append(value)
    return references


def deduplicate(urls: Iterable[str]) -> List[str]:
    """Remove duplicate URLs while preserving first-seen order."""
    return list(dict.fromkeys(urls))


class SitemapDiscoverer:
    """
    Find and enumerate the sitemaps of a site.

    Usage:
        async with httpx.AsyncClient() as client:
            found = await SitemapDiscoverer(client).discover(normalize_url("n8n.io"))
    """

    def __init__(self, client: httpx.AsyncClient, common_paths: Optional[Sequence[str]] = None):
        """
        Initialize the discoverer.

        Args:
            client: HTTP client used for robots.txt and sitemap fetches
            common_paths: Well-known sitemap paths to probe
        """
        self.client = client
        self.parser = SitemapParser(client)
        self.common_paths = list(common_paths) if common_paths is not None else list(COMMON_SITEMAP_PATHS)

    async def discover(self, base_url: NormalizedUrl) -> DiscoveredUrlSet:
        """
        Run the discovery protocol for a site.

        Args:
            base_url: Normalized site URL

        Returns:
            DiscoveredUrlSet with every unique URL, first-seen order

        Raises:
            NoSitemapFoundError: If no source yielded any URL
        """
        base = str(base_url)
        logger.info(f"Starting sitemap discovery for: {base}")

        collected: List[str] = []
        sources: List[str] = []

        for sitemap_url in await self._sitemaps_from_robots(base):
            urls = await self._try_parse(sitemap_url)
            if urls:
                collected.extend(urls)
                sources.append(sitemap_url)

        for path in self.common_paths:
            sitemap_url = base_url.join(path)
            logger.debug(f"Trying common path: {sitemap_url}")
            urls = await self._try_parse(sitemap_url)
            if urls:
                collected.extend(urls)
                sources.append(sitemap_url)

        if not collected:
            logger.warning(f"No sitemap found for {base}")
            raise NoSitemapFoundError(base)

        unique = deduplicate(collected)
        logger.info(f"Discovered {len(unique)} unique URLs for {base} from {len(sources)} sitemaps")
        return DiscoveredUrlSet(base_url=base, urls=unique, sources=deduplicate(sources))

    async def _sitemaps_from_robots(self, base: str) -> List[str]:
        robots_url = f"{base}/robots.txt"
        logger.debug(f"Checking robots.txt at: {robots_url}")
        try:
            content = await fetch_text(self.client, robots_url)
        except CrawlerError as e:
            logger.info(f"Could not fetch robots.txt: {e}")
            return []

        references = [urljoin(f"{base}/", ref) for ref in extract_sitemap_directives(content)]
        for ref in references:
            logger.info(f"Found sitemap reference in robots.txt: {ref}")
        return references

    async def _try_parse(self, sitemap_url: str) -> List[str]:
        try:
            return await self.parser.parse(sitemap_url)
        except CrawlerError as e:
            logger.warning(f"Skipping sitemap {sitemap_url}: {e}")
            return []


async def discover_sitemap_urls(
    url: Union[str, NormalizedUrl],
    client: Optional[httpx.AsyncClient] = None,
) -> DiscoveredUrlSet:
    """
    Convenience function to discover a site's sitemap URLs.

    Args:
        url: Raw or normalized site URL
        client: Optional HTTP client (a temporary one is created otherwise)

    Returns:
        DiscoveredUrlSet for the site
    """
    base_url = url if isinstance(url, NormalizedUrl) else normalize_url(url)
    if client is not None:
        return await SitemapDiscoverer(client).discover(base_url)

    async with build_client() as own_client:
        return await SitemapDiscoverer(own_client).discover(base_url)


def _path_of(url: str) -> str:
    parts = urlsplit(url)
    if parts.scheme or parts.netloc:
        return parts.path
    return url


def group_urls(urls: Iterable[str], filters: Sequence[str]) -> List[UrlGroup]:
    """
    Partition URLs by path segment.

    Each filter gets a group with every URL whose lowercased path contains
    ``/{filter}/``; a URL may land in several groups. A final ``"other"``
    group holds the URLs no filter matched.

    Args:
        urls: URLs to partition
        filters: Path segments, in output order

    Returns:
        One UrlGroup per filter followed by the "other" group
    """
    url_list = list(urls)
    paths = [_path_of(url).lower() for url in url_list]
    matched = [False] * len(url_list)
    groups = []

    for label in filters:
        segment = label.strip()
        if not segment:
            continue
        needle = f"/{segment.lower()}/"
        members = []
        for index, path in enumerate(paths):
            if needle in path:
                members.append(url_list[index])
                matched[index] = True
        groups.append(UrlGroup(label=segment, urls=members))

    others = [url for url, hit in zip(url_list, matched) if not hit]
    groups.append(UrlGroup(label=OTHER_GROUP_LABEL, urls=others))
    return groups
