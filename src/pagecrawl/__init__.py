"""On-demand page extraction and sitemap discovery backed by a headless browser."""

__version__ = "0.1.0"

from pagecrawl.browser_config import BrowserConfig, DEFAULT_CONFIG
from pagecrawl.browser_session import BrowserSession, BrowserSessionManager, with_session
from pagecrawl.page_extractor import PageExtractor, PageFunction
from pagecrawl.sitemap_parser import SitemapParser, parse_sitemap
from pagecrawl.sitemap_discovery import (
    SitemapDiscoverer,
    discover_sitemap_urls,
    group_urls,
)
from pagecrawl.url_utils import NormalizedUrl, normalize_url
from pagecrawl.markdown import MarkdownConverter
from pagecrawl.models import (
    ElementSnapshot,
    SelectorResult,
    RenderedPage,
    DiscoveredUrlSet,
    UrlGroup,
)
from pagecrawl.exceptions import (
    CrawlerError,
    InvalidUrlError,
    UnsupportedOperationError,
    NoSelectorsError,
    SessionError,
    FetchError,
    ParseError,
    NoSitemapFoundError,
    ConversionError,
)
from pagecrawl.config import settings

__all__ = [
    # Browser
    "BrowserConfig",
    "DEFAULT_CONFIG",
    "BrowserSession",
    "BrowserSessionManager",
    "with_session",
    # Extraction
    "PageExtractor",
    "PageFunction",
    "MarkdownConverter",
    # Sitemaps
    "SitemapParser",
    "parse_sitemap",
    "SitemapDiscoverer",
    "discover_sitemap_urls",
    "group_urls",
    "NormalizedUrl",
    "normalize_url",
    # Models
    "ElementSnapshot",
    "SelectorResult",
    "RenderedPage",
    "DiscoveredUrlSet",
    "UrlGroup",
    # Errors
    "CrawlerError",
    "InvalidUrlError",
    "UnsupportedOperationError",
    "NoSelectorsError",
    "SessionError",
    "FetchError",
    "ParseError",
    "NoSitemapFoundError",
    "ConversionError",
    "settings",
]
