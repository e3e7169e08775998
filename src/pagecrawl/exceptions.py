"""Error types raised by the crawl-orchestration layer."""

from typing import Optional


class CrawlerError(Exception):
    """Base class for every error the crawler reports to its callers."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidUrlError(CrawlerError):
    """Raised when a user-supplied URL cannot be normalized."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid URL: {url}")


class UnsupportedOperationError(CrawlerError):
    """Raised when a page function outside the whitelist is requested."""

    def __init__(self, name: str, allowed: Optional[list[str]] = None):
        self.name = name
        self.allowed = allowed or []
        message = f"Unsupported function name: {name}"
        if self.allowed:
            message += f". Allowed: {', '.join(self.allowed)}"
        super().__init__(message)


class NoSelectorsError(CrawlerError):
    """Raised when an extraction needs at least one selector and got none."""

    def __init__(self, message: str = "At least one selector is required"):
        super().__init__(message)


class SessionError(CrawlerError):
    """Raised when the browser could not complete the work within the retry budget."""

    def __init__(self, attempts: int, cause: Optional[BaseException] = None):
        self.attempts = attempts
        self.cause = cause
        message = f"All {attempts} browser attempts failed"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class FetchError(CrawlerError):
    """Raised when a sitemap or robots.txt fetch fails."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: Optional[str] = None):
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            message = f"HTTP error {status_code} fetching {url}"
        else:
            message = f"Failed to fetch {url}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ParseError(CrawlerError):
    """Raised when a sitemap document is malformed."""

    def __init__(self, url: str, reason: str):
        self.url = url
        super().__init__(f"Failed to parse sitemap {url}: {reason}")


class NoSitemapFoundError(CrawlerError):
    """Raised when sitemap discovery yields no URLs at all."""

    def __init__(self, base_url: str):
        self.base_url = base_url
        super().__init__(f"No sitemap found for {base_url}")


class ConversionError(CrawlerError):
    """Raised when text-to-markdown conversion fails."""
