"""
Extraction operations against live, JavaScript-rendered pages.

Each public method runs its browser interaction inside one
``BrowserSessionManager.with_session`` call: open a page, navigate to the
target URL, wait for a settlement condition, then read page state.

    extractor = PageExtractor()
    page = await extractor.extract_rendered_page("https://example.com")
"""
import logging
from enum import Enum
from typing import Any, List, Optional, Sequence

from .browser_config import BrowserConfig
from .browser_session import BrowserSessionManager
from .constants import SETTLE_DOM_PARSED, SETTLE_NETWORK_IDLE, TEXT_BLOCK_SEPARATOR
from .exceptions import NoSelectorsError, UnsupportedOperationError
from .models import ElementSnapshot, RenderedPage, SelectorResult

logger = logging.getLogger(__name__)


# Runs in the page for every element matched by a selector
ELEMENT_SNAPSHOT_SCRIPT = """
    (els) => els.map(el => {
        const rect = el.getBoundingClientRect();
        const attrs = Array.from(el.attributes).map(attr => ({ name: attr.name, value: attr.value }));
        return {
            text: el.innerText || '',
            html: el.outerHTML || '',
            attributes: attrs,
            top: rect.top,
            left: rect.left,
            width: rect.width,
            height: rect.height
        };
    })
"""

ELEMENT_TEXT_SCRIPT = "(els) => els.map(el => el.innerText || '')"

DOCUMENT_HTML_SCRIPT = "() => document.documentElement.outerHTML"

BODY_TEXT_SCRIPT = "() => document.body ? document.body.innerText : ''"


def css_query(selector: str) -> str:
    """Pin a selector to Playwright's CSS engine (no XPath or text= shorthands)."""
    return f"css={selector}"


class PageFunction(Enum):
    """
    Closed set of read-only page operations callers may request by name.

    Names are resolved with ``from_name``; anything outside this enum is
    rejected, so no caller-supplied script ever reaches the page.
    """

    EXTRACT_TITLE = "extractTitle"
    EXTRACT_META = "extractMeta"

    @property
    def script(self) -> str:
        return _PAGE_FUNCTION_SCRIPTS[self]

    @classmethod
    def names(cls) -> List[str]:
        return [member.value for member in cls]

    @classmethod
    def from_name(cls, name: str) -> "PageFunction":
        """
        Look up a whitelisted function by its public name.

        Raises:
            UnsupportedOperationError: If the name is not whitelisted
        """
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedOperationError(str(name), allowed=cls.names()) from None


_PAGE_FUNCTION_SCRIPTS = {
    PageFunction.EXTRACT_TITLE: "() => document.title",
    PageFunction.EXTRACT_META: (
        "() => Array.from(document.querySelectorAll('meta'))"
        ".map(m => m.getAttribute('content')).filter(Boolean)"
    ),
}


class PageExtractor:
    """
    Playwright-backed extraction operations.

    Features:
    - Per-selector structured extraction with inline error reporting
    - Full rendered HTML and visible-text capture
    - Whitelisted in-page function execution
    - Concatenated text of several selectors for markdown conversion
    """

    def __init__(
        self,
        session_manager: Optional[BrowserSessionManager] = None,
        config: Optional[BrowserConfig] = None,
    ):
        """
        Initialize the extractor.

        Args:
            session_manager: Session manager to run work in (one is built
                from ``config`` when omitted)
            config: BrowserConfig used when building a session manager
        """
        self.session_manager = session_manager or BrowserSessionManager(config)

    @property
    def navigation_timeout(self) -> int:
        return self.session_manager.config.navigation_timeout

    async def _open(self, browser, url: str, wait_until: str):
        """Open a page and navigate it to ``url`` using the given settlement."""
        page = await browser.new_page()
        logger.info(f"Navigating to {url} (wait_until={wait_until})")
        await page.goto(url, wait_until=wait_until, timeout=self.navigation_timeout)
        return page

    async def extract_by_selectors(self, url: str, selectors: Sequence[str]) -> List[SelectorResult]:
        """
        Extract matching elements for each selector.

        A selector that matches nothing yields an empty result; a selector
        whose evaluation throws yields a result carrying the error. Either
        way the remaining selectors are still processed.

        Args:
            url: Page to load
            selectors: CSS selectors, evaluated in order

        Returns:
            One SelectorResult per selector, in input order
        """
        selectors = list(selectors)

        async def work(browser) -> List[SelectorResult]:
            page = await self._open(browser, url, SETTLE_DOM_PARSED)
            return [await self._evaluate_selector(page, selector) for selector in selectors]

        return await self.session_manager.with_session(work)

    async def _evaluate_selector(self, page, selector: str) -> SelectorResult:
        try:
            raw = await page.eval_on_selector_all(css_query(selector), ELEMENT_SNAPSHOT_SCRIPT)
        except Exception as e:
            logger.warning(f"Selector {selector!r} failed on {page.url}: {e}")
            return SelectorResult(selector=selector, error=str(e) or type(e).__name__)

        matches = [ElementSnapshot.from_dict(item) for item in raw or []]
        logger.debug(f"Selector {selector!r} matched {len(matches)} elements")
        return SelectorResult(selector=selector, matches=matches)

    async def extract_rendered_page(self, url: str) -> RenderedPage:
        """
        Capture the fully rendered document after network activity settles.

        Args:
            url: Page to load

        Returns:
            RenderedPage with serialized markup and body text
        """
        async def work(browser) -> RenderedPage:
            page = await self._open(browser, url, SETTLE_NETWORK_IDLE)
            html = await page.evaluate(DOCUMENT_HTML_SCRIPT)
            text = await page.evaluate(BODY_TEXT_SCRIPT)
            return RenderedPage(html=html or "", text=text or "")

        return await self.session_manager.with_session(work)

    async def execute_function(self, url: str, name: str, args: Sequence[Any] = ()) -> Any:
        """
        Run one whitelisted page function.

        Args:
            url: Page to load
            name: Public name of a PageFunction member
            args: Accepted for interface compatibility; current functions take none

        Returns:
            The value produced by the function in the page

        Raises:
            UnsupportedOperationError: If ``name`` is not whitelisted (raised
                before any browser is launched)
        """
        function = PageFunction.from_name(name)
        if args:
            logger.debug(f"Ignoring {len(args)} arguments for {function.value}")

        async def work(browser) -> Any:
            page = await self._open(browser, url, SETTLE_NETWORK_IDLE)
            return await page.evaluate(function.script)

        return await self.session_manager.with_session(work)

    async def extract_concatenated_text(self, url: str, selectors: Sequence[str]) -> str:
        """
        Join the text of every element matching any of the selectors.

        Args:
            url: Page to load
            selectors: CSS selectors, queried together in one pass

        Returns:
            Non-empty element texts separated by blank lines

        Raises:
            NoSelectorsError: If no non-blank selector was given
        """
        cleaned = [selector.strip() for selector in selectors if selector and selector.strip()]
        if not cleaned:
            raise NoSelectorsError()

        combined = ", ".join(cleaned)

        async def work(browser) -> str:
            page = await self._open(browser, url, SETTLE_NETWORK_IDLE)
            texts = await page.eval_on_selector_all(css_query(combined), ELEMENT_TEXT_SCRIPT)
            blocks = [text.strip() for text in texts or [] if text and text.strip()]
            return TEXT_BLOCK_SEPARATOR.join(blocks)

        return await self.session_manager.with_session(work)
