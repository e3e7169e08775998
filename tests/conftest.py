"""Shared fakes for browser and HTTP tests."""

from typing import Callable, Dict, Optional, Union
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from pagecrawl.browser_config import BrowserConfig


class FakePlaywright:
    """Stand-in for ``async_playwright`` that records every launch and close."""

    def __init__(self, fail_launches: int = 0, close_error: Optional[Exception] = None,
                 browser_factory: Optional[Callable[[], MagicMock]] = None):
        self.fail_launches = fail_launches
        self.close_error = close_error
        self.browser_factory = browser_factory
        self.launch_calls = 0
        self.launch_options = []
        self.browsers = []
        self.drivers = []

    def __call__(self):
        driver = MagicMock()
        driver.stop = AsyncMock()
        driver.chromium.launch = AsyncMock(side_effect=self._launch)
        self.drivers.append(driver)

        starter = MagicMock()
        starter.start = AsyncMock(return_value=driver)
        return starter

    async def _launch(self, **options):
        self.launch_calls += 1
        self.launch_options.append(options)
        if self.launch_calls <= self.fail_launches:
            raise RuntimeError("Browser launch failed")

        browser = self.browser_factory() if self.browser_factory else MagicMock()
        browser.close = AsyncMock(side_effect=self.close_error)
        self.browsers.append(browser)
        return browser


class StubSessionManager:
    """Runs work once against a fixed browser, counting sessions opened."""

    def __init__(self, browser, config: Optional[BrowserConfig] = None):
        self.browser = browser
        self.config = config or BrowserConfig()
        self.calls = 0

    async def with_session(self, work, max_attempts=None):
        self.calls += 1
        return await work(self.browser)


def make_page(selector_results: Optional[Dict[str, Union[list, Exception]]] = None,
              evaluate_results: Optional[Dict[str, object]] = None) -> MagicMock:
    """Build a fake Playwright page.

    ``selector_results`` maps selector -> list of element dicts (or an
    exception to raise); ``evaluate_results`` maps script substring -> value.
    """
    selector_results = selector_results or {}
    evaluate_results = evaluate_results or {}

    page = MagicMock()
    page.url = "https://example.com/"
    page.goto = AsyncMock()

    async def eval_on_selector_all(selector, script):
        outcome = selector_results.get(selector, [])
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def evaluate(script):
        for fragment, value in evaluate_results.items():
            if fragment in script:
                return value
        return None

    page.eval_on_selector_all = AsyncMock(side_effect=eval_on_selector_all)
    page.evaluate = AsyncMock(side_effect=evaluate)
    return page


def make_browser(page: MagicMock) -> MagicMock:
    browser = MagicMock()
    browser.new_page = AsyncMock(return_value=page)
    browser.close = AsyncMock()
    return browser


def mock_client(routes: Dict[str, Union[httpx.Response, Exception]]) -> httpx.AsyncClient:
    """AsyncClient answering from a URL -> response map; unknown URLs get 404."""
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        requested.append(url)
        outcome = routes.get(url)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            return httpx.Response(404, text="Not Found")
        return outcome

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client.requested = requested
    return client


@pytest.fixture
def fake_playwright():
    return FakePlaywright()
