"""
Browser session lifecycle management.

Every unit of extraction work runs against a freshly launched browser that
is closed before the attempt returns, whether the work succeeded or not:

    manager = BrowserSessionManager()
    title = await manager.with_session(lambda browser: read_title(browser))

A failed attempt (including a failed launch) is retried with a brand-new
browser up to ``max_attempts`` times; sessions are never reused across
attempts so that a half-initialized browser cannot leak state into a retry.
"""
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .browser_config import DEFAULT_CONFIG, BrowserConfig
from .exceptions import SessionError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SessionWork = Callable[[Any], Awaitable[T]]


class BrowserSession:
    """
    One launched browser, from launch to close.

    Used as an async context manager; closing swallows and logs errors so a
    close failure never replaces the outcome of the work done inside it.
    """

    def __init__(self, config: BrowserConfig, playwright_factory: Optional[Callable[[], Any]] = None):
        """
        Initialize the session.

        Args:
            config: BrowserConfig with launch options
            playwright_factory: Callable returning an un-started Playwright
                context manager (defaults to ``async_playwright``)
        """
        self._config = config
        self._playwright_factory = playwright_factory
        self._playwright = None
        self.browser = None

    async def __aenter__(self) -> "BrowserSession":
        """Launch the browser."""
        factory = self._playwright_factory
        if factory is None:
            from playwright.async_api import async_playwright
            factory = async_playwright

        logger.info(f"Launching {self._config.browser_type} browser (headless={self._config.headless})")

        self._playwright = await factory().start()
        try:
            launcher = getattr(self._playwright, self._config.browser_type)
            self.browser = await launcher.launch(**self._config.launch_options())
        except BaseException:
            await self.close()
            raise

        logger.debug("Browser launched successfully")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close the browser on every exit path."""
        await self.close()

    async def close(self) -> None:
        """Close the browser and stop the driver, logging any failure."""
        if self.browser is not None:
            try:
                await self.browser.close()
            except Exception as e:
                logger.error(f"Browser close error: {e}")
            self.browser = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.error(f"Error stopping playwright: {e}")
            self._playwright = None


class BrowserSessionManager:
    """
    Runs work inside short-lived browser sessions with bounded retry.

    Features:
    - Fixed launch configuration (sandbox and GPU disabled, bounded timeout)
    - Guaranteed close on success, failure and launch errors
    - Whole-session retry: each attempt launches a new browser
    """

    def __init__(
        self,
        config: Optional[BrowserConfig] = None,
        playwright_factory: Optional[Callable[[], Any]] = None,
    ):
        """
        Initialize the session manager.

        Args:
            config: BrowserConfig (defaults to DEFAULT_CONFIG)
            playwright_factory: Override for the Playwright entry point
        """
        self.config = config or DEFAULT_CONFIG
        self._playwright_factory = playwright_factory

    def _new_session(self) -> BrowserSession:
        return BrowserSession(self.config, playwright_factory=self._playwright_factory)

    async def with_session(self, work: SessionWork, max_attempts: Optional[int] = None) -> T:
        """
        Run ``work`` against a freshly launched browser.

        Args:
            work: Async callable receiving the launched Browser
            max_attempts: Launch-execute-close cycles to try (defaults to
                ``config.max_attempts``)

        Returns:
            Whatever ``work`` returns on the first successful attempt

        Raises:
            SessionError: If every attempt failed; wraps the last failure
            ValueError: If max_attempts is less than 1
        """
        attempts = self.config.max_attempts if max_attempts is None else max_attempts
        if attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {attempts}")

        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                async with self._new_session() as session:
                    return await work(session.browser)
            except Exception as e:
                last_error = e
                logger.warning(f"Attempt {attempt}/{attempts} failed: {e}")

        logger.error(f"All {attempts} browser attempts failed: {last_error}")
        raise SessionError(attempts, last_error) from last_error


async def with_session(work: SessionWork, max_attempts: Optional[int] = None, config: Optional[BrowserConfig] = None) -> T:
    """
    Convenience function running ``work`` in a default-configured session.

    Args:
        work: Async callable receiving the launched Browser
        max_attempts: Launch-execute-close cycles to try
        config: Optional BrowserConfig override

    Returns:
        The result of ``work``
    """
    return await BrowserSessionManager(config).with_session(work, max_attempts=max_attempts)
