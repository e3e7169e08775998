"""
Browser configuration for Playwright-based extraction.

This module provides a validated Pydantic configuration model for the
settings used when launching a rendering session and navigating pages,
plus the default instance shared by the service.
"""
import os
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .constants import (
    BROWSER_LAUNCH_TIMEOUT_MS,
    CONTAINER_LAUNCH_ARGS,
    DEFAULT_SESSION_ATTEMPTS,
    NAVIGATION_TIMEOUT_MS,
)


class BrowserConfig(BaseModel):
    """
    Configuration for the BrowserSessionManager and PageExtractor.

    All fields are validated by Pydantic to ensure type safety and valid values.
    """

    headless: bool = Field(
        default=True,
        description="Run browser in headless mode (no visible UI)"
    )

    browser_type: Literal["chromium", "firefox", "webkit"] = Field(
        default="chromium",
        description="Browser engine to launch"
    )

    launch_timeout: int = Field(
        default=BROWSER_LAUNCH_TIMEOUT_MS,
        description="Browser launch timeout in milliseconds",
        ge=1000,
        le=300000
    )

    navigation_timeout: int = Field(
        default=NAVIGATION_TIMEOUT_MS,
        description="Page navigation timeout in milliseconds",
        ge=1000,
        le=300000
    )

    launch_args: List[str] = Field(
        default_factory=lambda: list(CONTAINER_LAUNCH_ARGS),
        description="Browser launch arguments (sandbox and GPU disabled for containers)"
    )

    executable_path: Optional[str] = Field(
        default=None,
        description="Path to a browser binary. None uses the Playwright-managed build."
    )

    max_attempts: int = Field(
        default=DEFAULT_SESSION_ATTEMPTS,
        description="Launch-execute-close cycles before a session failure is reported",
        ge=1,
        le=10
    )

    class Config:
        """Pydantic model configuration."""
        frozen = False
        validate_assignment = True

    def launch_options(self) -> dict:
        """Build the keyword arguments passed to ``BrowserType.launch``."""
        options = {
            "headless": self.headless,
            "args": list(self.launch_args),
            "timeout": self.launch_timeout,
        }
        if self.executable_path:
            options["executable_path"] = self.executable_path
        return options

    @classmethod
    def from_env(cls) -> "BrowserConfig":
        """Build a config honouring PLAYWRIGHT_EXECUTABLE_PATH."""
        return cls(executable_path=os.getenv("PLAYWRIGHT_EXECUTABLE_PATH") or None)


# --- Pre-configured Instance ---

DEFAULT_CONFIG = BrowserConfig.from_env()
"""
Default configuration for containerized extraction.

Headless Chromium with sandboxing and GPU disabled, a 30s launch timeout
and a 20s navigation timeout.
"""
