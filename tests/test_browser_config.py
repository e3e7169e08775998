"""Tests for browser configuration."""

import pytest
from pydantic import ValidationError
from unittest.mock import patch

from pagecrawl.browser_config import BrowserConfig


class TestBrowserConfig:
    """Test cases for BrowserConfig."""

    def test_defaults(self):
        """Test default values match the container launch profile."""
        config = BrowserConfig()
        assert config.headless is True
        assert config.browser_type == "chromium"
        assert config.launch_timeout == 30000
        assert config.navigation_timeout == 20000
        assert config.max_attempts == 2
        assert "--no-sandbox" in config.launch_args
        assert "--disable-gpu" in config.launch_args

    def test_launch_options_without_executable(self):
        """Test executable_path is omitted when unset."""
        options = BrowserConfig().launch_options()
        assert "executable_path" not in options
        assert options["timeout"] == 30000

    def test_launch_args_are_copied(self):
        """Test mutating launch options does not change the config."""
        config = BrowserConfig()
        config.launch_options()["args"].append("--extra")
        assert "--extra" not in config.launch_args

    def test_invalid_timeout_rejected(self):
        """Test timeouts outside the allowed range fail validation."""
        with pytest.raises(ValidationError):
            BrowserConfig(navigation_timeout=10)

    def test_invalid_attempts_rejected(self):
        """Test max_attempts below one fails validation."""
        with pytest.raises(ValidationError):
            BrowserConfig(max_attempts=0)

    def test_from_env_reads_executable_path(self):
        """Test PLAYWRIGHT_EXECUTABLE_PATH is honoured."""
        with patch.dict("os.environ", {"PLAYWRIGHT_EXECUTABLE_PATH": "/opt/chrome"}):
            config = BrowserConfig.from_env()
        assert config.executable_path == "/opt/chrome"
        assert config.launch_options()["executable_path"] == "/opt/chrome"
