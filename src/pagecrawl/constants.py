# src/pagecrawl/constants.py
"""Centralized constants for the crawler service.

This module contains timeouts and protocol values shared across modules.
For user-configurable browser settings, see browser_config.py and
BrowserConfig.
"""

# =============================================================================
# Browser Session Constants
# =============================================================================

# Default number of launch-execute-close cycles before giving up
DEFAULT_SESSION_ATTEMPTS = 2

# Browser launch timeout in milliseconds
BROWSER_LAUNCH_TIMEOUT_MS = 30000

# Page navigation timeout in milliseconds
NAVIGATION_TIMEOUT_MS = 20000

# Chromium flags required for containerized execution
CONTAINER_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]


# =============================================================================
# Settlement Conditions
# =============================================================================

# Initial markup parsed
SETTLE_DOM_PARSED = "domcontentloaded"

# Network activity quiesced
SETTLE_NETWORK_IDLE = "networkidle"


# =============================================================================
# Sitemap Discovery Constants
# =============================================================================

# Well-known sitemap locations probed after robots.txt
COMMON_SITEMAP_PATHS = ["/sitemap.xml", "/sitemap_index.xml"]

# Group label collecting URLs that match no filter
OTHER_GROUP_LABEL = "other"

# HTTP timeout for robots.txt and sitemap fetches (seconds)
DEFAULT_FETCH_TIMEOUT_SECONDS = 30.0

# Separator placed between element texts in concatenated extraction
TEXT_BLOCK_SEPARATOR = "\n\n"


# =============================================================================
# Markdown Conversion Constants
# =============================================================================

DEFAULT_MARKDOWN_BASE_URL = "https://api.groq.com/openai/v1"

DEFAULT_MARKDOWN_MODEL = "meta-llama/llama-4-scout-17b-16e-instruct"
