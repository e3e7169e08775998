"""Canonicalization of user-supplied site URLs."""

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from .exceptions import InvalidUrlError

_WWW_PREFIX = re.compile(r"^(?:www\.)+", re.IGNORECASE)


@dataclass(frozen=True)
class NormalizedUrl:
    """A ``scheme://host`` key identifying one logical site."""

    scheme: str
    host: str

    def __str__(self) -> str:
        return f"{self.scheme}://{self.host}"

    def join(self, path: str) -> str:
        """Append an absolute path to the base URL."""
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self}{path}"


def normalize_url(input_url: str) -> NormalizedUrl:
    """
    Normalize a URL to ``scheme://host`` form.

    Missing protocols are inferred as https and a leading ``www.`` label is
    dropped, so ``n8n.io``, ``www.n8n.io`` and ``https://www.n8n.io/path`` all
    normalize to ``https://n8n.io``. This is a lookup-key heuristic, not a
    full RFC canonicalization.

    Args:
        input_url: Raw URL input

    Returns:
        NormalizedUrl for the site

    Raises:
        InvalidUrlError: If the input does not parse as a URL
    """
    if input_url is None:
        raise InvalidUrlError("")

    candidate = input_url.strip()
    if not candidate:
        raise InvalidUrlError(input_url)

    if not candidate.lower().startswith(("http://", "https://")):
        if _WWW_PREFIX.match(candidate):
            candidate = f"https://{candidate}"
        else:
            candidate = f"https://www.{candidate}"

    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname
        port = parts.port
    except ValueError:
        raise InvalidUrlError(input_url)

    if not hostname or any(ch.isspace() for ch in parts.netloc):
        raise InvalidUrlError(input_url)

    host = _WWW_PREFIX.sub("", hostname.lower())
    if not host or host.startswith(".") or ".." in host:
        raise InvalidUrlError(input_url)
    if ":" in host:
        host = f"[{host}]"
    if port is not None:
        host = f"{host}:{port}"

    return NormalizedUrl(scheme=parts.scheme.lower(), host=host)
