"""Data models for page extraction and sitemap discovery."""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass
class ElementSnapshot:
    """Content captured from one matched DOM node."""

    text: str = ""
    html: str = ""
    attributes: list[dict[str, str]] = field(default_factory=list)
    top: float = 0.0
    left: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ElementSnapshot":
        """Build a snapshot from the object returned by the in-page query."""
        return cls(
            text=data.get("text") or "",
            html=data.get("html") or "",
            attributes=list(data.get("attributes") or []),
            top=data.get("top") or 0.0,
            left=data.get("left") or 0.0,
            width=data.get("width") or 0.0,
            height=data.get("height") or 0.0,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SelectorResult:
    """Outcome of evaluating a single selector against a page.

    When the selector could not be evaluated, ``error`` holds the reason and
    ``matches`` is empty.
    """

    selector: str
    matches: list[ElementSnapshot] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "selector": self.selector,
            "results": [match.to_dict() for match in self.matches],
            "error": self.error,
        }


@dataclass
class RenderedPage:
    """Serialized markup and visible text of a settled page."""

    html: str = ""
    text: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"html": self.html, "text": self.text}


@dataclass
class DiscoveredUrlSet:
    """Deduplicated, order-preserving URLs found in a host's sitemaps."""

    base_url: str
    urls: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)  # sitemap URLs that contributed

    def __len__(self) -> int:
        return len(self.urls)

    def __iter__(self):
        return iter(self.urls)

    def to_dict(self) -> dict[str, Any]:
        return {"base_url": self.base_url, "urls": list(self.urls), "sources": list(self.sources)}


@dataclass
class UrlGroup:
    """URLs whose path matched one filter segment."""

    label: str
    urls: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"page": self.label, "value": list(self.urls)}
