"""Tests for sitemap discovery and URL grouping."""

import httpx
import pytest

from conftest import mock_client
from pagecrawl.exceptions import NoSitemapFoundError
from pagecrawl.sitemap_discovery import (
    SitemapDiscoverer,
    deduplicate,
    discover_sitemap_urls,
    extract_sitemap_directives,
    group_urls,
)
from pagecrawl.url_utils import normalize_url


def urlset(*urls):
    entries = "".join(f"<url><loc>{u}</loc></url>" for u in urls)
    return f'<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{entries}</urlset>'


U1 = "https://example.com/blog/one"
U2 = "https://example.com/docs/two"
U3 = "https://example.com/about"


class TestRobotsDirectives:
    """Test cases for extract_sitemap_directives."""

    def test_case_insensitive_directives(self):
        """Test Sitemap lines are found regardless of case."""
        robots = (
            "User-agent: *\n"
            "Disallow: /admin\n"
            "Sitemap: https://example.com/sitemap-a.xml\n"
            "  SITEMAP:/relative-sitemap.xml\n"
            "sitemap:\n"
        )
        assert extract_sitemap_directives(robots) == [
            "https://example.com/sitemap-a.xml",
            "/relative-sitemap.xml",
        ]

    def test_no_directives(self):
        """Test robots.txt without sitemaps yields nothing."""
        assert extract_sitemap_directives("User-agent: *\nDisallow:\n") == []


class TestDeduplicate:
    """Test cases for deduplicate."""

    def test_first_seen_order(self):
        """Test duplicates are dropped keeping the first occurrence."""
        assert deduplicate(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


class TestSitemapDiscoverer:
    """Test cases for SitemapDiscoverer.discover."""

    @pytest.mark.asyncio
    async def test_union_dedup_across_sources(self):
        """Test robots.txt and common-path sitemaps are merged in first-seen order."""
        routes = {
            "https://example.com/robots.txt": httpx.Response(
                200, text="User-agent: *\nSitemap: /sitemap-a.xml\n"
            ),
            "https://example.com/sitemap-a.xml": httpx.Response(200, text=urlset(U1, U2)),
            "https://example.com/sitemap.xml": httpx.Response(200, text=urlset(U2, U3)),
        }
        async with mock_client(routes) as client:
            found = await SitemapDiscoverer(client).discover(normalize_url("example.com"))

        assert found.urls == [U1, U2, U3]
        assert found.base_url == "https://example.com"
        assert found.sources == [
            "https://example.com/sitemap-a.xml",
            "https://example.com/sitemap.xml",
        ]

    @pytest.mark.asyncio
    async def test_every_robots_directive_is_followed(self):
        """Test multiple Sitemap directives are each parsed."""
        routes = {
            "https://example.com/robots.txt": httpx.Response(
                200,
                text="Sitemap: https://example.com/a.xml\nSitemap: https://cdn.example.com/b.txt\n",
            ),
            "https://example.com/a.xml": httpx.Response(200, text=urlset(U1)),
            "https://cdn.example.com/b.txt": httpx.Response(200, text=f"{U3}\n{U1}\n"),
        }
        async with mock_client(routes) as client:
            found = await SitemapDiscoverer(client).discover(normalize_url("example.com"))

        assert found.urls == [U1, U3]

    @pytest.mark.asyncio
    async def test_common_paths_probed_without_robots(self):
        """Test both well-known paths are probed when robots.txt is missing."""
        routes = {
            "https://example.com/sitemap_index.xml": httpx.Response(200, text=urlset(U3)),
        }
        async with mock_client(routes) as client:
            found = await SitemapDiscoverer(client).discover(normalize_url("example.com"))
            requested = list(client.requested)

        assert found.urls == [U3]
        assert requested == [
            "https://example.com/robots.txt",
            "https://example.com/sitemap.xml",
            "https://example.com/sitemap_index.xml",
        ]

    @pytest.mark.asyncio
    async def test_broken_robots_sitemap_does_not_abort(self):
        """Test a failing robots.txt reference still lets the probes run."""
        routes = {
            "https://example.com/robots.txt": httpx.Response(200, text="Sitemap: /broken.xml\n"),
            "https://example.com/broken.xml": httpx.Response(200, text="<urlset><url>"),
            "https://example.com/sitemap.xml": httpx.Response(200, text=urlset(U1)),
        }
        async with mock_client(routes) as client:
            found = await SitemapDiscoverer(client).discover(normalize_url("example.com"))

        assert found.urls == [U1]

    @pytest.mark.asyncio
    async def test_robots_transport_error_is_tolerated(self):
        """Test a robots.txt connection error does not stop discovery."""
        routes = {
            "https://example.com/robots.txt": httpx.ConnectError("refused"),
            "https://example.com/sitemap.xml": httpx.Response(200, text=urlset(U2)),
        }
        async with mock_client(routes) as client:
            found = await SitemapDiscoverer(client).discover(normalize_url("example.com"))

        assert found.urls == [U2]

    @pytest.mark.asyncio
    async def test_nothing_found_raises(self):
        """Test discovery with no reachable sources raises NoSitemapFoundError."""
        async with mock_client({}) as client:
            with pytest.raises(NoSitemapFoundError, match="https://example.com"):
                await SitemapDiscoverer(client).discover(normalize_url("example.com"))

    @pytest.mark.asyncio
    async def test_empty_sitemaps_raise(self):
        """Test sitemaps that parse but contain no URLs count as nothing found."""
        routes = {"https://example.com/sitemap.xml": httpx.Response(200, text=urlset())}
        async with mock_client(routes) as client:
            with pytest.raises(NoSitemapFoundError):
                await SitemapDiscoverer(client).discover(normalize_url("example.com"))

    @pytest.mark.asyncio
    async def test_convenience_function_normalizes(self):
        """Test discover_sitemap_urls accepts a raw domain."""
        routes = {"https://example.com/sitemap.xml": httpx.Response(200, text=urlset(U1))}
        async with mock_client(routes) as client:
            found = await discover_sitemap_urls("www.example.com/some/page", client=client)

        assert found.urls == [U1]


class TestGroupUrls:
    """Test cases for group_urls."""

    def test_groups_with_other_last(self):
        """Test each filter gets its group and unmatched URLs go to other."""
        groups = group_urls(["/blog/a", "/docs/b", "/x"], ["blog", "docs"])

        assert [(g.label, g.urls) for g in groups] == [
            ("blog", ["/blog/a"]),
            ("docs", ["/docs/b"]),
            ("other", ["/x"]),
        ]

    def test_url_can_match_several_filters(self):
        """Test a URL is listed under every filter it matches."""
        url = "https://example.com/blog/docs/post"
        groups = group_urls([url, U3], ["blog", "docs"])

        assert groups[0].urls == [url]
        assert groups[1].urls == [url]
        assert groups[2].urls == [U3]

    def test_match_is_case_insensitive_on_path_only(self):
        """Test the path is lowercased and the host is ignored."""
        urls = ["https://blog.example.com/home", "https://example.com/Blog/Post"]
        groups = group_urls(urls, ["BLOG"])

        assert groups[0].urls == ["https://example.com/Blog/Post"]
        assert groups[1].urls == ["https://blog.example.com/home"]

    def test_segment_needs_both_slashes(self):
        """Test a filter matches a whole path segment followed by a slash."""
        groups = group_urls(["https://example.com/blog", "https://example.com/blogs/x"], ["blog"])

        assert groups[0].urls == []
        assert len(groups[1].urls) == 2

    def test_no_filters_puts_everything_in_other(self):
        """Test an empty filter list yields only the other group."""
        groups = group_urls([U1, U2], [])

        assert len(groups) == 1
        assert groups[0].label == "other"
        assert groups[0].to_dict() == {"page": "other", "value": [U1, U2]}
