"""Command-line interface for the crawler service."""

import asyncio
import json
import sys
from typing import Any, Optional

from pagecrawl.config import settings
from pagecrawl.exceptions import CrawlerError
from pagecrawl.logging_config import setup_logging
from pagecrawl.page_extractor import PageExtractor, PageFunction
from pagecrawl.sitemap_discovery import discover_sitemap_urls, group_urls


def _emit(data: Any, output_file: Optional[str] = None) -> None:
    """Print (or write) a JSON document."""
    output = json.dumps(data, indent=2, default=str)
    if output_file:
        with open(output_file, "w") as f:
            f.write(output)
        print(f"\nOutput written to {output_file}")
    else:
        print(output)


def _run(coro) -> Any:
    """Run a coroutine, exiting with status 1 on a crawler error."""
    try:
        return asyncio.run(coro)
    except CrawlerError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def serve_command(args):
    """Start the HTTP API."""
    import uvicorn

    uvicorn.run(
        "pagecrawl.api:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )


def sitemap_command(args):
    """Discover a site's sitemap URLs."""
    discovered = _run(discover_sitemap_urls(args.url))
    filters = [f.strip() for f in (args.filter or "").split(",") if f.strip()]

    if filters:
        urls = [group.to_dict() for group in group_urls(discovered.urls, filters)]
    else:
        urls = discovered.urls

    _emit({"baseUrl": discovered.base_url, "urls": urls}, args.output_file)


def render_command(args):
    """Capture a page's rendered HTML and text."""
    page = _run(PageExtractor().extract_rendered_page(args.url))
    if args.text_only:
        print(page.text)
    else:
        _emit({"url": args.url, **page.to_dict()}, args.output_file)


def select_command(args):
    """Extract elements matching CSS selectors."""
    selectors = [s.strip() for s in args.selectors.split(",") if s.strip()]
    if not selectors:
        print("Error: at least one selector is required", file=sys.stderr)
        sys.exit(2)

    results = _run(PageExtractor().extract_by_selectors(args.url, selectors))
    _emit({"url": args.url, "elements": [r.to_dict() for r in results]}, args.output_file)


def execute_command(args):
    """Run a whitelisted page function."""
    result = _run(PageExtractor().execute_function(args.url, args.function))
    _emit({"url": args.url, "result": result}, args.output_file)


def main():
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="pagecrawl - Extract rendered content and sitemaps from web pages"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.LOG_LEVEL.upper() if settings.LOG_LEVEL else "INFO",
        help="Set logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve_parser.add_argument("--host", default=settings.HOST, help=f"Bind address (default: {settings.HOST})")
    serve_parser.add_argument("--port", type=int, default=settings.PORT, help=f"Port (default: {settings.PORT})")
    serve_parser.set_defaults(func=serve_command)

    sitemap_parser = subparsers.add_parser("sitemap", help="Discover the sitemap URLs of a site.")
    sitemap_parser.add_argument("url", help="Site URL or domain (e.g., n8n.io)")
    sitemap_parser.add_argument(
        "--filter",
        help="Comma-separated path segments to group URLs by (e.g., blog,docs)",
    )
    sitemap_parser.add_argument("--output-file", "-f", help="Write JSON output to file")
    sitemap_parser.set_defaults(func=sitemap_command)

    render_parser = subparsers.add_parser("render", help="Capture the rendered HTML and text of a page.")
    render_parser.add_argument("url", help="Page URL")
    render_parser.add_argument("--text-only", action="store_true", help="Print only the visible text")
    render_parser.add_argument("--output-file", "-f", help="Write JSON output to file")
    render_parser.set_defaults(func=render_command)

    select_parser = subparsers.add_parser("select", help="Extract elements matching CSS selectors.")
    select_parser.add_argument("url", help="Page URL")
    select_parser.add_argument("selectors", help="Comma-separated CSS selectors")
    select_parser.add_argument("--output-file", "-f", help="Write JSON output to file")
    select_parser.set_defaults(func=select_command)

    execute_parser = subparsers.add_parser("execute", help="Run a whitelisted page function.")
    execute_parser.add_argument("url", help="Page URL")
    execute_parser.add_argument("function", choices=PageFunction.names(), help="Function name")
    execute_parser.add_argument("--output-file", "-f", help="Write JSON output to file")
    execute_parser.set_defaults(func=execute_command)

    args = parser.parse_args()

    # Configure logging based on flags
    setup_logging(
        level=args.log_level,
        log_file=getattr(args, 'log_file', None),
    )

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
