"""
HTTP API for the crawler service.

Routes (all under ``/crawler``):
    GET  /selector   structured extraction for comma-separated selectors
    GET  /js         fully rendered HTML and text
    POST /execute    run a whitelisted page function
    GET  /markdown   rendered or selected text converted to markdown
    GET  /sitemap    sitemap discovery, optionally grouped by path filters
"""
import logging
import time
from typing import Any, Awaitable, Callable, List, Optional

import httpx
from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import (
    CrawlerError,
    InvalidUrlError,
    NoSelectorsError,
    UnsupportedOperationError,
)
from .markdown import MarkdownConverter
from .page_extractor import PageExtractor, PageFunction
from .sitemap_discovery import SitemapDiscoverer, group_urls
from .sitemap_parser import build_client
from .url_utils import normalize_url

logger = logging.getLogger(__name__)

# Errors the caller can fix by changing the request
CLIENT_ERRORS = (InvalidUrlError, UnsupportedOperationError, NoSelectorsError)

MARKDOWN_METHODS = ("js", "selector")


class ExecuteRequest(BaseModel):
    """Body of POST /crawler/execute."""

    model_config = ConfigDict(populate_by_name=True)

    fn_name: Optional[str] = Field(default=None, alias="fnName")
    args: List[Any] = Field(default_factory=list)


def _timestamp() -> int:
    return int(time.time() * 1000)


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


def _describe_validation_error(error: RequestValidationError) -> str:
    """Summarize the first problem FastAPI found in the request."""
    problems = error.errors()
    if not problems:
        return "Invalid request"
    first = problems[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"Invalid request: {location}: {message}" if location else f"Invalid request: {message}"


def _failure(summary: str, error: Exception) -> JSONResponse:
    """Map an extraction failure to a 400 or 500 response."""
    if isinstance(error, CLIENT_ERRORS):
        return JSONResponse(status_code=400, content={"error": str(error)})

    logger.error(f"{summary}: {error}")
    return JSONResponse(status_code=500, content={"error": summary, "details": str(error)})


def create_app(
    extractor: Optional[PageExtractor] = None,
    converter: Optional[MarkdownConverter] = None,
    client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        extractor: PageExtractor used by the browser routes
        converter: MarkdownConverter used by /markdown
        client_factory: Callable returning a fresh httpx.AsyncClient for
            sitemap discovery

    Returns:
        Configured FastAPI app
    """
    extractor = extractor or PageExtractor()
    converter = converter or MarkdownConverter()
    client_factory = client_factory or build_client

    router = APIRouter(prefix="/crawler")

    async def _guard(summary: str, call: Callable[[], Awaitable[dict]]) -> Any:
        try:
            return await call()
        except Exception as e:
            return _failure(summary, e)

    @router.get("/selector")
    async def selector_extraction(
        url: Optional[str] = Query(default=None),
        selectors: Optional[str] = Query(default=None),
    ):
        selector_list = _split_csv(selectors)
        if not url or not selector_list:
            return _bad_request("Missing url or selectors parameter")

        async def call() -> dict:
            results = await extractor.extract_by_selectors(url, selector_list)
            return {
                "url": url,
                "status": 200,
                "timestamp": _timestamp(),
                "elements": [result.to_dict() for result in results],
            }

        return await _guard("Failed to crawl or extract", call)

    @router.get("/js")
    async def js_extraction(url: Optional[str] = Query(default=None)):
        if not url:
            return _bad_request("Missing url parameter")

        async def call() -> dict:
            page = await extractor.extract_rendered_page(url)
            return {
                "url": url,
                "status": 200,
                "timestamp": _timestamp(),
                "html": page.html,
                "text": page.text,
            }

        return await _guard("Failed to crawl or extract", call)

    @router.post("/execute")
    async def execute_extraction(
        url: Optional[str] = Query(default=None),
        body: Optional[ExecuteRequest] = None,
    ):
        fn_name = body.fn_name if body else None
        if not url or not fn_name:
            return _bad_request("Missing url or fnName parameter")
        if fn_name not in PageFunction.names():
            return _bad_request(
                f"Unsupported function name. Allowed: {', '.join(PageFunction.names())}"
            )

        async def call() -> dict:
            result = await extractor.execute_function(url, fn_name, body.args)
            return {
                "url": url,
                "status": 200,
                "timestamp": _timestamp(),
                "result": result,
            }

        return await _guard("Failed to execute extraction", call)

    @router.get("/markdown")
    async def markdown_extraction(
        url: Optional[str] = Query(default=None),
        method: Optional[str] = Query(default=None),
        selectors: Optional[str] = Query(default=None),
    ):
        if not url:
            return _bad_request("Missing url parameter")
        if method not in MARKDOWN_METHODS:
            return _bad_request("Invalid method - use 'js' or 'selector'")
        if method == "selector" and not selectors:
            return _bad_request("Missing selectors parameter when method is 'selector'")

        async def call() -> dict:
            if method == "js":
                source_text = (await extractor.extract_rendered_page(url)).text
            else:
                source_text = await extractor.extract_concatenated_text(url, _split_csv(selectors))

            markdown = await converter.aconvert(source_text)
            return {
                "url": url,
                "method": method,
                "status": 200,
                "timestamp": _timestamp(),
                "markdown": markdown,
            }

        return await _guard("Failed to generate markdown", call)

    @router.get("/sitemap")
    async def sitemap_urls(
        url: Optional[str] = Query(default=None),
        filter: Optional[str] = Query(default=None),
    ):
        if not url:
            return _bad_request("Missing url parameter")
        filters = _split_csv(filter)

        async def call() -> dict:
            base_url = normalize_url(url)
            async with client_factory() as client:
                discovered = await SitemapDiscoverer(client).discover(base_url)

            payload = {
                "baseUrl": str(base_url),
                "status": 200,
                "timestamp": _timestamp(),
            }
            if filters:
                payload["urls"] = [group.to_dict() for group in group_urls(discovered.urls, filters)]
            else:
                payload["urls"] = list(discovered.urls)
            return payload

        return await _guard("Failed to discover sitemap", call)

    app = FastAPI(title="pagecrawl", version="0.1.0")
    app.include_router(router)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug(f"Rejected {request.method} {request.url.path}: {exc.errors()}")
        return _bad_request(_describe_validation_error(exc))

    return app
