"""HTTP front-end for the crawler: ``POST /crawl`` used by the scan orchestrator."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from aiohttp import web
from pydantic import ValidationError

from a11y_scout.config import CrawlerSettings
from a11y_scout.crawler.browser import PageAutomation
from a11y_scout.crawler.crawler import crawl_site
from a11y_scout.crawler.models import CrawlRequest
from a11y_scout.errors import UNKNOWN_ERROR, InvalidUrl, describe_error

__all__ = ("create_app", "run_server", "SETTINGS_KEY", "AUTOMATION_KEY")

logger = logging.getLogger("A11yScout.server")

SETTINGS_KEY = web.AppKey("settings", CrawlerSettings)
AUTOMATION_KEY = web.AppKey("automation", object)

# the orchestration layer crawls two hops deep unless told otherwise
DEFAULT_HTTP_MAX_DEPTH = 2


def _error(status: int, message: str) -> web.Response:
    return web.json_response({"error": message}, status=status)


async def handle_health(_: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


async def handle_crawl(request: web.Request) -> web.Response:
    try:
        body: Any = await request.json()
    except json.JSONDecodeError:
        return _error(400, "Request body must be JSON")
    if not isinstance(body, dict):
        return _error(400, "Request body must be a JSON object")

    url = body.get("url")
    if not url:
        return _error(400, "URL is required")

    settings: CrawlerSettings = request.app[SETTINGS_KEY]
    try:
        crawl_request = CrawlRequest.from_settings(
            settings,
            url,
            max_pages=body.get("max_pages"),
            max_depth=body.get("max_depth", DEFAULT_HTTP_MAX_DEPTH),
            same_domain_only=body.get("same_domain_only", True),
        )
    except ValidationError as exc:
        return _error(400, _validation_message(exc))

    automation: Optional[PageAutomation] = request.app[AUTOMATION_KEY]
    try:
        result = await crawl_site(crawl_request, settings, automation)
    except InvalidUrl as exc:
        return _error(400, exc.message)
    except Exception as exc:
        logger.exception("Crawl of %s failed", url)
        message = describe_error(exc)
        return _error(500, "Crawl failed" if message == UNKNOWN_ERROR else message)

    return web.json_response(result.to_dict())


def _validation_message(exc: ValidationError) -> str:
    parts: Dict[str, str] = {}
    for err in exc.errors():
        field = ".".join(str(loc) for loc in err.get("loc", ())) or "body"
        parts.setdefault(field, err.get("msg", "invalid value"))
    return "; ".join(f"{field}: {msg}" for field, msg in parts.items())


def create_app(
    settings: Optional[CrawlerSettings] = None,
    automation: Optional[PageAutomation] = None,
) -> web.Application:
    app = web.Application()
    app[SETTINGS_KEY] = settings or CrawlerSettings()
    app[AUTOMATION_KEY] = automation
    app.router.add_get("/health", handle_health)
    app.router.add_post("/crawl", handle_crawl)
    return app


def run_server(settings: CrawlerSettings, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the application until interrupted."""
    host = host or settings.host
    port = port or settings.port
    logger.info("Serving on http://%s:%d", host, port)
    web.run_app(create_app(settings), host=host, port=port, print=None)
