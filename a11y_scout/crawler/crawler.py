from __future__ import annotations

import logging
import time
from collections import deque
from contextlib import AsyncExitStack
from typing import Deque, List, Optional, Set

from a11y_scout.config import CrawlerSettings
from a11y_scout.crawler.browser import PageAutomation, PageHandle, PlaywrightAutomation
from a11y_scout.crawler.link_extractor import normalize_url, process_links, split_absolute
from a11y_scout.crawler.models import CrawlRequest, CrawlResult, FrontierEntry
from a11y_scout.errors import InvalidUrl, describe_error

__all__ = ("Frontier", "SiteCrawler", "crawl_site")


class Frontier:
    """FIFO of discovered URLs with an index for O(1) membership checks."""

    def __init__(self) -> None:
        self._queue: Deque[FrontierEntry] = deque()
        self._queued: Set[str] = set()

    def push(self, url: str, depth: int) -> None:
        self._queue.append(FrontierEntry(url, depth))
        self._queued.add(url)

    def pop(self) -> FrontierEntry:
        entry = self._queue.popleft()
        self._queued.discard(entry.url)
        return entry

    def __contains__(self, url: object) -> bool:
        return url in self._queued

    def __len__(self) -> int:
        return len(self._queue)


class SiteCrawler:
    """Breadth-first page discovery driven by a headless browser.

    One navigation is in flight at a time. Every call to :meth:`crawl` launches
    its own browser and closes it on exit, so a crawler instance holds no state
    between crawls.
    """

    def __init__(
        self,
        request: CrawlRequest,
        settings: Optional[CrawlerSettings] = None,
        automation: Optional[PageAutomation] = None,
    ) -> None:
        self.request = request
        self.settings = settings or CrawlerSettings()
        self.automation: PageAutomation = automation or PlaywrightAutomation(
            headless=self.settings.headless, args=self.settings.browser_args
        )
        self.logger = logging.getLogger("A11yScout.crawler")

    async def crawl(self) -> CrawlResult:
        request = self.request
        self.logger.info(
            "Crawl started: %s (max_pages=%d, max_depth=%d, same_domain_only=%s)",
            request.start_url, request.max_pages, request.max_depth, request.same_domain_only,
        )
        start = time.monotonic()
        visited: Set[str] = set()
        found: List[str] = []
        frontier = Frontier()
        frontier.push(request.start_url, 0)

        start_domain = self._start_domain(request.start_url)

        async with AsyncExitStack() as stack:
            browser = await self.automation.launch()
            stack.push_async_callback(browser.close)
            context = await browser.new_context(user_agent=self.settings.user_agent)
            stack.push_async_callback(context.close)
            page = await context.new_page()

            while frontier and len(found) < request.max_pages:
                entry = frontier.pop()
                try:
                    url = normalize_url(entry.url)
                except InvalidUrl:
                    self.logger.warning("Failed to normalize URL: %s", entry.url)
                    continue

                if url in visited:
                    continue
                visited.add(url)

                if entry.depth > request.max_depth:
                    continue

                try:
                    if not await self._load(page, url):
                        continue
                    found.append(url)
                    self.logger.info("Found: %s (depth: %d)", url, entry.depth)

                    if entry.depth < request.max_depth:
                        links = await self._extract(page, url, start_domain)
                        for link in links:
                            if link not in visited and link not in frontier:
                                frontier.push(link, entry.depth + 1)
                except Exception as exc:
                    self.logger.warning("Failed to load: %s - %s", url, describe_error(exc))

        crawl_time = int((time.monotonic() - start) * 1000)
        self.logger.info(
            "Crawl finished: %d pages in %d ms (%d URLs attempted)",
            len(found), crawl_time, len(visited),
        )
        return CrawlResult(urls=found, total_found=len(found), crawl_time=crawl_time)

    async def _load(self, page: PageHandle, url: str) -> bool:
        """Navigate to *url*; True only if an HTML document was loaded."""
        response = await page.goto(
            url,
            wait_until=self.settings.wait_until,
            timeout_ms=self.settings.navigation_timeout_ms,
        )
        if response is None:
            self.logger.debug("No response for %s", url)
            return False
        content_type = response.headers.get("content-type") or ""
        if "text/html" not in content_type:
            self.logger.debug("Skipping %s: content-type %r", url, content_type)
            return False
        return True

    async def _extract(self, page: PageHandle, url: str, start_domain: str) -> List[str]:
        hrefs = await page.extract_hrefs()
        return process_links(
            hrefs, page.url or url, start_domain, self.request.same_domain_only
        )

    @staticmethod
    def _start_domain(start_url: str) -> str:
        parts, _ = split_absolute(start_url)
        return parts.hostname


async def crawl_site(
    request: CrawlRequest,
    settings: Optional[CrawlerSettings] = None,
    automation: Optional[PageAutomation] = None,
) -> CrawlResult:
    """Discover the HTML pages reachable from ``request.start_url``."""
    return await SiteCrawler(request, settings, automation).crawl()
