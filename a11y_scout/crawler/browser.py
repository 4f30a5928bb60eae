"""
Page automation: the browser contract the crawler depends on and its
Playwright-backed implementation.

The crawler only talks to the protocols below, so tests can substitute an
in-memory stub for a real headless browser.
"""
from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Protocol, Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag
from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from a11y_scout.errors import BrowserLaunchError, describe_error

__all__ = (
    "NavigationResponse",
    "PageHandle",
    "ContextHandle",
    "BrowserHandle",
    "PageAutomation",
    "PlaywrightAutomation",
    "extract_hrefs_from_html",
)

logger = logging.getLogger("A11yScout.browser")


# --------------------------------------------------------------------------- #
#                                  Contract                                   #
# --------------------------------------------------------------------------- #


class NavigationResponse(Protocol):
    @property
    def headers(self) -> Mapping[str, str]: ...


class PageHandle(Protocol):
    @property
    def url(self) -> str:
        """URL of the currently loaded document (after redirects)."""
        ...

    async def goto(
        self, url: str, *, wait_until: str, timeout_ms: int
    ) -> Optional[NavigationResponse]: ...

    async def extract_hrefs(self) -> List[str]:
        """Raw ``href`` values of every ``a[href]`` in the loaded document."""
        ...


class ContextHandle(Protocol):
    async def new_page(self) -> PageHandle: ...

    async def close(self) -> None: ...


class BrowserHandle(Protocol):
    async def new_context(self, user_agent: str) -> ContextHandle: ...

    async def close(self) -> None: ...


class PageAutomation(Protocol):
    async def launch(self) -> BrowserHandle:
        """Start an isolated browser instance owned by the caller."""
        ...


# --------------------------------------------------------------------------- #
#                           Playwright implementation                         #
# --------------------------------------------------------------------------- #


def extract_hrefs_from_html(html: str) -> List[str]:
    """Return raw ``href`` attribute values of all anchors in *html*."""
    soup = BeautifulSoup(html, "html.parser")
    hrefs: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if isinstance(href_val, str):
            hrefs.append(href_val)
    return hrefs


class PlaywrightPage:
    def __init__(self, page: Page) -> None:
        self._page = page

    @property
    def url(self) -> str:
        return self._page.url

    async def goto(self, url: str, *, wait_until: str, timeout_ms: int):
        return await self._page.goto(url, wait_until=wait_until, timeout=timeout_ms)

    async def extract_hrefs(self) -> List[str]:
        # serialized live DOM, so anchors inserted by scripts are included
        return extract_hrefs_from_html(await self._page.content())


class PlaywrightContext:
    def __init__(self, context: BrowserContext) -> None:
        self._context = context
        self._closed = False

    async def new_page(self) -> PlaywrightPage:
        return PlaywrightPage(await self._context.new_page())

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._context.close()


class PlaywrightBrowser:
    """Owns both the Chromium process and the Playwright driver that started it."""

    def __init__(self, playwright: Playwright, browser: Browser) -> None:
        self._playwright = playwright
        self._browser = browser
        self._closed = False

    async def new_context(self, user_agent: str) -> PlaywrightContext:
        return PlaywrightContext(await self._browser.new_context(user_agent=user_agent))

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()


class PlaywrightAutomation:
    """Launches a fresh headless Chromium for every crawl."""

    def __init__(self, *, headless: bool = True, args: Sequence[str] = ()) -> None:
        self.headless = headless
        self.args = list(args)

    async def launch(self) -> PlaywrightBrowser:
        try:
            playwright = await async_playwright().start()
        except Exception as exc:
            raise BrowserLaunchError(f"Cannot start Playwright: {describe_error(exc)}") from exc
        try:
            browser = await playwright.chromium.launch(headless=self.headless, args=self.args)
        except Exception as exc:
            await playwright.stop()
            raise BrowserLaunchError(f"Cannot launch Chromium: {describe_error(exc)}") from exc
        logger.debug("Chromium launched (headless=%s)", self.headless)
        return PlaywrightBrowser(playwright, browser)
