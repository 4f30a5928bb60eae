# File: tests/conftest.py
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Union

import pytest

from a11y_scout.config import CrawlerSettings

HTML = "text/html; charset=utf-8"


@dataclass
class FakePage:
    """A page of the fake site: response content-type and the hrefs it contains."""

    content_type: Optional[str] = HTML
    hrefs: List[str] = field(default_factory=list)
    # served instead of the navigation response: an exception to raise, or None
    error: Optional[BaseException] = None
    no_response: bool = False
    redirect_to: Optional[str] = None
    delay: float = 0.0


class StubResponse:
    def __init__(self, content_type: Optional[str]) -> None:
        self.headers: Dict[str, str] = {} if content_type is None else {"content-type": content_type}


class StubPage:
    def __init__(self, site: "StubAutomation") -> None:
        self._site = site
        self.url = "about:blank"

    async def goto(self, url: str, *, wait_until: str, timeout_ms: int):
        self._site.goto_calls.append(url)
        self._site.goto_options.append({"wait_until": wait_until, "timeout_ms": timeout_ms})
        page = self._site.pages.get(url, self._site.default)
        if page is None:
            raise RuntimeError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        if page.delay:
            await asyncio.sleep(page.delay)
        if page.error is not None:
            raise page.error
        self.url = page.redirect_to or url
        if page.no_response:
            return None
        return StubResponse(page.content_type)

    async def extract_hrefs(self) -> List[str]:
        self._site.extract_calls.append(self.url)
        page = self._site.pages.get(self.url, self._site.default)
        if page is None:
            return []
        if self._site.extract_error is not None:
            raise self._site.extract_error
        return list(page.hrefs)


class StubContext:
    def __init__(self, site: "StubAutomation", user_agent: str) -> None:
        self._site = site
        self.user_agent = user_agent
        self.closed = False

    async def new_page(self) -> StubPage:
        if self._site.new_page_error is not None:
            raise self._site.new_page_error
        return StubPage(self._site)

    async def close(self) -> None:
        self.closed = True


class StubBrowser:
    def __init__(self, site: "StubAutomation") -> None:
        self._site = site
        self.contexts: List[StubContext] = []
        self.closed = False

    async def new_context(self, user_agent: str) -> StubContext:
        context = StubContext(self._site, user_agent)
        self.contexts.append(context)
        return context

    async def close(self) -> None:
        self.closed = True


class StubAutomation:
    """In-memory page automation serving a fixed map of URL -> FakePage."""

    def __init__(
        self,
        pages: Dict[str, FakePage],
        default: Optional[FakePage] = None,
    ) -> None:
        self.pages = pages
        self.default = default
        self.browsers: List[StubBrowser] = []
        self.goto_calls: List[str] = []
        self.goto_options: List[dict] = []
        self.extract_calls: List[str] = []
        self.launch_error: Optional[BaseException] = None
        self.new_page_error: Optional[BaseException] = None
        self.extract_error: Optional[BaseException] = None

    async def launch(self) -> StubBrowser:
        if self.launch_error is not None:
            raise self.launch_error
        browser = StubBrowser(self)
        self.browsers.append(browser)
        return browser

    @property
    def browser(self) -> StubBrowser:
        return self.browsers[-1]


SiteFactory = Callable[..., StubAutomation]


@pytest.fixture()
def make_site() -> SiteFactory:
    """
    Build a StubAutomation from a mapping of URL -> FakePage or list of hrefs
    (a list is shorthand for an HTML page containing those links).
    """

    def factory(
        pages: Dict[str, Union[FakePage, List[str]]],
        default: Optional[FakePage] = None,
    ) -> StubAutomation:
        normalized = {
            url: page if isinstance(page, FakePage) else FakePage(hrefs=list(page))
            for url, page in pages.items()
        }
        return StubAutomation(normalized, default=default)

    return factory


@pytest.fixture()
def settings() -> CrawlerSettings:
    return CrawlerSettings(user_agent="TestAgent/1.0")
