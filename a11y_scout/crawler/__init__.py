"""a11y_scout.crawler: page discovery for accessibility scans."""

from a11y_scout.crawler.browser import PageAutomation, PlaywrightAutomation
from a11y_scout.crawler.crawler import SiteCrawler, crawl_site
from a11y_scout.crawler.link_extractor import normalize_url, process_links, resolve_link
from a11y_scout.crawler.models import CrawlRequest, CrawlResult, FrontierEntry

__all__ = [
    "CrawlRequest",
    "CrawlResult",
    "FrontierEntry",
    "PageAutomation",
    "PlaywrightAutomation",
    "SiteCrawler",
    "crawl_site",
    "normalize_url",
    "process_links",
    "resolve_link",
]
