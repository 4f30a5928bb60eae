# a11y_scout/__init__.py
"""
A11yScout package initializer.
Defines package version and exposes the crawler API.
The command-line entry point lives in ``a11y_scout.cli:cli``.
"""
__version__ = "0.1.0"

from a11y_scout.crawler import CrawlRequest, CrawlResult, SiteCrawler, crawl_site  # noqa: E402

__all__ = ["__version__", "CrawlRequest", "CrawlResult", "SiteCrawler", "crawl_site"]
