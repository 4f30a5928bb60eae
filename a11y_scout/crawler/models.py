"""
Data models for the A11yScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from a11y_scout.config import CrawlerSettings

__all__ = ("CrawlRequest", "FrontierEntry", "CrawlResult")


class CrawlRequest(BaseModel):
    """Parameters of a single crawl.

    ``max_depth`` is deliberately unconstrained: a negative value is a caller
    error that results in an empty crawl rather than a validation failure.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    start_url: str = Field(..., min_length=1, description="Absolute URL the crawl starts from.")
    max_pages: int = Field(10, ge=1, description="Maximum number of HTML pages to record.")
    same_domain_only: bool = Field(True, description="Follow only links on the start URL's host.")
    max_depth: int = Field(3, description="Maximum number of link hops from the start URL.")

    @classmethod
    def from_settings(
        cls,
        settings: CrawlerSettings,
        start_url: str,
        *,
        max_pages: Optional[int] = None,
        max_depth: Optional[int] = None,
        same_domain_only: Optional[bool] = None,
    ) -> CrawlRequest:
        """Build a request, falling back to the defaults held by *settings*."""
        return cls(
            start_url=start_url,
            max_pages=settings.max_pages if max_pages is None else max_pages,
            max_depth=settings.max_depth if max_depth is None else max_depth,
            same_domain_only=(
                settings.same_domain_only if same_domain_only is None else same_domain_only
            ),
        )


@dataclass(frozen=True, slots=True)
class FrontierEntry:
    """A discovered, not yet visited URL (raw form) and its link distance."""

    url: str
    depth: int


@dataclass(slots=True)
class CrawlResult:
    """Outcome of a crawl: recorded HTML pages in discovery order."""

    urls: List[str] = field(default_factory=list)
    total_found: int = 0
    crawl_time: int = 0  # milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "urls": list(self.urls),
            "total_found": self.total_found,
            "crawl_time": self.crawl_time,
        }
