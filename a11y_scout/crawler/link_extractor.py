"""
Link filtering and URL normalization utilities for A11yScout.

Everything here is pure: no I/O, no shared state. The crawler feeds raw
``href`` attribute values through :func:`process_links` and dedupes frontier
entries with :func:`normalize_url`.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Tuple
from urllib.parse import SplitResult, parse_qsl, quote, quote_plus, urlencode, urljoin, urlsplit, urlunsplit

from a11y_scout.errors import InvalidUrl, describe_error

__all__ = (
    "TRACKING_PARAMS",
    "normalize_url",
    "is_valid_link",
    "is_allowed_protocol",
    "is_static_file",
    "resolve_link",
    "process_links",
    "split_absolute",
)

logger = logging.getLogger("A11yScout.crawler")

TRACKING_PARAMS = frozenset({"utm_source", "utm_medium", "utm_campaign"})

_ALLOWED_SCHEMES = ("http", "https")
_DEFAULT_PORTS = {"http": 80, "https": 443}
_SKIPPED_PREFIXES = ("#", "mailto:", "tel:")
_STATIC_FILE_RE = re.compile(
    r"\.(pdf|jpg|jpeg|png|gif|svg|css|js|ico|woff|woff2|ttf|eot)$", re.IGNORECASE
)
# RFC 3986 pchar plus "/" and "%" so already-encoded paths stay untouched
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"


def _quote_query(value: str, safe: str = "", encoding=None, errors=None) -> str:
    # form-urlencoded byte set: only alphanumerics and "*-._" stay literal
    return quote_plus(value, safe="*", encoding=encoding, errors=errors).replace("~", "%7E")


def split_absolute(url: str) -> Tuple[SplitResult, Optional[int]]:
    """Split an absolute URL, raising :class:`InvalidUrl` on a missing host or bad port."""
    try:
        parts = urlsplit(url)
        port = parts.port  # ValueError on a non-numeric or out-of-range port
    except ValueError as exc:
        raise InvalidUrl(url, describe_error(exc)) from exc
    if not parts.scheme or not parts.hostname:
        raise InvalidUrl(url, "scheme and host are required")
    return parts, port


def normalize_url(url: str) -> str:
    """
    Canonical form of an absolute URL, the unit of deduplication.

    Drops the fragment and ``utm_source``/``utm_medium``/``utm_campaign``
    query parameters, lower-cases scheme and host, drops the default port and
    strips one trailing slash (``https://example.com/`` → ``https://example.com``).

    Raises :class:`~a11y_scout.errors.InvalidUrl` if *url* is not absolute.
    """
    parts, port = split_absolute(url)
    scheme = parts.scheme.lower()

    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    netloc = host
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        netloc = f"{netloc}:{port}"
    userinfo, sep, _ = parts.netloc.rpartition("@")
    if sep:
        netloc = f"{userinfo}@{netloc}"

    path = quote(parts.path, safe=_PATH_SAFE)
    if not path and scheme in _ALLOWED_SCHEMES:
        path = "/"

    query = ""
    if parts.query:
        params = [
            (key, value)
            for key, value in parse_qsl(parts.query, keep_blank_values=True)
            if key not in TRACKING_PARAMS
        ]
        query = urlencode(params, quote_via=_quote_query)

    normalized = urlunsplit((scheme, netloc, path, query, ""))
    if normalized.endswith("/") and not normalized.endswith("//"):
        normalized = normalized[:-1]
    return normalized


def is_valid_link(href: str) -> bool:
    """False for in-page anchors and ``mailto:``/``tel:`` links."""
    return not href.startswith(_SKIPPED_PREFIXES)


def is_allowed_protocol(url: SplitResult) -> bool:
    return url.scheme in _ALLOWED_SCHEMES


def is_static_file(path: str) -> bool:
    """True when *path* points at an asset that cannot be an HTML page."""
    return bool(_STATIC_FILE_RE.search(path))


def resolve_link(
    href: str,
    page_url: str,
    start_domain: str,
    same_domain_only: bool,
) -> Optional[str]:
    """
    Turn a raw ``href`` found on *page_url* into a crawlable, normalized URL.

    Returns ``None`` for anything the crawler must not follow: anchors and
    ``mailto:``/``tel:`` links, non-HTTP(S) schemes, other hosts (when
    *same_domain_only*), static assets and hrefs that cannot be resolved.
    """
    if not is_valid_link(href):
        return None

    try:
        absolute = urljoin(page_url, href.strip())
        parsed = urlsplit(absolute)
        hostname = parsed.hostname
    except ValueError as exc:
        logger.debug("Cannot resolve %r against %s: %s", href, page_url, exc)
        return None

    if not is_allowed_protocol(parsed):
        return None
    if same_domain_only and hostname != start_domain:
        return None
    if is_static_file(parsed.path):
        return None
    return normalize_url(absolute)


def process_links(
    hrefs: Iterable[str],
    page_url: str,
    start_domain: str,
    same_domain_only: bool,
) -> List[str]:
    """Resolve a batch of hrefs; a bad href is logged and skipped, never fatal."""
    links: List[str] = []
    for href in hrefs:
        try:
            resolved = resolve_link(href, page_url, start_domain, same_domain_only)
        except ValueError as exc:
            logger.info("Invalid URL: %s - %s", href, describe_error(exc))
            continue
        if resolved:
            links.append(resolved)
    return list(dict.fromkeys(links))
