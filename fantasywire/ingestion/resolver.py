"""Feed resolution: candidate walking, homepage discovery and self-heal hints."""

import logging
import re
from typing import List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from ..errors import FetchError, ResolveError
from ..models import Source
from .fetcher import ResilientFetcher
from .models import ResolvedFeed

logger = logging.getLogger(__name__)

_FEED_PATH = re.compile(r"(/feed|/rss|/atom|\.xml|\.rss)(/|$)", re.IGNORECASE)
_FEED_TYPE = re.compile(r"application/(rss|atom)\+xml", re.IGNORECASE)


def looks_like_feed_path(url: str) -> bool:
    """True when the URL path already names a feed endpoint."""
    return bool(_FEED_PATH.search(urlparse(url).path or ""))


def build_candidates(feed_url: Optional[str]) -> List[str]:
    """Ordered, de-duplicated feed URL variants to try for a stored URL."""
    if not feed_url or not feed_url.strip():
        return []

    url = feed_url.strip()
    stripped = url.rstrip("/") if urlparse(url).path not in ("", "/") else url
    variants = [url, stripped]

    if stripped.lower().startswith("http://"):
        variants.append("https://" + stripped[len("http://"):])
    secure = variants[-1]

    if not looks_like_feed_path(secure):
        base = secure.rstrip("/")
        variants.extend([base + "/feed", base + "/rss"])

    candidates: List[str] = []
    for variant in variants:
        if variant not in candidates:
            candidates.append(variant)
    return candidates


def looks_like_xml(body: str) -> bool:
    """Cheap sniff used to accept a candidate response."""
    return (body or "").strip().startswith("<")


def discover_feed_link(html: str, base_url: str) -> Optional[str]:
    """Find the first advertised RSS/Atom feed in a page's ``<link>`` tags."""
    soup = BeautifulSoup(html or "", "html.parser")
    for link in soup.find_all("link", href=True):
        rel = link.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        if "alternate" not in [r.lower() for r in rel]:
            continue
        if not _FEED_TYPE.search(link.get("type") or ""):
            continue
        href = link["href"].strip()
        if href:
            return urljoin(base_url, href)
    return None


class FeedResolver:
    """Turn a source's stored feed URL into a fetched feed document."""

    def __init__(self, fetcher: ResilientFetcher) -> None:
        """Initialize resolver."""
        self.fetcher = fetcher

    async def _try(self, url: str, attempted: List[str]) -> Optional[str]:
        attempted.append(url)
        try:
            response = await self.fetcher.fetch(url)
        except FetchError as e:
            logger.debug("Feed candidate failed: %s", e)
            return None
        if not looks_like_xml(response.body):
            logger.debug("Feed candidate %s did not return markup", url)
            return None
        return response.body

    async def resolve(self, source: Source) -> ResolvedFeed:
        """Resolve a feed document for ``source``.

        Raises:
            ResolveError: every candidate and the discovered feed (if any) failed.
        """
        attempted: List[str] = []

        for candidate in build_candidates(source.feed_url):
            body = await self._try(candidate, attempted)
            if body is not None:
                return ResolvedFeed(body=body, final_url=candidate, attempted=attempted)

        if source.homepage_url:
            discovered = await self._discover(source.homepage_url, attempted)
            if discovered and discovered not in attempted:
                body = await self._try(discovered, attempted)
                if body is not None:
                    is_new = discovered != (source.feed_url or "").strip()
                    if is_new:
                        logger.info("Discovered feed for %s: %s", source.name, discovered)
                    return ResolvedFeed(
                        body=body,
                        final_url=discovered,
                        discovered_url=discovered if is_new else None,
                        attempted=attempted,
                    )

        raise ResolveError(f"No feed resolved for {source.name}", attempted)

    async def _discover(self, homepage_url: str, attempted: List[str]) -> Optional[str]:
        attempted.append(homepage_url)
        try:
            response = await self.fetcher.fetch(homepage_url)
        except FetchError as e:
            logger.debug("Homepage fetch failed: %s", e)
            return None
        return discover_feed_link(response.body, response.final_url or homepage_url)
