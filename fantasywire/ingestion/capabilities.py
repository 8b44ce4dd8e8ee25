"""Fetch capabilities: one per ``FetchMethod``, selected by tag."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type
from urllib.parse import urlparse

from trafilatura.metadata import extract_metadata

from ..config import IngestDefaults
from ..errors import FetchError, ParseError, ResolveError
from ..models import FetchMethod, Source
from .dates import parse_date, resolve_published
from .fetcher import ResilientFetcher
from .models import CandidateListing, FeedItem
from .parser import parse_feed, scrape_links
from .resolver import FeedResolver
from .sitemap import (
    MAX_CHILD_SITEMAPS,
    candidate_sitemaps,
    iter_same_host,
    parse_sitemap,
    title_from_url,
)

logger = logging.getLogger(__name__)

# Common CMS listing patterns, tried after a source's own selector
GENERIC_SELECTORS = [
    'h2 a[href^="/"]',
    'h3 a[href^="/"]',
    'article a[href^="/"]',
    'a.card[href^="/"]',
    'a[href*="/fantasy-football"]',
    'a[href*="/nfl/"]',
    'a[href^="/articles/"]',
]


class FetchCapability(ABC):
    """Uniform contract: list candidate items, then optionally load each one."""

    method: FetchMethod

    def __init__(self, fetcher: ResilientFetcher, settings: Optional[IngestDefaults] = None) -> None:
        """Initialize capability."""
        self.fetcher = fetcher
        self.settings = settings or IngestDefaults()

    @abstractmethod
    async def list_candidates(self, source: Source) -> CandidateListing:
        """Produce candidate items for ``source``."""

    async def load_item(self, item: FeedItem) -> FeedItem:
        """Enrich a listed item; the listing is already complete by default."""
        return item


class FeedCapability(FetchCapability):
    """Resolve the source's feed and parse it; scrape the body if it is not a feed."""

    method = FetchMethod.FEED

    def __init__(self, fetcher: ResilientFetcher, settings: Optional[IngestDefaults] = None) -> None:
        """Initialize feed capability."""
        super().__init__(fetcher, settings)
        self.resolver = FeedResolver(fetcher)

    async def list_candidates(self, source: Source) -> CandidateListing:
        resolved = await self.resolver.resolve(source)
        listing = CandidateListing(
            resolved_url=resolved.final_url,
            discovered_url=resolved.discovered_url,
            attempted=resolved.attempted,
        )
        try:
            listing.items = parse_feed(resolved.body)
            listing.mode = "feed"
        except ParseError as e:
            logger.info("%s: %s, falling back to link scrape", source.name, e)
            listing.parse_error = str(e)
            listing.items = scrape_links(
                resolved.body, resolved.final_url, limit=self.settings.scrape_link_cap
            )
            listing.mode = "html-scrape"
        return listing


class ScrapeCapability(FetchCapability):
    """Collect article links from the source's homepage with CSS selectors."""

    method = FetchMethod.SCRAPE

    def selectors_for(self, source: Source) -> List[str]:
        """Source selector first, then the generic fallbacks, without repeats."""
        selectors: List[str] = []
        custom = (source.scrape_selector or "").strip()
        for selector in ([custom] if custom else []) + GENERIC_SELECTORS:
            if selector not in selectors:
                selectors.append(selector)
        return selectors

    async def list_candidates(self, source: Source) -> CandidateListing:
        page_url = source.homepage_url or source.feed_url
        if not page_url:
            raise ResolveError(f"{source.name} has no homepage to scrape", [])

        response = await self.fetcher.fetch(page_url)
        items = scrape_links(
            response.body,
            response.final_url or page_url,
            limit=self.settings.scrape_link_cap,
            selectors=self.selectors_for(source),
        )
        return CandidateListing(
            items=items,
            resolved_url=page_url,
            attempted=[page_url],
            mode="scrape",
        )

    async def load_item(self, item: FeedItem) -> FeedItem:
        """Fill title, date, description and canonical hint from the article page.

        A page that cannot be fetched leaves the listed item as it was.
        """
        try:
            response = await self.fetcher.fetch(item.link)
        except FetchError as e:
            logger.debug("Could not load %s: %s", item.link, e)
            return item

        metadata = extract_metadata(response.body, default_url=response.final_url)
        if metadata is None:
            return item

        return item.model_copy(
            update={
                "title": (metadata.title or "").strip() or item.title,
                "description": item.description or metadata.description,
                "published_raw": item.published_raw or metadata.date,
                "published": resolve_published(item.published, parse_date(metadata.date)),
                "canonical_hint": metadata.url or item.canonical_hint,
            }
        )


class SitemapAdapterCapability(FetchCapability):
    """Read same-host URLs from the site's sitemap (or one level of sitemap index)."""

    method = FetchMethod.ADAPTER

    async def _fetch_text(self, url: str, attempted: List[str]) -> Optional[str]:
        attempted.append(url)
        try:
            return (await self.fetcher.fetch(url)).body
        except FetchError as e:
            logger.debug("Sitemap %s unavailable: %s", url, e)
            return None

    async def list_candidates(self, source: Source) -> CandidateListing:
        homepage = source.homepage_url or source.feed_url
        if not homepage:
            raise ResolveError(f"{source.name} has no homepage for sitemap discovery", [])

        host = urlparse(homepage).hostname or ""
        limit = self.settings.scrape_link_cap
        attempted: List[str] = []
        seen = set()
        items: List[FeedItem] = []
        resolved_url = None

        for sitemap_url in candidate_sitemaps(homepage):
            body = await self._fetch_text(sitemap_url, attempted)
            if body is None:
                continue
            try:
                kind, entries = parse_sitemap(body)
            except ValueError as e:
                logger.debug("Skipping %s: %s", sitemap_url, e)
                continue
            resolved_url = sitemap_url

            if kind == "index":
                urlsets = []
                for child_url, _lastmod in entries[:MAX_CHILD_SITEMAPS]:
                    child_body = await self._fetch_text(child_url, attempted)
                    if child_body is None:
                        continue
                    try:
                        child_kind, child_entries = parse_sitemap(child_body)
                    except ValueError:
                        continue
                    if child_kind == "urlset":
                        urlsets.extend(child_entries)
                entries = urlsets

            for url, lastmod in iter_same_host(entries, host):
                if url in seen:
                    continue
                seen.add(url)
                items.append(
                    FeedItem(
                        title=title_from_url(url),
                        link=url,
                        published_raw=lastmod,
                        published=parse_date(lastmod),
                    )
                )
            if len(items) >= limit:
                break

        if resolved_url is None:
            raise ResolveError(f"No sitemap found for {source.name}", attempted)

        return CandidateListing(
            items=items[:limit],
            resolved_url=resolved_url,
            attempted=attempted,
            mode="sitemap",
        )


CAPABILITIES: Dict[FetchMethod, Type[FetchCapability]] = {
    FetchMethod.FEED: FeedCapability,
    FetchMethod.SCRAPE: ScrapeCapability,
    FetchMethod.ADAPTER: SitemapAdapterCapability,
}


def build_capabilities(
    fetcher: ResilientFetcher, settings: Optional[IngestDefaults] = None
) -> Dict[FetchMethod, FetchCapability]:
    """Instantiate one capability per fetch method, sharing ``fetcher``."""
    return {method: cls(fetcher, settings) for method, cls in CAPABILITIES.items()}
