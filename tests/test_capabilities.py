"""Tests for fetch capabilities."""

import asyncio

import pytest

from fantasywire.config import FetchConfig, IngestDefaults
from fantasywire.errors import ResolveError
from fantasywire.ingestion import FeedItem, ResilientFetcher, build_capabilities
from fantasywire.ingestion.capabilities import GENERIC_SELECTORS, ScrapeCapability
from fantasywire.ingestion.sitemap import candidate_sitemaps, parse_sitemap, title_from_url
from fantasywire.models import FetchMethod, IngestReason, Source
from fantasywire.pipeline import IngestOrchestrator

from .conftest import Router

LISTING_PAGE = """
<html><body>
  <a href="/about">About the staff</a>
  <h2><a href="/nfl/week-6-waiver-wire-targets">Week 6 Waiver Wire Targets</a></h2>
</body></html>
"""

SITEMAP_INDEX = """<?xml version="1.0" encoding="UTF-8"?>
<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <sitemap><loc>https://m.com/sitemap-posts.xml</loc></sitemap>
</sitemapindex>
"""

URLSET = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <url><loc>https://m.com/nfl/week-3-rankings</loc><lastmod>2025-09-20</lastmod></url>
  <url><loc>https://other.com/nfl/elsewhere</loc></url>
  <url><loc>https://m.com/nfl/week-3-rankings</loc></url>
</urlset>
"""


def with_capabilities(router, coro_factory):
    async def _run():
        config = FetchConfig(max_retries=0, backoff_seconds=0)
        async with ResilientFetcher(config, transport=router.transport()) as fetcher:
            capabilities = build_capabilities(fetcher, IngestDefaults())
            return await coro_factory(capabilities)

    return asyncio.run(_run())


def test_every_fetch_method_has_a_capability():
    router = Router()

    capabilities = with_capabilities(router, lambda caps: asyncio.sleep(0, result=caps))

    assert set(capabilities) == set(FetchMethod)


def test_html_served_as_feed_falls_back_to_scrape():
    router = Router({"https://h.com/feed": LISTING_PAGE})
    source = Source(id=3, name="H", feed_url="https://h.com/feed")

    listing = with_capabilities(
        router, lambda caps: caps[FetchMethod.FEED].list_candidates(source)
    )

    assert listing.mode == "html-scrape"
    assert listing.parse_error
    assert [i.link for i in listing.items] == ["https://h.com/nfl/week-6-waiver-wire-targets"]


def test_html_fallback_logs_parse_error(make_context):
    router = Router({"https://h.com/feed": LISTING_PAGE})
    source = Source(id=3, name="H", feed_url="https://h.com/feed")
    context = make_context(router, [source])

    async def _run():
        try:
            return await IngestOrchestrator(context).run()
        finally:
            await context.fetcher.close()

    report = asyncio.run(_run())

    assert report.inserted == 1
    assert IngestReason.PARSE_ERROR in context.logs.reasons()


def test_sitemap_index_is_followed_one_level():
    router = Router(
        {
            "https://m.com/sitemap.xml": SITEMAP_INDEX,
            "https://m.com/sitemap-posts.xml": URLSET,
        }
    )
    source = Source(
        id=4, name="M", homepage_url="https://m.com/", fetch_method=FetchMethod.ADAPTER
    )

    listing = with_capabilities(
        router, lambda caps: caps[FetchMethod.ADAPTER].list_candidates(source)
    )

    assert listing.mode == "sitemap"
    assert listing.resolved_url == "https://m.com/sitemap.xml"
    assert [i.link for i in listing.items] == ["https://m.com/nfl/week-3-rankings"]
    assert listing.items[0].title == "week 3 rankings"
    assert listing.items[0].published is not None


def test_missing_sitemap_is_a_resolve_error():
    source = Source(
        id=4, name="M", homepage_url="https://m.com/", fetch_method=FetchMethod.ADAPTER
    )

    with pytest.raises(ResolveError) as exc_info:
        with_capabilities(Router(), lambda caps: caps[FetchMethod.ADAPTER].list_candidates(source))

    assert exc_info.value.attempted == candidate_sitemaps("https://m.com/")


def test_parse_sitemap_rejects_other_documents():
    with pytest.raises(ValueError):
        parse_sitemap("<html></html>")
    with pytest.raises(ValueError):
        parse_sitemap("not xml at all")


def test_title_from_url():
    assert title_from_url("https://m.com/nfl/start_sit-week-4.html") == "start sit week 4"
    assert title_from_url("https://m.com/") == "https://m.com/"


def test_scrape_selectors_put_source_selector_first():
    capability = ScrapeCapability(fetcher=None)
    source = Source(name="X", homepage_url="https://x.com/", scrape_selector=" h2 a[href^=\"/\"] ")

    selectors = capability.selectors_for(source)

    assert selectors[0] == 'h2 a[href^="/"]'
    assert len(selectors) == len(GENERIC_SELECTORS)


def test_scrape_uses_custom_selector():
    page = """
    <div class="latest"><a href="/nfl/injury-report-week-4">Injury report for Week 4</a></div>
    <h2><a href="/nfl/other-story">Some other story</a></h2>
    """
    router = Router({"https://x.com/": page})
    source = Source(
        id=5,
        name="X",
        homepage_url="https://x.com/",
        scrape_selector="div.latest a",
        fetch_method=FetchMethod.SCRAPE,
    )

    listing = with_capabilities(
        router, lambda caps: caps[FetchMethod.SCRAPE].list_candidates(source)
    )

    assert listing.mode == "scrape"
    assert [i.link for i in listing.items] == ["https://x.com/nfl/injury-report-week-4"]


def test_scrape_load_item_keeps_listing_when_page_fails():
    item = FeedItem(title="Listed title", link="https://x.com/nfl/gone")

    loaded = with_capabilities(Router(), lambda caps: caps[FetchMethod.SCRAPE].load_item(item))

    assert loaded == item


def test_scrape_load_item_reads_page_metadata():
    page = """
    <html><head>
      <title>Week 4 Start Sit Decisions</title>
      <meta property="og:title" content="Week 4 Start Sit Decisions">
      <meta name="description" content="Who to start this week.">
    </head><body><article><p>Body text.</p></article></body></html>
    """
    router = Router({"https://x.com/nfl/start-sit": page})
    item = FeedItem(title="Start/Sit", link="https://x.com/nfl/start-sit")

    loaded = with_capabilities(router, lambda caps: caps[FetchMethod.SCRAPE].load_item(item))

    assert loaded.title == "Week 4 Start Sit Decisions"
    assert loaded.description == "Who to start this week."
