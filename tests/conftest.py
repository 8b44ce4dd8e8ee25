"""Shared fixtures: routed HTTP transport and in-memory stores."""

from typing import Callable, Dict, List, Optional, Union

import httpx
import pytest

from fantasywire.classify import Classifier
from fantasywire.config import ConfigModel, FetchConfig
from fantasywire.config.loader import DEFAULT_CLASSIFIER_RULES, DEFAULT_FILTER_RULES
from fantasywire.db import INSERTED, SKIPPED
from fantasywire.errors import StoreError, StoreUnavailableError
from fantasywire.filtering import AdmissionFilter
from fantasywire.ingestion import ResilientFetcher
from fantasywire.models import IngestLogEntry, IngestReason, Source
from fantasywire.normalize import Normalizer
from fantasywire.pipeline import IngestContext

Route = Union[str, httpx.Response, Callable[[httpx.Request], httpx.Response]]


class Router:
    """MockTransport handler serving fixed bodies by ``scheme://host/path``."""

    def __init__(self, routes: Optional[Dict[str, Route]] = None) -> None:
        self.routes: Dict[str, Route] = dict(routes or {})
        self.calls: List[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        key = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        self.calls.append(key)
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, text="not found")
        if callable(route):
            return route(request)
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, text=route)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class FakeRegistry:
    def __init__(self, sources: List[Source], fail_heal: bool = False) -> None:
        self.sources = sources
        self.fail_heal = fail_heal
        self.feed_updates: Dict[int, str] = {}

    async def list_admitted(self, source_id: Optional[int] = None) -> List[Source]:
        admitted = [s for s in self.sources if s.allowed]
        if source_id is not None:
            admitted = [s for s in admitted if s.id == source_id]
        return sorted(admitted, key=lambda s: (-s.priority, s.id or 0))

    async def update_feed_url(self, source_id: int, feed_url: str) -> None:
        if self.fail_heal:
            raise StoreError("update failed")
        self.feed_updates[source_id] = feed_url
        for source in self.sources:
            if source.id == source_id:
                source.feed_url = feed_url


class FakeArticleStore:
    def __init__(self, unavailable: bool = False) -> None:
        self.unavailable = unavailable
        self.rows: Dict[str, dict] = {}
        self.fingerprints = set()

    async def upsert(self, candidate, source_id: Optional[int]) -> str:
        if self.unavailable:
            raise StoreUnavailableError("connection refused")
        if candidate.canonical_url in self.rows or candidate.fingerprint in self.fingerprints:
            return SKIPPED
        self.rows[candidate.canonical_url] = candidate.to_article(source_id).model_dump()
        self.fingerprints.add(candidate.fingerprint)
        return INSERTED


class FakeLogWriter:
    def __init__(self) -> None:
        self.entries: List[IngestLogEntry] = []

    async def log(self, reason: IngestReason, **fields) -> bool:
        self.entries.append(IngestLogEntry(reason=reason, **fields))
        return True

    def reasons(self) -> List[IngestReason]:
        return [e.reason for e in self.entries]


class FakeBlockList:
    def __init__(self, urls=()) -> None:
        self.urls = set(urls)

    async def is_blocked(self, canonical_url: str) -> bool:
        return canonical_url in self.urls


@pytest.fixture
def fast_fetch_config() -> FetchConfig:
    return FetchConfig(timeout_seconds=2.0, max_retries=2, backoff_seconds=0)


@pytest.fixture
def classifier() -> Classifier:
    return Classifier.from_file(DEFAULT_CLASSIFIER_RULES)


@pytest.fixture
def admission() -> AdmissionFilter:
    return AdmissionFilter.from_file(DEFAULT_FILTER_RULES)


@pytest.fixture
def make_context(fast_fetch_config, classifier, admission):
    """Build an IngestContext wired to a Router and in-memory stores."""

    def _make(
        router: Router,
        sources: List[Source],
        registry: Optional[FakeRegistry] = None,
        articles: Optional[FakeArticleStore] = None,
        blocklist: Optional[FakeBlockList] = None,
    ) -> IngestContext:
        return IngestContext(
            settings=ConfigModel(fetch=fast_fetch_config),
            fetcher=ResilientFetcher(fast_fetch_config, transport=router.transport()),
            registry=registry or FakeRegistry(sources),
            articles=articles or FakeArticleStore(),
            logs=FakeLogWriter(),
            blocklist=blocklist or FakeBlockList(),
            admission=admission,
            normalizer=Normalizer(),
            classifier=classifier,
        )

    return _make


def rss(*items: str) -> str:
    """Minimal RSS 2.0 document around raw ``<item>`` fragments."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel><title>Test</title><link>https://s.com/</link>'
        "<description>Test feed</description>" + "".join(items) + "</channel></rss>"
    )


def rss_item(title: str, link: str, pub_date: str = "Mon, 06 Oct 2025 14:00:00 GMT") -> str:
    return f"<item><title>{title}</title><link>{link}</link><pubDate>{pub_date}</pubDate></item>"
