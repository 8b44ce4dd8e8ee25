"""Ingest orchestrator: one batch across all admitted sources."""

import asyncio
import logging
from enum import Enum
from typing import List, Optional

import pendulum
from pydantic import BaseModel, Field, ValidationError

from ..config import Config
from ..db import INSERTED
from ..errors import FantasyWireError, FetchError, ResolveError, StoreError, StoreUnavailableError
from ..ingestion import FeedItem
from ..models import IngestReason, Source
from ..normalize import domain_of, is_utility_url
from .context import IngestContext

logger = logging.getLogger(__name__)

SCRAPE_MODES = ("html-scrape", "scrape", "sitemap")


class SourceState(str, Enum):
    """Per-source progress through a batch."""

    PENDING = "pending"
    FETCHING = "fetching"
    PARSED = "parsed"
    FETCH_FAILED = "fetch_failed"
    FILTERING = "filtering"
    DONE = "done"


_TRANSITIONS = {
    SourceState.PENDING: {SourceState.FETCHING},
    SourceState.FETCHING: {SourceState.PARSED, SourceState.FETCH_FAILED},
    SourceState.PARSED: {SourceState.FILTERING},
    SourceState.FILTERING: {SourceState.DONE},
    SourceState.FETCH_FAILED: set(),
    SourceState.DONE: set(),
}


class SourceReport(BaseModel):
    """Diagnostics for one source in one batch."""

    source_id: Optional[int] = Field(None, description="Source ID")
    name: str = Field(..., description="Source name")
    state: SourceState = Field(SourceState.PENDING, description="Current state")
    mode: Optional[str] = Field(None, description="How candidates were obtained")
    resolved_url: Optional[str] = Field(None, description="URL the items came from")
    discovered_url: Optional[str] = Field(None, description="Feed URL found by discovery")
    healed: bool = Field(False, description="Registry feed URL was updated")
    attempted: List[str] = Field(default_factory=list, description="URLs tried")
    seen: int = Field(0, description="Items considered")
    added: int = Field(0, description="Articles inserted")
    skipped: int = Field(0, description="Duplicates skipped")
    rejected: int = Field(0, description="Items filtered out")
    errors: List[str] = Field(default_factory=list, description="Errors for this source")

    def advance(self, state: SourceState) -> None:
        """Move to ``state``; illegal transitions are programming errors."""
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"{self.name}: cannot go from {self.state.value} to {state.value}")
        self.state = state


class BatchReport(BaseModel):
    """Aggregate result of one ingest batch."""

    started_at: Optional[str] = Field(None, description="Batch start (ISO 8601)")
    finished_at: Optional[str] = Field(None, description="Batch end (ISO 8601)")
    sources: List[SourceReport] = Field(default_factory=list)

    @property
    def discovered(self) -> int:
        return sum(s.seen for s in self.sources)

    @property
    def inserted(self) -> int:
        return sum(s.added for s in self.sources)

    @property
    def updated(self) -> int:
        # Articles are immutable after insert
        return 0

    @property
    def skipped(self) -> int:
        return sum(s.skipped for s in self.sources)

    @property
    def errors(self) -> List[str]:
        return [f"{s.name}: {e}" for s in self.sources for e in s.errors]

    def summary(self) -> dict:
        """Counters returned to the trigger caller in every mode."""
        return {
            "sources": len(self.sources),
            "discovered": self.discovered,
            "inserted": self.inserted,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": len(self.errors),
        }


class IngestOrchestrator:
    """Drive resolve, parse, admit, normalize, classify and upsert for each source.

    A source that fails to fetch is logged and skipped. Only an unreachable
    datastore (``StoreUnavailableError``) aborts the batch.
    """

    def __init__(self, context: IngestContext) -> None:
        """Initialize orchestrator."""
        self.context = context
        self._abort = asyncio.Event()

    async def run(self, source_id: Optional[int] = None, limit: Optional[int] = None) -> BatchReport:
        """Run one batch, optionally restricted to a single source."""
        report = BatchReport(started_at=pendulum.now("UTC").to_iso8601_string())
        self._abort = asyncio.Event()

        sources = await self.context.registry.list_admitted(source_id)
        logger.info("Ingesting %d source(s)", len(sources))

        semaphore = asyncio.Semaphore(self.context.settings.ingest.max_concurrent_sources)

        async def process_with_semaphore(source: Source):
            async with semaphore:
                if self._abort.is_set():
                    return SourceReport(source_id=source.id, name=source.name)
                return await self.process_source(source, limit)

        results = await asyncio.gather(
            *(process_with_semaphore(s) for s in sources), return_exceptions=True
        )

        # Only an unreachable datastore surfaces to the caller
        for source, result in zip(sources, results):
            if isinstance(result, (StoreUnavailableError, asyncio.CancelledError)):
                raise result
            if isinstance(result, Exception):
                logger.error("%s: source failed: %r", source.name, result)
                result = SourceReport(
                    source_id=source.id,
                    name=source.name,
                    errors=[f"{type(result).__name__}: {result}"],
                )
            report.sources.append(result)

        report.finished_at = pendulum.now("UTC").to_iso8601_string()
        logger.info(
            "Batch done: %d discovered, %d inserted, %d skipped, %d error(s)",
            report.discovered,
            report.inserted,
            report.skipped,
            len(report.errors),
        )
        return report

    async def _log(self, reason: IngestReason, source: Source, **fields) -> None:
        await self.context.logs.log(reason, source_id=source.id, **fields)

    async def process_source(self, source: Source, limit: Optional[int] = None) -> SourceReport:
        """Run one source through the pipeline; fetch failures never escape."""
        report = SourceReport(source_id=source.id, name=source.name)
        capability = self.context.capabilities[source.fetch_method]
        cap = limit or self.context.settings.ingest.max_items_per_source

        report.advance(SourceState.FETCHING)
        try:
            listing = await capability.list_candidates(source)
        except (FetchError, ResolveError) as e:
            report.attempted = getattr(e, "attempted", None) or [getattr(e, "url", "")]
            return await self._fetch_failed(source, report, str(e))
        except StoreUnavailableError:
            raise
        except Exception as e:
            logger.exception("Unexpected failure fetching %s", source.name)
            return await self._fetch_failed(source, report, f"{type(e).__name__}: {e}")

        report.advance(SourceState.PARSED)
        report.mode = listing.mode
        report.resolved_url = listing.resolved_url
        report.discovered_url = listing.discovered_url
        report.attempted = listing.attempted

        if listing.parse_error:
            await self._log(
                IngestReason.PARSE_ERROR,
                source,
                url=listing.resolved_url,
                detail=f"{listing.parse_error}; used {listing.mode}",
            )
        if not listing.items and listing.mode in SCRAPE_MODES:
            await self._log(
                IngestReason.SCRAPE_NO_MATCHES,
                source,
                url=listing.resolved_url,
                detail=f"No links found via {listing.mode}",
            )

        if listing.discovered_url and source.id is not None:
            report.healed = await self._self_heal(source, listing.discovered_url)

        report.advance(SourceState.FILTERING)
        for item in listing.items[:cap]:
            if self._abort.is_set():
                break
            await self.process_item(source, item, report)

        report.advance(SourceState.DONE)
        logger.info(
            "%s: %d seen, %d added, %d skipped, %d rejected",
            source.name,
            report.seen,
            report.added,
            report.skipped,
            report.rejected,
        )
        return report

    async def _fetch_failed(self, source: Source, report: SourceReport, message: str) -> SourceReport:
        report.advance(SourceState.FETCH_FAILED)
        report.errors.append(message)
        logger.warning("%s: fetch failed: %s", source.name, message)
        detail = message
        if report.attempted:
            detail = f"{message}; tried: {', '.join(u for u in report.attempted if u)}"
        await self._log(
            IngestReason.FETCH_ERROR,
            source,
            url=source.feed_url or source.homepage_url,
            detail=detail,
        )
        return report

    async def _self_heal(self, source: Source, discovered_url: str) -> bool:
        """Best-effort registry update; a failure never affects the items."""
        try:
            await self.context.registry.update_feed_url(source.id, discovered_url)
            return True
        except StoreError as e:
            logger.warning("%s: could not store discovered feed %s: %s", source.name, discovered_url, e)
            return False

    async def _reject(
        self,
        source: Source,
        item: FeedItem,
        report: SourceReport,
        reason: IngestReason,
        detail: Optional[str],
    ) -> None:
        report.rejected += 1
        await self._log(
            reason,
            source,
            url=item.link,
            title=item.title,
            domain=domain_of(item.link),
            detail=detail,
        )

    async def process_item(self, source: Source, item: FeedItem, report: SourceReport) -> None:
        """Admit, normalize, classify and store one item; per-item errors are logged."""
        report.seen += 1
        ctx = self.context
        try:
            if is_utility_url(item.link):
                await self._reject(source, item, report, IngestReason.FILTERED_OUT, "utility_url")
                return

            decision = ctx.admission.evaluate(item.title, item.link, source.identity, item.description)
            if not decision.admitted:
                await self._reject(source, item, report, decision.reason, decision.detail)
                return

            capability = ctx.capabilities[source.fetch_method]
            item = await capability.load_item(item)
            candidate = ctx.normalizer.normalize(item, source.name)
            if not candidate.cleaned_title:
                await self._reject(source, item, report, IngestReason.INVALID_ITEM, "empty title")
                return

            if await ctx.blocklist.is_blocked(candidate.canonical_url):
                await self._reject(source, item, report, IngestReason.FILTERED_OUT, "blocked_url")
                return

            result = ctx.classifier.classify(
                candidate.cleaned_title,
                candidate.summary,
                source.name,
                candidate.week,
                candidate.canonical_url,
            )
            candidate = candidate.model_copy(
                update={
                    "topics": result.topics,
                    "primary_topic": result.primary,
                    "secondary_topic": result.secondary,
                    "confidence": result.confidence,
                    "week": result.week,
                }
            )

            outcome = await ctx.articles.upsert(candidate, source.id)
            if outcome == INSERTED:
                report.added += 1
                reason = IngestReason.UPSERT_INSERTED
            else:
                report.skipped += 1
                reason = IngestReason.UPSERT_SKIPPED
            await self._log(
                reason,
                source,
                url=candidate.canonical_url,
                title=candidate.cleaned_title,
                domain=candidate.domain,
                detail=result.primary,
            )
        except StoreUnavailableError:
            self._abort.set()
            raise
        except (FantasyWireError, ValidationError, ValueError) as e:
            report.errors.append(f"{item.link}: {e}")
            logger.warning("%s: item failed %s: %s", source.name, item.link, e)
            await self._reject(source, item, report, IngestReason.INVALID_ITEM, str(e)[:500])
        except Exception as e:
            message = f"{type(e).__name__}: {e}"
            report.errors.append(f"{item.link}: {message}")
            logger.exception("%s: unexpected failure on %s", source.name, item.link)
            await self._reject(source, item, report, IngestReason.INVALID_ITEM, message[:500])


async def run_ingest(
    config: Config,
    source_id: Optional[int] = None,
    limit: Optional[int] = None,
) -> BatchReport:
    """Open a context, run one batch and close everything again."""
    async with IngestContext.create(config) as context:
        return await IngestOrchestrator(context).run(source_id=source_id, limit=limit)


def run_ingest_sync(
    config: Config,
    source_id: Optional[int] = None,
    limit: Optional[int] = None,
) -> BatchReport:
    """Synchronous wrapper for run_ingest."""
    return asyncio.run(run_ingest(config, source_id=source_id, limit=limit))
