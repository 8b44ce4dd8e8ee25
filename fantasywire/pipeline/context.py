"""Explicit per-process context threaded through every pipeline stage."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import httpx
from psycopg_pool import AsyncConnectionPool, PoolTimeout

from ..classify import Classifier
from ..config import Config, ConfigModel
from ..db import ArticleStore, BlockList, IngestLogWriter, SourceRegistry, create_pool
from ..errors import StoreUnavailableError
from ..filtering import AdmissionFilter
from ..ingestion import FetchCapability, ResilientFetcher, build_capabilities
from ..models import FetchMethod
from ..normalize import Normalizer

logger = logging.getLogger(__name__)

POOL_OPEN_TIMEOUT = 10.0


class IngestContext:
    """Configuration, connection pool, HTTP client and pipeline stages for one process."""

    def __init__(
        self,
        settings: ConfigModel,
        fetcher: ResilientFetcher,
        registry: SourceRegistry,
        articles: ArticleStore,
        logs: IngestLogWriter,
        blocklist: BlockList,
        admission: AdmissionFilter,
        normalizer: Normalizer,
        classifier: Classifier,
        capabilities: Optional[Dict[FetchMethod, FetchCapability]] = None,
        pool: Optional[AsyncConnectionPool] = None,
    ) -> None:
        """Initialize context from already-built collaborators."""
        self.settings = settings
        self.fetcher = fetcher
        self.registry = registry
        self.articles = articles
        self.logs = logs
        self.blocklist = blocklist
        self.admission = admission
        self.normalizer = normalizer
        self.classifier = classifier
        self.capabilities = capabilities or build_capabilities(fetcher, settings.ingest)
        self.pool = pool

    @classmethod
    @asynccontextmanager
    async def create(
        cls,
        config: Config,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> AsyncIterator["IngestContext"]:
        """Open the pool and HTTP client, and close both on exit.

        Raises:
            StoreUnavailableError: the database could not be reached.
        """
        settings = config.config
        admission = AdmissionFilter.from_file(
            config.filter_rules_path, target_league=settings.ingest.target_league
        )
        classifier = Classifier.from_file(config.classifier_rules_path)

        pool = create_pool(config.get_db_config())
        try:
            await pool.open(wait=True, timeout=POOL_OPEN_TIMEOUT)
        except PoolTimeout as e:
            await pool.close()
            raise StoreUnavailableError(f"Could not connect to database: {e}") from e

        fetcher = ResilientFetcher(settings.fetch, transport=transport)
        try:
            yield cls(
                settings=settings,
                fetcher=fetcher,
                registry=SourceRegistry(pool),
                articles=ArticleStore(pool),
                logs=IngestLogWriter(pool),
                blocklist=BlockList(pool),
                admission=admission,
                normalizer=Normalizer(settings.title_cleaners),
                classifier=classifier,
                pool=pool,
            )
        finally:
            await fetcher.close()
            await pool.close()
            logger.debug("Ingest context closed")
