"""Database layer for fantasywire."""

from .articles import INSERTED, SKIPPED, ArticleStore
from .blocklist import BlockList
from .connection import DatabaseConfig, create_pool, get_connection, pooled_connection
from .ingest_logs import IngestLogWriter
from .init import init_database, validate_connection
from .sources import SourceRegistry

__all__ = [
    "INSERTED",
    "SKIPPED",
    "ArticleStore",
    "BlockList",
    "DatabaseConfig",
    "IngestLogWriter",
    "SourceRegistry",
    "create_pool",
    "get_connection",
    "init_database",
    "pooled_connection",
    "validate_connection",
]
