"""Data models for fantasywire."""

from .article import Article
from .ingest_log import IngestLogEntry, IngestReason
from .source import FetchMethod, Source

__all__ = [
    "Article",
    "FetchMethod",
    "IngestLogEntry",
    "IngestReason",
    "Source",
]
