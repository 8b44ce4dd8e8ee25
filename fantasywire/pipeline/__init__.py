"""Batch ingest pipeline."""

from .context import IngestContext
from .orchestrator import (
    BatchReport,
    IngestOrchestrator,
    SourceReport,
    SourceState,
    run_ingest,
    run_ingest_sync,
)

__all__ = [
    "BatchReport",
    "IngestContext",
    "IngestOrchestrator",
    "SourceReport",
    "SourceState",
    "run_ingest",
    "run_ingest_sync",
]
