"""Diagnostic ingest log entries."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import DBModel


class IngestReason(str, Enum):
    """Fixed reason vocabulary; the health dashboard groups on these."""

    FETCH_ERROR = "fetch_error"
    PARSE_ERROR = "parse_error"
    SCRAPE_NO_MATCHES = "scrape_no_matches"
    INVALID_ITEM = "invalid_item"
    BLOCKED_BY_FILTER = "blocked_by_filter"
    NON_NFL_LEAGUE = "non_nfl_league"
    FILTERED_OUT = "filtered_out"
    UPSERT_INSERTED = "upsert_inserted"
    UPSERT_UPDATED = "upsert_updated"
    UPSERT_SKIPPED = "upsert_skipped"


class IngestLogEntry(DBModel):
    """Append-only diagnostic row."""

    source_id: Optional[int] = Field(None, description="Source the entry concerns")
    url: Optional[str] = Field(None, description="URL snapshot")
    title: Optional[str] = Field(None, description="Title snapshot")
    domain: Optional[str] = Field(None, description="Host of the URL")
    reason: IngestReason = Field(..., description="Reason code")
    detail: Optional[str] = Field(None, description="Free-text detail")
    logged_at: Optional[datetime] = Field(None, description="Timestamp")
