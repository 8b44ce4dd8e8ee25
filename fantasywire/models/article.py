"""Article model for persisted, deduplicated articles."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import DBModel


class Article(DBModel):
    """Article model.

    Rows are created once by ingestion and never mutated by it afterwards;
    ``image_url`` and ``is_player_page`` may be filled in by other enrichers.
    """

    source_id: Optional[int] = Field(None, description="Foreign key to sources table")
    url: str = Field(..., description="Original item URL")
    canonical_url: str = Field(..., description="Deduplication URL")
    domain: str = Field(..., description="Host without www.")
    title: str = Field(..., description="Title as published")
    cleaned_title: str = Field(..., description="Title after cleaning")
    slug: str = Field(..., description="Deterministic URL slug")
    fingerprint: str = Field(..., description="Hash of canonical url and cleaned title")
    summary: Optional[str] = Field(None, description="Feed description")
    published_at: Optional[datetime] = Field(None, description="Publication timestamp")
    discovered_at: Optional[datetime] = Field(None, description="When ingestion first saw it")
    topics: List[str] = Field(default_factory=list, description="Flat tag set")
    primary_topic: Optional[str] = Field(None, description="Primary topic bucket")
    secondary_topic: Optional[str] = Field(None, description="Secondary topic bucket")
    confidence: Optional[float] = Field(None, description="Classifier confidence")
    week: Optional[int] = Field(None, description="Season week", ge=1, le=18)
    image_url: Optional[str] = Field(None, description="Populated by image enrichment")
    is_player_page: bool = Field(False, description="Player profile rather than article")
