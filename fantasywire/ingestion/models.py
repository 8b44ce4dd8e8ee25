"""Data models for ingestion."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class FetchResponse(BaseModel):
    """Body of a successful fetch."""

    url: str = Field(..., description="Requested URL")
    final_url: str = Field(..., description="URL after redirects")
    status: int = Field(..., description="HTTP status code")
    body: str = Field(..., description="Decoded response text")


class FeedItem(BaseModel):
    """One item as read from a feed, scrape or sitemap; never persisted."""

    title: str = Field(..., description="Item title")
    link: str = Field(..., description="Absolute item URL")
    published_raw: Optional[str] = Field(None, description="Publication date as published")
    published: Optional[datetime] = Field(None, description="Parsed publication date (UTC)")
    description: Optional[str] = Field(None, description="Description/summary")
    canonical_hint: Optional[str] = Field(None, description="Alternate canonical URL from page metadata")


class ResolvedFeed(BaseModel):
    """Result of walking the feed candidates for a source."""

    body: str = Field(..., description="Feed document text")
    final_url: str = Field(..., description="URL that produced the document")
    discovered_url: Optional[str] = Field(
        None, description="Feed found via homepage discovery that differs from the stored one"
    )
    attempted: List[str] = Field(default_factory=list, description="URLs tried, in order")


class CandidateListing(BaseModel):
    """Candidate items produced by a fetch capability for one source."""

    items: List[FeedItem] = Field(default_factory=list, description="Candidate items")
    resolved_url: Optional[str] = Field(None, description="URL the items came from")
    discovered_url: Optional[str] = Field(None, description="Feed URL to self-heal onto the source")
    attempted: List[str] = Field(default_factory=list, description="URLs tried")
    parse_error: Optional[str] = Field(None, description="Feed parse failure that forced a scrape")
    mode: str = Field("feed", description="feed, html-scrape, scrape or sitemap")
