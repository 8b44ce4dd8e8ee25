"""Source registry record."""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from .base import DBModel


class FetchMethod(str, Enum):
    """How candidate items are obtained for a source."""

    FEED = "feed"
    SCRAPE = "scrape"
    ADAPTER = "adapter"


class Source(DBModel):
    """Publisher configuration, maintained by the admin surface."""

    name: str = Field(..., description="Source name")
    feed_url: Optional[str] = Field(None, description="Stored feed endpoint")
    homepage_url: Optional[str] = Field(None, description="Publisher homepage")
    scrape_selector: Optional[str] = Field(None, description="CSS selector for link scraping")
    fetch_method: FetchMethod = Field(FetchMethod.FEED, description="Fetch capability tag")
    allowed: bool = Field(True, description="Whether the source is polled")
    priority: int = Field(0, description="Higher priority sources are processed first")

    @field_validator("fetch_method", mode="before")
    @classmethod
    def default_fetch_method(cls, v):
        """Registry rows may carry NULL or legacy tags."""
        if v is None or v == "":
            return FetchMethod.FEED
        if isinstance(v, str) and v.lower() in ("rss", "atom"):
            return FetchMethod.FEED
        return v

    @field_validator("priority", mode="before")
    @classmethod
    def default_priority(cls, v):
        """NULL priority sorts with the default."""
        return 0 if v is None else v

    @property
    def identity(self) -> str:
        """Identifier used to match per-source filter rules."""
        return str(self.id) if self.id is not None else self.name
