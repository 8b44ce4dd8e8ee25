"""Turn a raw feed item into a dedup-ready candidate."""

import hashlib
import re
import unicodedata
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..ingestion.dates import parse_date, resolve_published
from ..ingestion.models import FeedItem
from ..models import Article
from .titles import clean_title, compile_cleaners, prenormalize_title
from .urls import canonicalize_url, choose_canonical, domain_of

SLUG_MAX_LENGTH = 80
MIN_WEEK = 1
MAX_WEEK = 18

_WEEK = re.compile(r"\b(?:week|wk)[\s_-]*#?\s*(\d{1,2})", re.IGNORECASE)
_NON_SLUG = re.compile(r"[^a-z0-9]+")

_ARTICLE_WORDS = re.compile(
    r"fantasy|waiver|rank|start|sit|news|injury|mock|sleep|week|vs\.|@|trade|odds|lines|score"
    r"|highlights|report|rumor|notes|cheat|sheet|targets|snaps|analysis|preview|recap|podcast"
    r"|video|live|bonus|code",
    re.IGNORECASE,
)
_NAME_TITLE = re.compile(r"^[A-Za-z][A-Za-z'.-]+( [A-Za-z][A-Za-z'.-]+){1,3}\s*(Jr\.|Sr\.|II|III|IV)?$")
_NAME_SLUG = re.compile(r"^[a-z]+(?:-[a-z]+){1,3}$")
_PLAYER_SECTIONS = {"player", "players", "athlete", "athletes", "people", "bio"}


class NormalizedCandidate(BaseModel):
    """Per-item record handed from normalization to classification and storage."""

    url: str = Field(..., description="Original item URL")
    canonical_url: str = Field(..., description="Deduplication URL")
    domain: str = Field(..., description="Host without www.")
    title: str = Field(..., description="Title as published")
    cleaned_title: str = Field(..., description="Title after cleaning")
    slug: str = Field(..., description="Deterministic slug")
    fingerprint: str = Field(..., description="Hash of canonical url and cleaned title")
    summary: Optional[str] = Field(None, description="Description/summary")
    published_at: Optional[datetime] = Field(None, description="Resolved publication time")
    week: Optional[int] = Field(None, description="Season week", ge=MIN_WEEK, le=MAX_WEEK)
    is_player_page: bool = Field(False, description="Player profile rather than article")
    topics: List[str] = Field(default_factory=list, description="Flat tag set")
    primary_topic: Optional[str] = Field(None, description="Primary topic")
    secondary_topic: Optional[str] = Field(None, description="Secondary topic")
    confidence: Optional[float] = Field(None, description="Classifier confidence")

    def to_article(self, source_id: Optional[int]) -> Article:
        """Article row for this candidate."""
        return Article(source_id=source_id, **self.model_dump())


def slugify(text: str) -> str:
    """Lower-case ASCII slug; empty when nothing transliterates."""
    ascii_text = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    return _NON_SLUG.sub("-", ascii_text.lower()).strip("-")


def make_slug(source_name: str, cleaned_title: str, canonical_url: str) -> str:
    """Slug of ``"<source> <title>"``, or a short URL hash when that is empty."""
    slug = slugify(f"{source_name} {cleaned_title}")
    if len(slug) > SLUG_MAX_LENGTH:
        slug = slug[:SLUG_MAX_LENGTH].rsplit("-", 1)[0] or slug[:SLUG_MAX_LENGTH]
    if slug:
        return slug
    return hashlib.sha256(canonical_url.encode("utf-8")).hexdigest()[:10]


def make_fingerprint(canonical_url: str, cleaned_title: str) -> str:
    """Content hash used as the secondary dedup key."""
    key = f"{canonical_url}|{cleaned_title}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def extract_week(*texts: Optional[str]) -> Optional[int]:
    """First ``week N`` / ``wk N`` mention, clamped to the regular season."""
    for text in texts:
        if not text:
            continue
        match = _WEEK.search(text)
        if match:
            return max(MIN_WEEK, min(MAX_WEEK, int(match.group(1))))
    return None


def looks_like_name_title(title: str) -> bool:
    """Title is just a person's name (2-4 tokens, no article vocabulary)."""
    text = (title or "").strip()
    if len(text) < 3 or len(text) > 48:
        return False
    if _ARTICLE_WORDS.search(text):
        return False
    return bool(_NAME_TITLE.match(text))


def looks_like_player_page(url: str, title: str) -> bool:
    """Player profile pages: a bare-name title, or a bare-name slug under a players path."""
    if looks_like_name_title(title):
        return True
    segments = [s.lower() for s in re.split(r"/+", re.sub(r"^https?://[^/]+", "", url or "")) if s]
    if len(segments) < 2 or not _PLAYER_SECTIONS.intersection(segments[:-1]):
        return False
    slug = segments[-1].replace("_", "-")
    return bool(_NAME_SLUG.match(slug))


class Normalizer:
    """Canonical URL, cleaned title, slug, fingerprint and week for each item."""

    def __init__(self, title_cleaners: Optional[Dict[str, List[str]]] = None) -> None:
        """Initialize normalizer with per-source title cleaners."""
        self._cleaners = compile_cleaners(title_cleaners)

    def normalize(self, item: FeedItem, source_name: str) -> NormalizedCandidate:
        """Build the candidate for one admitted item."""
        original = canonicalize_url(item.link)
        canonical = canonicalize_url(choose_canonical(item.canonical_hint, original))
        title = prenormalize_title(item.title)
        cleaned = clean_title(item.title, self._cleaners.get(source_name, ()))

        return NormalizedCandidate(
            url=item.link,
            canonical_url=canonical,
            domain=domain_of(canonical),
            title=title,
            cleaned_title=cleaned,
            slug=make_slug(source_name, cleaned, canonical),
            fingerprint=make_fingerprint(canonical, cleaned),
            summary=item.description,
            published_at=resolve_published(item.published, parse_date(item.published_raw)),
            week=extract_week(cleaned, canonical),
            is_player_page=looks_like_player_page(canonical, cleaned),
        )
