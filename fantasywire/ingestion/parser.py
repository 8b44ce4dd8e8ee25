"""Feed parsing across RSS 2.0, Atom and RDF, plus the HTML link-scrape fallback."""

import io
import re
from enum import Enum
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urljoin, urlparse

import feedparser
from bs4 import BeautifulSoup

from ..errors import UnrecognizedFeedFormatError
from .dates import from_struct_time, parse_date, resolve_published
from .models import FeedItem
from .sanitizer import sanitize_feed_text


class FeedDialect(str, Enum):
    """Feed shapes we normalize."""

    RSS = "rss"
    ATOM = "atom"
    RDF = "rdf"


# Path segments that never lead to an article
NON_ARTICLE_SEGMENTS = frozenset(
    {
        "about",
        "account",
        "advertise",
        "author",
        "authors",
        "careers",
        "category",
        "contact",
        "login",
        "newsletter",
        "page",
        "pricing",
        "privacy",
        "shop",
        "signin",
        "signup",
        "store",
        "subscribe",
        "tag",
        "tags",
        "terms",
    }
)

MIN_ANCHOR_TEXT = 6

_ANGLE_WRAPPED = re.compile(r"^\s*<\s*(.*?)\s*>\s*$")
_HTTP_LINK = re.compile(r"^https?://", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def detect_dialect(version: str) -> Optional[FeedDialect]:
    """Map feedparser's version string onto one of the supported dialects."""
    if not version:
        return None
    if version.startswith("atom"):
        return FeedDialect.ATOM
    if version in ("rss090", "rss10"):
        return FeedDialect.RDF
    if version.startswith("rss"):
        return FeedDialect.RSS
    return None


def unwrap_link(link: str) -> str:
    """Strip literal angle brackets some feeds put around bare links."""
    match = _ANGLE_WRAPPED.match(link or "")
    return match.group(1) if match else (link or "").strip()


def _entry_link(entry, dialect: FeedDialect) -> str:
    if dialect == FeedDialect.ATOM:
        links = entry.get("links") or []
        for link in links:
            if link.get("rel", "alternate") == "alternate" and link.get("href"):
                return link["href"]
    link = entry.get("link") or ""
    if not link:
        guid = entry.get("id") or ""
        if _HTTP_LINK.match(unwrap_link(guid)):
            link = guid
    return link


def _entry_text(value) -> str:
    # Atom text constructs occasionally surface as {"value": ...}
    if isinstance(value, dict):
        value = value.get("value") or value.get("text") or ""
    return _WHITESPACE.sub(" ", str(value or "")).strip()


def parse_feed(raw_text: str) -> List[FeedItem]:
    """Sanitize and parse feed text into items.

    Raises:
        UnrecognizedFeedFormatError: the document is not RSS 2.0, Atom or RDF.
    """
    sanitized = sanitize_feed_text(raw_text)
    parsed = feedparser.parse(io.BytesIO(sanitized.encode("utf-8")))

    dialect = detect_dialect(parsed.get("version", ""))
    if dialect is None:
        raise UnrecognizedFeedFormatError(parsed.get("version", ""))

    items: List[FeedItem] = []
    for entry in parsed.entries:
        title = _entry_text(entry.get("title"))
        link = unwrap_link(_entry_link(entry, dialect))
        if not title or not _HTTP_LINK.match(link):
            continue

        published_raw = entry.get("published") or entry.get("updated")
        published = resolve_published(
            from_struct_time(entry.get("published_parsed")),
            from_struct_time(entry.get("updated_parsed")),
            parse_date(published_raw),
        )
        description = entry.get("summary") or entry.get("description")

        items.append(
            FeedItem(
                title=title,
                link=link,
                published_raw=published_raw,
                published=published,
                description=_entry_text(description) or None,
            )
        )

    return items


def _same_site(host: str, base_host: str) -> bool:
    strip = lambda h: h.lower()[4:] if h.lower().startswith("www.") else h.lower()
    return strip(host) == strip(base_host)


def looks_like_non_article(url: str) -> bool:
    """True for navigation, account and listing pages."""
    segments = [s.lower() for s in urlparse(url).path.split("/") if s]
    if not segments:
        return True
    return any(seg in NON_ARTICLE_SEGMENTS for seg in segments)


def scrape_links(
    html: str,
    base_url: str,
    limit: int = 100,
    selectors: Optional[Sequence[str]] = None,
) -> List[FeedItem]:
    """Collect same-host article links from an HTML page.

    With ``selectors`` the first selector that yields any link wins; without,
    every anchor on the page is considered.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    base_host = urlparse(base_url).hostname or ""

    groups: Iterable[list]
    if selectors:
        groups = (_select_anchors(soup, sel) for sel in selectors)
    else:
        groups = [soup.find_all("a", href=True)]

    for anchors in groups:
        items = _collect(anchors, base_url, base_host, limit)
        if items:
            return items
    return []


def _select_anchors(soup: BeautifulSoup, selector: str) -> list:
    anchors = []
    try:
        nodes = soup.select(selector)
    except ValueError:
        # Malformed operator-supplied selector
        return anchors
    for node in nodes:
        if node.name == "a" and node.get("href"):
            anchors.append(node)
            continue
        parent = node.find_parent("a", href=True)
        child = node.find("a", href=True)
        if parent is not None:
            anchors.append(parent)
        elif child is not None:
            anchors.append(child)
    return anchors


def _collect(anchors: Iterable, base_url: str, base_host: str, limit: int) -> List[FeedItem]:
    seen = set()
    items: List[FeedItem] = []
    for anchor in anchors:
        if len(items) >= limit:
            break
        href = (anchor.get("href") or "").strip()
        if not href or href.startswith(("#", "javascript:", "mailto:")):
            continue
        absolute = urljoin(base_url, href).split("#", 1)[0]
        parts = urlparse(absolute)
        if parts.scheme not in ("http", "https") or not _same_site(parts.hostname or "", base_host):
            continue
        if absolute in seen or looks_like_non_article(absolute):
            continue
        text = _WHITESPACE.sub(" ", anchor.get_text(" ")).strip()
        if len(text) < MIN_ANCHOR_TEXT:
            continue
        seen.add(absolute)
        items.append(FeedItem(title=text, link=absolute))
    return items
