"""Sitemap reading for sources without a usable feed."""

import logging
import xml.etree.ElementTree as ET
from typing import Iterator, List, Optional, Tuple
from urllib.parse import unquote, urlparse

logger = logging.getLogger(__name__)

SITEMAP_PATHS = ("/sitemap.xml", "/sitemap_index.xml", "/sitemap-index.xml")

# Child sitemaps followed from an index
MAX_CHILD_SITEMAPS = 6


def _strip_namespace(tag: str) -> str:
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def candidate_sitemaps(homepage_url: str) -> List[str]:
    """Well-known sitemap locations on the homepage's origin."""
    parts = urlparse(homepage_url)
    if not parts.scheme or not parts.netloc:
        return []
    origin = f"{parts.scheme}://{parts.netloc}"
    return [origin + path for path in SITEMAP_PATHS]


def _child_text(elem: ET.Element, name: str) -> Optional[str]:
    for child in elem:
        if _strip_namespace(child.tag) == name and child.text and child.text.strip():
            return child.text.strip()
    return None


def parse_sitemap(data: str) -> Tuple[str, List[Tuple[str, Optional[str]]]]:
    """Parse a sitemap document.

    Returns ``("index", [(child_url, lastmod), ...])`` for a sitemap index or
    ``("urlset", [(page_url, lastmod), ...])`` for a URL set.

    Raises:
        ValueError: the document is not a sitemap.
    """
    try:
        root = ET.fromstring(data.strip().encode("utf-8"))
    except ET.ParseError as e:
        raise ValueError(f"Invalid sitemap XML: {e}") from e

    kind = _strip_namespace(root.tag)
    if kind == "sitemapindex":
        entry_tag = "sitemap"
        label = "index"
    elif kind == "urlset":
        entry_tag = "url"
        label = "urlset"
    else:
        raise ValueError(f"Not a sitemap: <{kind}>")

    entries = []
    for elem in root:
        if _strip_namespace(elem.tag) != entry_tag:
            continue
        loc = _child_text(elem, "loc")
        if loc:
            entries.append((loc, _child_text(elem, "lastmod")))
    return label, entries


def iter_same_host(
    entries: List[Tuple[str, Optional[str]]], host: str
) -> Iterator[Tuple[str, Optional[str]]]:
    """Entries whose URL lives on ``host``."""
    host = host.lower()
    for url, lastmod in entries:
        if (urlparse(url).hostname or "").lower() == host:
            yield url, lastmod


def title_from_url(url: str) -> str:
    """Readable title from the last path segment of a URL."""
    segments = [s for s in urlparse(url).path.split("/") if s]
    if not segments:
        return url
    slug = segments[-1].rsplit(".", 1)[0] if "." in segments[-1] else segments[-1]
    words = unquote(slug).replace("_", " ").replace("-", " ").split()
    return " ".join(words) or url
