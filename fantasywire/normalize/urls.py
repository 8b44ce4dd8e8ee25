"""URL canonicalization helpers for ingestion/dedup."""

import re
from typing import Optional
from urllib.parse import unquote_plus, urlsplit, urlunsplit

TRACKING_PARAMS = {
    "fbclid",
    "gclid",
    "mc_cid",
    "mc_eid",
    "ref",
    "cn",
    "cmp",
    "igshid",
}

# Landing pages that many distinct articles point at as their "canonical"
GENERIC_PATHS = {
    "",
    "/",
    "/research",
    "/news",
    "/blog",
    "/articles",
    "/sports",
    "/nfl",
    "/fantasy",
    "/fantasy-football",
}

_LISTING_PATH = re.compile(
    r"(^|/)(tag|tags|category|categories|author|authors|topic|topics)(/|$)|(^|/)page/\d+/?$",
    re.IGNORECASE,
)


def is_tracking_param(name: str) -> bool:
    """True for query keys that only carry campaign/referrer tracking."""
    key = name.lower()
    return key.startswith("utm_") or key in TRACKING_PARAMS


def canonicalize_url(url: str) -> str:
    """Canonicalize a URL for dedup.

    - Protocol-relative input gets ``https:``
    - Lowercase scheme + hostname
    - Strip tracking query parameters, leaving the rest untouched
    - Remove the fragment and a non-root trailing slash

    Canonicalizing an already canonical URL returns it unchanged.
    """
    if not url:
        return ""
    url = url.strip()
    if url.startswith("//"):
        url = "https:" + url

    try:
        parts = urlsplit(url)
    except ValueError:
        return url

    scheme = parts.scheme.lower()
    netloc = parts.netloc.lower()

    # Drop tracking pairs without re-encoding the ones that stay
    query = "&".join(
        segment
        for segment in parts.query.split("&")
        if not is_tracking_param(unquote_plus(segment.partition("=")[0]))
    )

    path = parts.path
    if len(path) > 1 and path.endswith("/"):
        path = path.rstrip("/") or "/"

    return urlunsplit((scheme, netloc, path, query, ""))


def domain_of(url: str) -> str:
    """Host of ``url`` without a leading ``www.``."""
    try:
        host = (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""
    return host[4:] if host.startswith("www.") else host


def _segments(path: str) -> int:
    return len([s for s in path.split("/") if s])


def is_generic_canonical(canonical: str, original: Optional[str] = None) -> bool:
    """True when ``canonical`` is a hub page rather than the article itself.

    That is a known landing path, or a page shallower than ``original`` on
    the same host.
    """
    try:
        canon = urlsplit(canonical)
    except ValueError:
        return True
    if canon.path.rstrip("/").lower() in GENERIC_PATHS:
        return True
    if original:
        try:
            orig = urlsplit(original)
        except ValueError:
            return False
        same_host = (canon.hostname or "").lower() == (orig.hostname or "").lower()
        if same_host and _segments(canon.path) < _segments(orig.path):
            return True
    return False


def choose_canonical(hint: Optional[str], original: str) -> str:
    """Prefer a supplied canonical URL unless it is generic or shallower."""
    hint = (hint or "").strip()
    if hint.startswith("//"):
        hint = "https:" + hint
    if hint and re.match(r"^https?://", hint, re.IGNORECASE) and not is_generic_canonical(hint, original):
        return hint
    return original


def is_utility_url(url: str) -> bool:
    """Homepages, sitemaps, video hubs and listing pages are never articles."""
    try:
        path = (urlsplit(url).path or "").lower()
    except ValueError:
        return True
    if path in ("", "/"):
        return True
    if "sitemap" in path or "google-news" in path:
        return True
    if "where-to-watch" in path or "/watch" in path or "/videos" in path:
        return True
    return bool(_LISTING_PATH.search(path))
