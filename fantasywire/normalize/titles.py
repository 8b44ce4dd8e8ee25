"""Title cleaning."""

import html
import re
from typing import Dict, List, Optional, Sequence

_WHITESPACE = re.compile(r"\s+")
_NEWS_PREFIX = re.compile(r"^NEWS(?:[:\s-]+|(?=[A-Z]))")

# Trailing publisher attribution; the generic " | section" form goes last
PUBLISHER_SUFFIXES = [
    re.compile(r"\s*[-–—]\s*fantasypros.*$", re.IGNORECASE),
    re.compile(r"\s*[-–—]\s*cbs sports.*$", re.IGNORECASE),
    re.compile(r"\s*[-–—]\s*yahoo sports.*$", re.IGNORECASE),
    re.compile(r"\s*[-–—]\s*rotowire.*$", re.IGNORECASE),
    re.compile(r"\s*[-–—]\s*numberfire.*$", re.IGNORECASE),
    re.compile(r"\s*[-–—]\s*nbc sports edge.*$", re.IGNORECASE),
    re.compile(r"\s*[-–—]\s*espn.*$", re.IGNORECASE),
    re.compile(r"\s*\|\s*.*$"),
]


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def prenormalize_title(raw: str) -> str:
    """Decode entities, collapse whitespace and drop a glued-on ``NEWS`` prefix."""
    text = collapse_whitespace(html.unescape(raw or ""))
    return _NEWS_PREFIX.sub("", text, count=1).strip()


def compile_cleaners(cleaners: Optional[Dict[str, List[str]]]) -> Dict[str, List["re.Pattern[str]"]]:
    """Compile per-source suffix patterns from configuration."""
    return {
        source: [re.compile(p, re.IGNORECASE) for p in patterns]
        for source, patterns in (cleaners or {}).items()
    }


def clean_title(
    raw: str,
    extra_patterns: Sequence["re.Pattern[str]"] = (),
) -> str:
    """Strip publisher suffixes (and any source-specific ones) from a title.

    A pattern that would leave nothing behind is skipped.
    """
    text = prenormalize_title(raw)
    for pattern in list(extra_patterns) + PUBLISHER_SUFFIXES:
        stripped = pattern.sub("", text).strip()
        if stripped:
            text = stripped
    return collapse_whitespace(text)
