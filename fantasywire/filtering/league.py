"""Lightweight league and category detection."""

import re
from typing import List, Optional, Sequence, Tuple

from .trade import route_trade

OTHER = "OTHER"
UNKNOWN = "UNKNOWN"

DEFAULT_OTHER_LEAGUE_TERMS = [
    r"\bMLB\b",
    r"\bNBA\b",
    r"\bNHL\b",
    r"\bWNBA\b",
    r"\bMLS\b",
    r"\bPremier League\b",
    r"\bLa Liga\b",
    r"\bUFC\b",
    r"\bNASCAR\b",
    r"\bbaseball\b",
    r"\bbasketball\b",
    r"\bhockey\b",
    r"\bsoccer\b",
    r"\bcricket\b",
    r"\brugby\b",
    r"\btennis\b",
    r"\bgolf\b",
]

# Checked in order; the first hit decides the category
CATEGORY_PATTERNS: List[Tuple[str, "re.Pattern[str]"]] = [
    ("DepthChart", re.compile(r"\bwaivers?\b|\bdepth chart\b|\broster moves?\b", re.I)),
    ("Fantasy", re.compile(r"\bstart[\s-]?(?:/|and|&)?\s*sit\b", re.I)),
    ("Fantasy", re.compile(r"\brankings?\b|\btiers?\b", re.I)),
    ("Injury", re.compile(r"\binjur(?:y|ies|ed)\b|\binactives?\b|\bquestionable\b|\bdoubtful\b", re.I)),
    ("Fantasy", re.compile(r"\bdfs\b|\bdraftkings\b|\bfanduel\b|\bdaily[- ]fantasy\b", re.I)),
    ("Scoreboard", re.compile(r"\bscoreboard\b|\bscores?\b|\bschedule\b|\bfixtures?\b|\bresults?\b", re.I)),
    ("Rumor", re.compile(r"\brumou?rs?\b", re.I)),
    ("Fantasy", re.compile(r"\badvice\b|\banalysis\b|\bstrategy\b|\bcheat[- ]?sheets?\b|\bsleepers?\b", re.I)),
]

NEWS = "News"


def _any(patterns: Sequence["re.Pattern[str]"], text: str) -> bool:
    return any(p.search(text) for p in patterns)


def classify_league(
    text: str,
    target_league: str = "NFL",
    aliases: Optional[Sequence["re.Pattern[str]"]] = None,
    other_terms: Optional[Sequence["re.Pattern[str]"]] = None,
) -> str:
    """Target league, ``OTHER`` for another sport, else ``UNKNOWN``."""
    league_re = re.compile(rf"\b{re.escape(target_league)}\b", re.IGNORECASE)
    if league_re.search(text) or _any(aliases or [], text):
        return target_league.upper()
    if other_terms is None:
        other_terms = [re.compile(p, re.IGNORECASE) for p in DEFAULT_OTHER_LEAGUE_TERMS]
    if _any(other_terms, text):
        return OTHER
    return UNKNOWN


def classify_category(text: str) -> str:
    """Trade routing first, then keyword precedence, defaulting to News."""
    routed = route_trade(text)
    if routed:
        return routed
    for category, pattern in CATEGORY_PATTERNS:
        if pattern.search(text):
            return category
    return NEWS
