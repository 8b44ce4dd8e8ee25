"""Telling real NFL trades apart from fantasy trade advice."""

import re
from typing import Optional, Set

TEAM_NAMES = {
    "49ers": "SF",
    "Bears": "CHI",
    "Bengals": "CIN",
    "Bills": "BUF",
    "Broncos": "DEN",
    "Browns": "CLE",
    "Buccaneers": "TB",
    "Cardinals": "ARI",
    "Chargers": "LAC",
    "Chiefs": "KC",
    "Colts": "IND",
    "Commanders": "WAS",
    "Cowboys": "DAL",
    "Dolphins": "MIA",
    "Eagles": "PHI",
    "Falcons": "ATL",
    "Giants": "NYG",
    "Jaguars": "JAX",
    "Jets": "NYJ",
    "Lions": "DET",
    "Packers": "GB",
    "Panthers": "CAR",
    "Patriots": "NE",
    "Raiders": "LV",
    "Rams": "LAR",
    "Ravens": "BAL",
    "Saints": "NO",
    "Seahawks": "SEA",
    "Steelers": "PIT",
    "Texans": "HOU",
    "Titans": "TEN",
    "Vikings": "MIN",
}

TEAM_ABBREVIATIONS = frozenset(TEAM_NAMES.values())

_TRADE = re.compile(r"\btrad(e|es|ed|ing)\b", re.IGNORECASE)
_TRADE_VERBS = re.compile(
    r"\b(trade[sd]?|acquire[sd]?|sen[dt]s?|deal[st]?|dealt|land(s|ed)?|swap(s|ped)?|ship(s|ped)?)\b"
    r"|\bin exchange for\b",
    re.IGNORECASE,
)
_FANTASY_HINTS = re.compile(
    r"\bfantasy\b|\bdynasty\b|\bredraft\b|\bkeepers?\b|\bbuy[- ]low\b|\bsell[- ]high\b"
    r"|\btrade (value|targets?|chart|analyzer)\b|\bstart/sit\b|\brankings?\b|\badvice\b|\bwaivers?\b",
    re.IGNORECASE,
)
_WORD = re.compile(r"[A-Za-z0-9]+")


def mentioned_teams(text: str) -> Set[str]:
    """Distinct teams mentioned by nickname or (upper-case) abbreviation."""
    teams: Set[str] = set()
    lowered_names = {name.lower(): abbr for name, abbr in TEAM_NAMES.items()}
    for word in _WORD.findall(text or ""):
        abbr = lowered_names.get(word.lower())
        if abbr:
            teams.add(abbr)
        elif word in TEAM_ABBREVIATIONS:
            # Abbreviations only count in caps; "no" and "ne" are ordinary words
            teams.add(word)
    return teams


def route_trade(text: str) -> Optional[str]:
    """Category override for trade-related text.

    Returns ``"News"`` for a transaction between two or more teams,
    ``"Fantasy"`` for trade talk with fantasy-advice phrasing, and ``None``
    when the text is not about trades or is ambiguous.
    """
    if not text or not _TRADE.search(text):
        return None
    if len(mentioned_teams(text)) >= 2 and _TRADE_VERBS.search(text):
        return "News"
    if _FANTASY_HINTS.search(text):
        return "Fantasy"
    return None
