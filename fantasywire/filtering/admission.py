"""Per-source admission filter."""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlparse

from ..config import load_rules
from ..models import IngestReason
from .league import NEWS, classify_category, classify_league
from .rules import FilterConfig, FilterRule, compile_pattern

Patterns = List["re.Pattern[str]"]


@dataclass
class ResolvedRules:
    """Defaults merged with the override that applies to one item."""

    forbidden: Patterns = field(default_factory=list)
    path_deny: Patterns = field(default_factory=list)
    path_allow: Patterns = field(default_factory=list)
    required_any: Patterns = field(default_factory=list)
    league_allow: List[str] = field(default_factory=list)
    category_allow: List[str] = field(default_factory=list)


@dataclass
class AdmissionDecision:
    """Outcome of evaluating one item against its rules."""

    admitted: bool
    reason: Optional[IngestReason] = None
    detail: Optional[str] = None
    league: Optional[str] = None
    category: Optional[str] = None


def _compile(patterns: Optional[List[str]]) -> Patterns:
    return [compile_pattern(p) for p in patterns or []]


def _host(url: str) -> str:
    host = (urlparse(url).hostname or "").lower()
    return host[4:] if host.startswith("www.") else host


class AdmissionFilter:
    """Decide whether a discovered item becomes an article candidate.

    Checks run in a fixed order and the first failure wins: forbidden,
    path-deny, path-allow, required-any, then the league and category gate.
    """

    def __init__(self, config: Optional[FilterConfig] = None, target_league: str = "NFL") -> None:
        """Initialize filter."""
        self.config = config or FilterConfig()
        self.target_league = target_league.upper()
        self._aliases = _compile(self.config.league_aliases)
        self._other_terms = _compile(self.config.other_league_terms) or None
        self._cache: Dict[Optional[int], ResolvedRules] = {}

    @classmethod
    def from_file(cls, path: Path, target_league: str = "NFL") -> "AdmissionFilter":
        """Build a filter from a YAML rule table."""
        return cls(load_rules(path, FilterConfig), target_league=target_league)

    def _pick(self, host: str, source_identity: str) -> Tuple[Optional[int], Optional[FilterRule]]:
        by_id = None
        by_domain = None
        for index, rule in enumerate(self.config.sources):
            if by_id is None and rule.source_id and rule.source_id == source_identity:
                by_id = (index, rule)
            if by_domain is None and rule.domain and rule.domain == host:
                by_domain = (index, rule)
        picked = by_id or by_domain
        return picked if picked else (None, None)

    def resolve_rules(self, url: str, source_identity: str) -> ResolvedRules:
        """Merge the defaults with the override for this source or domain.

        A source-id rule takes precedence over a domain rule.
        """
        index, picked = self._pick(_host(url), source_identity)
        if index in self._cache:
            return self._cache[index]

        defaults = self.config.defaults

        def added(name: str) -> List[str]:
            extra = getattr(picked, name) if picked else []
            return getattr(defaults, name) + extra

        def replaced(name: str) -> List[str]:
            value = getattr(picked, name) if picked else None
            if value is None:
                value = getattr(defaults, name)
            return list(value or [])

        rules = ResolvedRules(
            forbidden=_compile(added("forbidden")),
            path_deny=_compile(added("path_deny")),
            path_allow=_compile(added("path_allow")),
            required_any=_compile(replaced("required_any")),
            league_allow=[league.upper() for league in replaced("league_allow")],
            category_allow=replaced("category_allow"),
        )
        self._cache[index] = rules
        return rules

    def evaluate(
        self,
        title: str,
        link: str,
        source_identity: str,
        description: Optional[str] = None,
    ) -> AdmissionDecision:
        """Evaluate one item and say why it was rejected, if it was."""
        rules = self.resolve_rules(link, source_identity)
        path = urlparse(link).path or "/"
        text = f"{title}\n{description or ''}\n{link}"

        for pattern in rules.forbidden:
            if pattern.search(text) or pattern.search(path):
                return AdmissionDecision(False, IngestReason.BLOCKED_BY_FILTER, f"forbidden: {pattern.pattern}")
        for pattern in rules.path_deny:
            if pattern.search(path):
                return AdmissionDecision(False, IngestReason.BLOCKED_BY_FILTER, f"path_deny: {pattern.pattern}")
        if rules.path_allow and not any(p.search(path) for p in rules.path_allow):
            return AdmissionDecision(False, IngestReason.BLOCKED_BY_FILTER, "path_allow: no match")
        if rules.required_any and not any(p.search(text) for p in rules.required_any):
            return AdmissionDecision(False, IngestReason.BLOCKED_BY_FILTER, "required_any: no match")

        league = classify_league(text, self.target_league, self._aliases, self._other_terms)
        category = classify_category(f"{title}\n{description or ''}") or NEWS

        if rules.league_allow and league not in rules.league_allow:
            return AdmissionDecision(
                False, IngestReason.NON_NFL_LEAGUE, f"league: {league}", league, category
            )
        if rules.category_allow and category not in rules.category_allow:
            return AdmissionDecision(
                False, IngestReason.BLOCKED_BY_FILTER, f"category: {category}", league, category
            )
        return AdmissionDecision(True, league=league, category=category)

    def admit(
        self,
        title: str,
        link: str,
        source_identity: str,
        description: Optional[str] = None,
    ) -> bool:
        """True when the item passes every rule for its source."""
        return self.evaluate(title, link, source_identity, description).admitted
