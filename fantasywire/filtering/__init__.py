"""Content admission: per-source rules, league/category gating and trade routing."""

from .admission import AdmissionDecision, AdmissionFilter, ResolvedRules
from .league import classify_category, classify_league
from .rules import FilterConfig, FilterRule
from .trade import mentioned_teams, route_trade

__all__ = [
    "AdmissionDecision",
    "AdmissionFilter",
    "FilterConfig",
    "FilterRule",
    "ResolvedRules",
    "classify_category",
    "classify_league",
    "mentioned_teams",
    "route_trade",
]
