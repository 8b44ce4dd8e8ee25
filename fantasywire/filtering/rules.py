"""Admission rule models, loaded from ``filters.yaml``."""

import re
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


def compile_pattern(pattern: str) -> "re.Pattern[str]":
    """Compile an operator pattern; case-insensitive unless it says otherwise."""
    return re.compile(pattern, re.IGNORECASE)


def _check_patterns(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    for pattern in values:
        try:
            compile_pattern(pattern)
        except re.error as e:
            raise ValueError(f"Invalid pattern {pattern!r}: {e}")
    return values


class FilterRule(BaseModel):
    """One rule set, either the global defaults or a per-source override.

    ``forbidden``, ``path_allow`` and ``path_deny`` are added to the defaults.
    ``required_any``, ``league_allow`` and ``category_allow`` replace the
    defaults when set on an override.
    """

    domain: Optional[str] = Field(None, description="Host (without www.) this rule applies to")
    source_id: Optional[str] = Field(None, description="Source identity this rule applies to")
    forbidden: List[str] = Field(default_factory=list, description="Reject when matched anywhere")
    path_deny: List[str] = Field(default_factory=list, description="Reject when the URL path matches")
    path_allow: List[str] = Field(default_factory=list, description="URL path must match one")
    required_any: Optional[List[str]] = Field(None, description="Text must match one")
    league_allow: Optional[List[str]] = Field(None, description="Admitted leagues")
    category_allow: Optional[List[str]] = Field(None, description="Admitted categories")

    @field_validator("forbidden", "path_deny", "path_allow", "required_any")
    @classmethod
    def patterns_compile(cls, v):
        """Reject unparseable regexes at load time."""
        return _check_patterns(v)

    @field_validator("domain")
    @classmethod
    def normalize_domain(cls, v: Optional[str]) -> Optional[str]:
        """Domains are compared lower-case without www."""
        if not v:
            return None
        v = v.strip().lower()
        return v[4:] if v.startswith("www.") else v

    @field_validator("source_id", mode="before")
    @classmethod
    def source_id_as_text(cls, v):
        """YAML reads bare ids as integers."""
        return None if v is None else str(v)

    @field_validator("league_allow")
    @classmethod
    def upper_leagues(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        """Leagues are compared upper-case."""
        return None if v is None else [league.upper() for league in v]


class FilterConfig(BaseModel):
    """Complete admission rule table."""

    defaults: FilterRule = Field(default_factory=FilterRule)
    sources: List[FilterRule] = Field(default_factory=list)
    league_aliases: List[str] = Field(
        default_factory=lambda: [r"fantasy[ -]?football"],
        description="Extra phrases that identify the target league",
    )
    other_league_terms: List[str] = Field(
        default_factory=list, description="Terms that identify a different sport"
    )

    @field_validator("league_aliases", "other_league_terms")
    @classmethod
    def patterns_compile(cls, v):
        """Reject unparseable regexes at load time."""
        return _check_patterns(v)

    @model_validator(mode="after")
    def overrides_have_match(self):
        """Every override must name a domain or a source."""
        for rule in self.sources:
            if not rule.domain and not rule.source_id:
                raise ValueError("Source rule needs a domain or source_id")
        return self
