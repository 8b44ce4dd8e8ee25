"""Classifier rule table and result models."""

import re
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


def _check_pattern(pattern: str) -> str:
    try:
        re.compile(pattern)
    except re.error as e:
        raise ValueError(f"Invalid pattern {pattern!r}: {e}")
    return pattern


class ScoringRule(BaseModel):
    """One (pattern, bucket, weight, dampener) entry of the scoring table."""

    pattern: str = Field(..., description="Regex matched case-insensitively")
    bucket: str = Field(..., description="Topic bucket the rule feeds")
    weight: float = Field(1.0, description="Added on a hit, or subtracted for a dampener", gt=0)
    dampener: bool = Field(False, description="Subtract from an already-positive bucket")

    @field_validator("pattern")
    @classmethod
    def pattern_compiles(cls, v: str) -> str:
        """Reject unparseable regexes at load time."""
        return _check_pattern(v)


class SecondaryRule(BaseModel):
    """Explicit title/URL keyword that names a secondary topic."""

    pattern: str = Field(..., description="Regex matched against title and URL")
    topic: str = Field(..., description="Topic it names")

    @field_validator("pattern")
    @classmethod
    def pattern_compiles(cls, v: str) -> str:
        """Reject unparseable regexes at load time."""
        return _check_pattern(v)


class Thresholds(BaseModel):
    """Empirical cut-offs; tunable without code changes."""

    primary_min: float = Field(1.0, description="Minimum score for a primary topic")
    secondary_min: float = Field(0.75, description="Minimum score for a scored secondary")
    secondary_ratio: float = Field(0.70, description="Secondary must reach this share of primary")
    confidence_floor: float = Field(0.1, description="Lowest reported confidence")
    confidence_ceiling: float = Field(0.99, description="Highest reported confidence")
    confidence_scale: float = Field(2.0, description="Top score that maps to confidence 1.0", gt=0)


class ClassifierRules(BaseModel):
    """Complete classifier configuration, loaded from ``classifier.yaml``."""

    buckets: List[str] = Field(..., description="Topic buckets in tie-break order")
    rules: List[ScoringRule] = Field(default_factory=list)
    source_bonuses: Dict[str, Dict[str, float]] = Field(
        default_factory=dict, description="Per-source soft bonuses, keyed by source name"
    )
    secondary_rules: List[SecondaryRule] = Field(default_factory=list)
    thresholds: Thresholds = Field(default_factory=Thresholds)
    league_tag: str = Field("nfl", description="League tag added to every tag set")

    @model_validator(mode="after")
    def known_buckets(self):
        """Every rule, bonus and secondary topic must name a declared bucket."""
        known = set(self.buckets)
        for rule in self.rules:
            if rule.bucket not in known:
                raise ValueError(f"Unknown bucket in rule: {rule.bucket}")
        for source, bonuses in self.source_bonuses.items():
            for bucket in bonuses:
                if bucket not in known:
                    raise ValueError(f"Unknown bucket {bucket} in bonuses for {source}")
        for rule in self.secondary_rules:
            if rule.topic not in known:
                raise ValueError(f"Unknown topic in secondary rule: {rule.topic}")
        return self


class Classification(BaseModel):
    """Classifier output for one article."""

    primary: Optional[str] = Field(None, description="Primary topic, None when nothing is confident")
    secondary: Optional[str] = Field(None, description="Secondary topic")
    topics: List[str] = Field(default_factory=list, description="Flat tag set")
    confidence: float = Field(..., description="Confidence in [0.1, 0.99]")
    week: Optional[int] = Field(None, description="Season week")
    scores: Dict[str, float] = Field(default_factory=dict, description="Final bucket scores")
