"""Weighted multi-label topic classifier."""

import re
from pathlib import Path
from typing import List, Optional

from ..config import load_rules
from ..normalize.normalizer import extract_week
from .models import Classification, ClassifierRules
from .scorer import compile_rules, rank, score


class Classifier:
    """Assign primary/secondary topics, a tag set and a confidence.

    ``classify`` is pure: the same input always produces the same output.
    """

    def __init__(self, rules: ClassifierRules) -> None:
        """Initialize classifier from a rule table."""
        self.rules = rules
        self.thresholds = rules.thresholds
        self._compiled = compile_rules(rules.rules)
        self._secondary = [
            (re.compile(r.pattern, re.IGNORECASE), r.topic) for r in rules.secondary_rules
        ]

    @classmethod
    def from_file(cls, path: Path) -> "Classifier":
        """Build a classifier from a YAML rule table."""
        return cls(load_rules(path, ClassifierRules))

    def _confidence(self, top: float) -> float:
        t = self.thresholds
        value = round(top / t.confidence_scale, 3)
        return max(t.confidence_floor, min(t.confidence_ceiling, value))

    def _explicit_secondary(self, primary: str, title: str, url: str) -> Optional[str]:
        for pattern, topic in self._secondary:
            if topic == primary:
                continue
            if pattern.search(title) or (url and pattern.search(url)):
                return topic
        return None

    def classify(
        self,
        title: str,
        summary: Optional[str] = None,
        source_name: Optional[str] = None,
        known_week: Optional[int] = None,
        url: Optional[str] = None,
    ) -> Classification:
        """Classify one article."""
        title = (title or "").strip()
        url = url or ""
        text = f"{title}\n{(summary or '').strip()}"
        buckets = self.rules.buckets

        bonuses = self.rules.source_bonuses.get(source_name or "")
        scores, hits = score(text, self._compiled, buckets, bonuses)
        ranked = rank(scores, buckets)
        top_bucket, top_score = ranked[0]

        primary = top_bucket if top_score >= self.thresholds.primary_min else None

        secondary = None
        if primary:
            secondary = self._explicit_secondary(primary, title, url)
            if secondary is None and len(ranked) > 1:
                runner_up, runner_score = ranked[1]
                if (
                    runner_score >= self.thresholds.secondary_min
                    and runner_score >= self.thresholds.secondary_ratio * top_score
                ):
                    secondary = runner_up

        week = known_week if known_week is not None else extract_week(title, url)

        # A bucket dampened below the secondary bar is not a tag
        tag_min = self.thresholds.secondary_min
        topics: List[str] = []
        for tag in [primary, secondary] + [b for b in buckets if b in hits and scores[b] >= tag_min]:
            if tag and tag not in topics:
                topics.append(tag)
        if self.rules.league_tag:
            topics.append(self.rules.league_tag.lower())
        if week is not None:
            topics.append(f"week:{week}")

        return Classification(
            primary=primary,
            secondary=secondary,
            topics=topics,
            confidence=self._confidence(top_score),
            week=week,
            scores=scores,
        )
