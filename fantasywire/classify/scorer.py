"""Generic weighted scorer over an ordered rule list."""

import re
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from .models import ScoringRule

CompiledRule = Tuple["re.Pattern[str]", str, float, bool]


def compile_rules(rules: Sequence[ScoringRule]) -> List[CompiledRule]:
    """Compile the rule table once; patterns are case-insensitive."""
    return [(re.compile(r.pattern, re.IGNORECASE), r.bucket, r.weight, r.dampener) for r in rules]


def score(
    text: str,
    rules: Sequence[CompiledRule],
    buckets: Sequence[str],
    bonuses: Optional[Mapping[str, float]] = None,
) -> Tuple[Dict[str, float], Set[str]]:
    """Score ``text`` into every bucket.

    Positive rules add their weight on a hit. Dampeners then subtract their
    weight from buckets that are already positive, never below zero. Source
    bonuses are added last. Returns the scores and the buckets that had at
    least one positive hit.
    """
    scores = {bucket: 0.0 for bucket in buckets}
    hits: Set[str] = set()

    for pattern, bucket, weight, dampener in rules:
        if not dampener and pattern.search(text):
            scores[bucket] += weight
            hits.add(bucket)

    for pattern, bucket, weight, dampener in rules:
        if dampener and scores[bucket] > 0 and pattern.search(text):
            scores[bucket] = max(0.0, scores[bucket] - weight)

    for bucket, bonus in (bonuses or {}).items():
        scores[bucket] += bonus

    return {bucket: round(value, 6) for bucket, value in scores.items()}, hits


def rank(scores: Mapping[str, float], buckets: Sequence[str]) -> List[Tuple[str, float]]:
    """Buckets by descending score; ties keep bucket order."""
    order = {bucket: i for i, bucket in enumerate(buckets)}
    return sorted(scores.items(), key=lambda kv: (-kv[1], order[kv[0]]))
