"""Topic classification."""

from .classifier import Classifier
from .models import Classification, ClassifierRules, ScoringRule, SecondaryRule, Thresholds
from .scorer import compile_rules, rank, score

__all__ = [
    "Classification",
    "Classifier",
    "ClassifierRules",
    "ScoringRule",
    "SecondaryRule",
    "Thresholds",
    "compile_rules",
    "rank",
    "score",
]
