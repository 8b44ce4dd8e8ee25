"""Canonical URLs, titles, slugs, fingerprints and week numbers."""

from .normalizer import (
    NormalizedCandidate,
    Normalizer,
    extract_week,
    looks_like_player_page,
    make_fingerprint,
    make_slug,
    slugify,
)
from .titles import clean_title
from .urls import (
    canonicalize_url,
    choose_canonical,
    domain_of,
    is_generic_canonical,
    is_utility_url,
)

__all__ = [
    "NormalizedCandidate",
    "Normalizer",
    "canonicalize_url",
    "choose_canonical",
    "clean_title",
    "domain_of",
    "extract_week",
    "is_generic_canonical",
    "is_utility_url",
    "looks_like_player_page",
    "make_fingerprint",
    "make_slug",
    "slugify",
]
