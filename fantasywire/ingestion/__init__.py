"""Fetching, resolving and parsing source content."""

from .capabilities import CAPABILITIES, FetchCapability, build_capabilities
from .fetcher import ResilientFetcher
from .models import CandidateListing, FeedItem, FetchResponse, ResolvedFeed
from .parser import parse_feed, scrape_links
from .resolver import FeedResolver

__all__ = [
    "CAPABILITIES",
    "CandidateListing",
    "FeedItem",
    "FeedResolver",
    "FetchCapability",
    "FetchResponse",
    "ResilientFetcher",
    "ResolvedFeed",
    "build_capabilities",
    "parse_feed",
    "scrape_links",
]
