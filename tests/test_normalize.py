"""Tests for URL canonicalization, title cleaning and candidate building."""

import re

from fantasywire.ingestion import FeedItem
from fantasywire.normalize import (
    Normalizer,
    canonicalize_url,
    choose_canonical,
    clean_title,
    domain_of,
    extract_week,
    is_generic_canonical,
    is_utility_url,
    looks_like_player_page,
    make_fingerprint,
    make_slug,
)


def test_canonicalize_strips_tracking_fragment_and_trailing_slash():
    url = "HTTPS://WWW.Example.com/nfl/story/?utm_source=x&id=7&fbclid=abc#comments"

    assert canonicalize_url(url) == "https://www.example.com/nfl/story?id=7"


def test_canonicalize_is_a_fixed_point():
    for url in [
        "https://example.com/a/b/?utm_medium=social&b=2&a=1",
        "//example.com/x/",
        "https://example.com/",
        "https://example.com/search?q=a+b&page=2",
    ]:
        once = canonicalize_url(url)
        assert canonicalize_url(once) == once


def test_canonicalize_leaves_untracked_query_alone():
    assert canonicalize_url("https://example.com/s?b=2&a=1") == "https://example.com/s?b=2&a=1"


def test_tracking_params_do_not_change_encoding_of_the_rest():
    plain = canonicalize_url("https://s.com/a?q=a%20b")

    assert plain == "https://s.com/a?q=a%20b"
    assert canonicalize_url("https://s.com/a?q=a%20b&utm_source=x") == plain
    assert canonicalize_url("https://s.com/a?utm_source=x&q=a%20b&gclid=1") == plain
    assert canonicalize_url("https://s.com/a?utm_source=x") == "https://s.com/a"


def test_canonicalize_protocol_relative_and_root():
    assert canonicalize_url("//example.com/x") == "https://example.com/x"
    assert canonicalize_url("https://example.com/") == "https://example.com/"
    assert canonicalize_url("") == ""


def test_domain_of_drops_www():
    assert domain_of("https://www.ESPN.com/nfl/") == "espn.com"


def test_generic_canonical_is_ignored():
    original = "https://site.com/nfl/week-5-waivers"

    assert is_generic_canonical("https://site.com/news")
    assert is_generic_canonical("https://site.com/nfl/", original)
    assert choose_canonical("https://site.com/", original) == original
    assert choose_canonical("https://site.com/nfl", original) == original
    assert choose_canonical("https://amp.site.com/nfl/week-5-waivers", original) == (
        "https://amp.site.com/nfl/week-5-waivers"
    )
    assert choose_canonical(None, original) == original
    assert choose_canonical("/relative/path", original) == original


def test_utility_urls():
    assert is_utility_url("https://site.com/")
    assert is_utility_url("https://site.com/sitemap-news.xml")
    assert is_utility_url("https://site.com/videos/highlights")
    assert is_utility_url("https://site.com/tag/waivers/")
    assert is_utility_url("https://site.com/nfl/page/3")
    assert not is_utility_url("https://site.com/nfl/week-5-waivers")


def test_clean_title_strips_publisher_suffixes():
    assert clean_title("Week 5 Rankings - FantasyPros") == "Week 5 Rankings"
    assert clean_title("Start or sit? | NFL | Yahoo") == "Start or sit?"
    assert clean_title("  Injury &amp; news   roundup ") == "Injury & news roundup"


def test_clean_title_news_prefix_is_upper_case_only():
    assert clean_title("NEWSJets sign kicker") == "Jets sign kicker"
    assert clean_title("NEWS: Jets sign kicker") == "Jets sign kicker"
    assert clean_title("Newsletter picks") == "Newsletter picks"


def test_clean_title_never_empties():
    assert clean_title("| FantasyPros") == "| FantasyPros"


def test_source_specific_cleaners():
    patterns = [re.compile(r"\s*::\s*Razzball$", re.IGNORECASE)]

    assert clean_title("Week 3 Streamers :: Razzball", patterns) == "Week 3 Streamers"


def test_slug_and_fallback():
    assert make_slug("Roto Site", "Week 5 Waiver Wire!", "https://s.com/a") == "roto-site-week-5-waiver-wire"
    fallback = make_slug("", "日本語のニュース", "https://s.com/jp")
    assert len(fallback) == 10
    assert fallback == make_slug("", "日本語のニュース", "https://s.com/jp")


def test_slug_is_bounded():
    slug = make_slug("Source", "word " * 60, "https://s.com/long")

    assert len(slug) <= 80
    assert not slug.endswith("-")


def test_fingerprint_depends_on_url_and_title():
    a = make_fingerprint("https://s.com/a", "Title")

    assert a == make_fingerprint("https://s.com/a", "Title")
    assert a != make_fingerprint("https://s.com/a", "Other title")
    assert len(a) == 64


def test_extract_week():
    assert extract_week("Week 5 Waiver Wire") == 5
    assert extract_week("Wk #3 streamers") == 3
    assert extract_week("Week 22 look-ahead") == 18
    assert extract_week("Week 0 preview") == 1
    assert extract_week("Week 123 mock draft") == 12
    assert extract_week(None, "https://s.com/week-7-rankings") == 7
    assert extract_week("Offseason notes") is None


def test_player_pages():
    assert looks_like_player_page("https://s.com/x", "Justin Jefferson")
    assert looks_like_player_page("https://s.com/players/ja-marr-chase", "Profile")
    assert not looks_like_player_page("https://s.com/nfl/a", "Justin Jefferson injury update")


def test_normalizer_builds_candidate():
    item = FeedItem(
        title="NEWS: Week 5 Waiver Wire Pickups at RB - FantasyPros",
        link="https://www.s.com/nfl/a1/?utm_campaign=feed",
        published_raw="2025-10-06T14:00:00Z",
        canonical_hint="https://www.s.com/nfl",
    )

    candidate = Normalizer().normalize(item, "S")

    assert candidate.canonical_url == "https://www.s.com/nfl/a1"
    assert candidate.domain == "s.com"
    assert candidate.cleaned_title == "Week 5 Waiver Wire Pickups at RB"
    assert candidate.slug == "s-week-5-waiver-wire-pickups-at-rb"
    assert candidate.week == 5
    assert candidate.published_at is not None
    assert candidate.is_player_page is False

    article = candidate.to_article(3)
    assert article.source_id == 3
    assert article.fingerprint == candidate.fingerprint
    assert article.topics == []


def test_normalizer_applies_configured_cleaners():
    normalizer = Normalizer({"Razzball (NFL)": [r"\s*::\s*Razzball$"]})
    item = FeedItem(title="Week 3 Streamers :: Razzball", link="https://razzball.com/streamers")

    assert normalizer.normalize(item, "Razzball (NFL)").cleaned_title == "Week 3 Streamers"
    assert normalizer.normalize(item, "Other").cleaned_title == "Week 3 Streamers :: Razzball"
