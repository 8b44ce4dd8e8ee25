"""Tests for admission filtering, league gating and trade routing."""

import pytest

from fantasywire.filtering import (
    AdmissionFilter,
    FilterConfig,
    FilterRule,
    classify_category,
    classify_league,
    mentioned_teams,
    route_trade,
)
from fantasywire.models import IngestReason


def make_filter(**kwargs) -> AdmissionFilter:
    return AdmissionFilter(FilterConfig(**kwargs))


def test_path_deny_beats_path_allow():
    admission = make_filter(
        defaults=FilterRule(path_allow=["^/nfl/"], path_deny=["/nfl/scores"]),
    )

    assert admission.admit("NFL story", "https://x.com/nfl/story", "1")
    decision = admission.evaluate("NFL scores", "https://x.com/nfl/scores/1", "1")
    assert not decision.admitted
    assert decision.reason == IngestReason.BLOCKED_BY_FILTER
    assert decision.detail.startswith("path_deny")


def test_path_allow_requires_a_match():
    admission = make_filter(defaults=FilterRule(path_allow=["^/nfl/"]))

    decision = admission.evaluate("NFL story", "https://x.com/mlb/story", "1")

    assert decision.detail == "path_allow: no match"


def test_forbidden_matches_title_or_path():
    admission = make_filter(defaults=FilterRule(forbidden=[r"\bsponsored\b"]))

    assert not admission.admit("Sponsored: best NFL bets", "https://x.com/nfl/a", "1")
    assert not admission.admit("NFL picks", "https://x.com/sponsored/a", "1")
    assert admission.admit("NFL picks", "https://x.com/nfl/a", "1")


def test_required_any():
    admission = make_filter(defaults=FilterRule(required_any=[r"\bnfl\b", r"\bfantasy\b"]))

    assert admission.admit("Fantasy notes", "https://x.com/a", "1")
    assert not admission.admit("Local weather", "https://x.com/b", "1")


def test_source_override_adds_and_replaces():
    admission = make_filter(
        defaults=FilterRule(path_deny=["/video/"], league_allow=["NFL"]),
        sources=[FilterRule(domain="www.x.com", path_deny=["/podcast/"], league_allow=["NFL", "UNKNOWN"])],
    )

    rules = admission.resolve_rules("https://x.com/a", "1")

    assert [p.pattern for p in rules.path_deny] == ["/video/", "/podcast/"]
    assert rules.league_allow == ["NFL", "UNKNOWN"]
    # Other domains keep the defaults only
    assert admission.resolve_rules("https://y.com/a", "2").league_allow == ["NFL"]


def test_source_id_rule_beats_domain_rule():
    admission = make_filter(
        sources=[
            FilterRule(domain="x.com", category_allow=["Injury"]),
            FilterRule(source_id=9, category_allow=["Fantasy"]),
        ],
    )

    assert admission.resolve_rules("https://x.com/a", "9").category_allow == ["Fantasy"]
    assert admission.resolve_rules("https://x.com/a", "3").category_allow == ["Injury"]


def test_source_rule_needs_a_match_key():
    with pytest.raises(ValueError):
        FilterConfig(sources=[FilterRule(forbidden=["x"])])


def test_invalid_pattern_rejected_at_load():
    with pytest.raises(ValueError):
        FilterRule(forbidden=["(unclosed"])


def test_other_league_is_rejected(admission):
    decision = admission.evaluate("NBA Finals recap", "https://x.com/nba/finals", "1")

    assert decision.reason == IngestReason.NON_NFL_LEAGUE
    assert decision.league == "OTHER"


def test_unnamed_league_is_admitted_by_default(admission):
    decision = admission.evaluate("Week 5 Waiver Wire Pickups at RB", "https://s.com/a1", "1")

    assert decision.admitted
    assert decision.league == "UNKNOWN"


def test_fantasy_football_alias_counts_as_target_league(admission):
    decision = admission.evaluate("Fantasy football mailbag", "https://s.com/mailbag", "1")

    assert decision.league == "NFL"


def test_packaged_domain_rule_applies(admission):
    # fantasypros.com only admits /nfl/ paths
    assert not admission.admit("Fantasy baseball notes", "https://www.fantasypros.com/mlb/notes", "1")
    assert admission.admit("NFL fantasy notes", "https://www.fantasypros.com/nfl/notes", "1")


def test_packaged_forbidden_paths_cover_word_variants(admission):
    for url in ["https://s.com/advertise-with-us", "https://s.com/advertising", "https://s.com/advertise"]:
        decision = admission.evaluate("Reach our readers", url, "1")
        assert decision.reason == IngestReason.BLOCKED_BY_FILTER, url


def test_category_allow():
    admission = make_filter(defaults=FilterRule(category_allow=["Fantasy", "News"]))

    assert admission.admit("Week 6 Rankings", "https://x.com/a", "1")
    decision = admission.evaluate("Injury report: Week 6", "https://x.com/b", "1")
    assert decision.category == "Injury"
    assert decision.detail == "category: Injury"


def test_classify_league_without_configured_terms():
    assert classify_league("NFL Week 1 recap") == "NFL"
    assert classify_league("MLB playoff bracket") == "OTHER"
    assert classify_league("Monday notes") == "UNKNOWN"


def test_category_precedence():
    assert classify_category("Waiver wire and injury roundup") == "DepthChart"
    assert classify_category("Injury report") == "Injury"
    assert classify_category("Team hires new coach") == "News"


def test_real_trade_routes_to_news():
    assert route_trade("Raiders trade Jakobi Meyers to Patriots") == "News"
    assert route_trade("Bills acquire WR from Jets in trade") == "News"
    assert classify_category("Raiders trade Jakobi Meyers to Patriots") == "News"


def test_trade_advice_routes_to_fantasy():
    assert route_trade("Week 3 Trade Targets: Buy Low Candidates") == "Fantasy"
    assert classify_category("Week 3 Trade Targets: Buy Low Candidates") == "Fantasy"


def test_non_trade_text_is_not_routed():
    assert route_trade("Bears beat Packers") is None
    assert route_trade("") is None
    assert route_trade("Trade deadline looms") is None


def test_abbreviations_only_count_in_caps():
    assert mentioned_teams("KC and NE") == {"KC", "NE"}
    assert mentioned_teams("no way, ne pas") == set()
    assert mentioned_teams("49ers and Chiefs") == {"SF", "KC"}
