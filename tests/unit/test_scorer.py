"""Tests for rule-based relevance scoring."""

import re
from datetime import datetime, timedelta, timezone
from pathlib import Path

from alumni_search.core.config import ScoringConfig
from alumni_search.core.db import load_profiles_file
from alumni_search.core.schemas import Profile, RequirementFlag, SearchIntent
from alumni_search.pipeline.intent import RuleBasedIntentExtractor
from alumni_search.pipeline.scorer import rank, score_profile

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
NOW = datetime(2026, 10, 19, 12, 0)
_DELTA = re.compile(r"\(([+-]\d+)\)$")


def _profile(profile_id: str = "1", **kw: object) -> Profile:
    data: dict[str, object] = {"id": profile_id, "identity": {"full_name": "Test Person"}}
    data.update(kw)
    return Profile.model_validate(data)


def _score(profile: Profile, config: ScoringConfig | None = None, **intent: object) -> int:
    result = score_profile(profile, SearchIntent(**intent), config or ScoringConfig(), NOW)  # type: ignore[arg-type]
    return result.score


def _reason_total(reasons: list[str]) -> int:
    total = 0
    for reason in reasons:
        match = _DELTA.search(reason)
        assert match, reason
        total += int(match.group(1))
    return total


# ---------------------------------------------------------------------------
# Individual categories
# ---------------------------------------------------------------------------


class TestLocation:
    def test_match(self) -> None:
        result = score_profile(
            _profile(location={"city": "Pune"}), SearchIntent(locations=["pune"]), ScoringConfig(), NOW,
        )
        assert result.score == 50
        assert result.match_reasons == ["Location: Pune (+50)"]

    def test_mismatch_is_hard_penalty(self) -> None:
        profile = _profile(location={"city": "Mumbai"}, professional={"headline": "Web Developer"})
        result = score_profile(
            profile, SearchIntent(skills=["web"], locations=["pune"]), ScoringConfig(), NOW,
        )
        assert result.score == -30
        assert not result.exact
        assert result.match_reasons[-1].startswith("Outside pune")

    def test_mismatch_below_identical_match(self) -> None:
        intent = {"skills": ["web"], "locations": ["pune"]}
        headline = {"headline": "Web Developer"}
        in_pune = _score(_profile(location={"city": "Pune"}, professional=headline), **intent)
        elsewhere = _score(_profile(location={"city": "Delhi"}, professional=headline), **intent)
        assert elsewhere <= 0 < in_pune


class TestSkills:
    def test_best_location_per_skill(self) -> None:
        profile = _profile(
            professional={"headline": "Python Developer", "domain": "Docker platforms"},
            skills=["Django"],
            about="I love Flask",
        )
        # python headline 30, django record 20, flask about 15, docker anywhere 5,
        # skills listed 10, about 5
        assert _score(profile, skills=["python", "django", "flask", "docker"]) == 85

    def test_unmatched_skill_scores_nothing(self) -> None:
        assert _score(_profile(), skills=["rust"]) == 0


class TestRoles:
    def test_current_past_and_mentioned(self) -> None:
        profile = _profile(
            professional={
                "headline": "Engineering Manager",
                "experience": [{"title": "Software Developer"}],
            },
            about="Mentor to founders",
        )
        # manager 35, developer 20, founder 5, work history 15, about 5
        assert _score(profile, roles=["manager", "developer", "founder"]) == 80


class TestEducation:
    def test_record_and_about(self) -> None:
        profile = _profile(
            education=[{"school": "College of Engineering Pune"}],
            about="COEP alumnus",
        )
        # record 25, about mention 10, about section 5
        assert _score(profile, education=["coep", "college of engineering pune"]) == 40


class TestCompanies:
    def test_current_and_past(self) -> None:
        profile = _profile(
            professional={
                "current_company": "Google",
                "experience": [{"title": "Analyst", "company": "Flipkart"}],
            },
        )
        # current 20, past 10, work history 15
        assert _score(profile, companies=["google", "flipkart", "tcs"]) == 45


class TestNames:
    def test_exact_name(self) -> None:
        profile = _profile(identity={"full_name": "Raj Malhotra"})
        result = score_profile(profile, SearchIntent(names=["raj malhotra"]), ScoringConfig(), NOW)
        assert result.score == 100
        assert result.match_reasons == ["Name: Raj Malhotra (+100)"]

    def test_partial_name(self) -> None:
        profile = _profile(identity={"full_name": "Raj Malhotra"})
        assert _score(profile, names=["raj"]) == 50


class TestKeywords:
    def test_only_for_fallback_searches(self) -> None:
        profile = _profile(about="Weekend gardening club", location={"city": "Pune"})
        assert _score(profile, keywords=["gardening"]) == 15
        # with a structured category the keywords are ignored
        assert _score(profile, keywords=["gardening"], locations=["pune"]) == 55

    def test_counted_alongside_flags(self) -> None:
        intent = RuleBasedIntentExtractor().extract_sync("need advice on fundraising")
        assert intent.keywords == ["fundraising"]
        assert RequirementFlag.NEEDS_PROFESSIONAL_HELP in intent.requirement_flags

        profile = _profile(professional={"headline": "Fundraising coach"})
        ranked = rank([profile], intent, ScoringConfig(), NOW)
        assert [r.score for r in ranked] == [10]
        assert ranked[0].exact
        assert ranked[0].match_reasons == ["Keywords: fundraising (+10)"]


class TestWholeWordMatching:
    def test_short_skill_inside_word(self) -> None:
        profile = _profile(professional={"headline": "Corporate training manager, Chennai"})
        result = score_profile(profile, SearchIntent(skills=["ai"]), ScoringConfig(), NOW)
        assert result.score == 0
        assert result.match_reasons == []

    def test_short_skill_as_word(self) -> None:
        profile = _profile(professional={"headline": "AI researcher"})
        assert _score(profile, skills=["ai"]) == 30

    def test_ml_not_in_html(self) -> None:
        profile = _profile(professional={"headline": "HTML and CSS developer"}, about="I build APIs")
        assert _score(profile, skills=["ml", "js"]) == 5  # about section only
        assert _score(profile, skills=["api"]) == 20  # "apis" in about, plus about section

    def test_location_inside_word(self) -> None:
        profile = _profile(location={"country": "Ukraine"})
        assert _score(profile, locations=["uk"]) == -30

    def test_hyphenated_location(self) -> None:
        profile = _profile(location={"city": "Pimpri-Chinchwad"})
        assert _score(profile, locations=["pimpri"]) == 50

    def test_symbol_skill(self) -> None:
        profile = _profile(professional={"headline": "C++ developer"})
        assert _score(profile, skills=["c++"]) == 30


# ---------------------------------------------------------------------------
# Profile quality
# ---------------------------------------------------------------------------


class TestCompletenessAndRecency:
    def test_completeness(self) -> None:
        profile = _profile(
            meta={"profile_complete": True},
            professional={"experience": [{"title": "Engineer"}]},
            about="Hello",
            skills=["Python"],
        )
        assert _score(profile) == 40

    def test_recent_activity(self) -> None:
        assert _score(_profile(meta={"last_active": NOW})) == 5

    def test_stale_activity(self) -> None:
        assert _score(_profile(meta={"last_active": NOW - timedelta(days=120)})) == 0

    def test_timezone_aware_timestamp(self) -> None:
        aware = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
        assert 0 <= _score(_profile(meta={"last_active": aware})) <= 5


# ---------------------------------------------------------------------------
# Requirement flags
# ---------------------------------------------------------------------------


class TestFlags:
    def test_senior_bonus(self) -> None:
        profile = _profile(professional={"headline": "Senior Software Engineer"})
        flags = frozenset({RequirementFlag.SENIOR_LEVEL})
        assert _score(profile, requirement_flags=flags) == 15
        assert _score(profile) == 0

    def test_professional_bonus(self) -> None:
        profile = _profile(about="Twelve years of experience")
        flags = frozenset({RequirementFlag.NEEDS_PROFESSIONAL_HELP})
        # professional 30, about 5
        assert _score(profile, requirement_flags=flags) == 35

    def test_student_penalty(self) -> None:
        profile = _profile(
            professional={"headline": "Computer engineering student"},
            location={"city": "Pune"},
        )
        flags = frozenset({RequirementFlag.NEEDS_PROFESSIONAL_HELP})
        result = score_profile(
            profile,
            SearchIntent(locations=["pune"], requirement_flags=flags),
            ScoringConfig(),
            NOW,
        )
        assert result.score == -100
        assert not result.exact

    def test_graduate_is_not_student(self) -> None:
        profile = _profile(about="Graduate student turned data engineer with experience")
        flags = frozenset({RequirementFlag.NEEDS_PROFESSIONAL_HELP})
        assert _score(profile, requirement_flags=flags) > 0


class TestReasons:
    def test_reasons_add_up_to_score(self) -> None:
        extractor = RuleBasedIntentExtractor()
        profiles = load_profiles_file(FIXTURES_DIR / "profiles.json")
        for query in ("web developers in pune", "need help from a lawyer", "senior engineers"):
            intent = extractor.extract_sync(query)
            for profile in profiles:
                result = score_profile(profile, intent, ScoringConfig(), NOW)
                assert _reason_total(result.match_reasons) == result.score, (query, profile.id)


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------


class TestRank:
    def test_web_developers_in_pune(self) -> None:
        profiles = load_profiles_file(FIXTURES_DIR / "profiles.json")
        intent = RuleBasedIntentExtractor().extract_sync("web developers in pune")
        ranked = rank(profiles, intent, ScoringConfig(), NOW)
        ids = [r.profile.id for r in ranked]
        assert ids[0] == "p01"
        assert "p03" not in ids  # Mumbai
        assert "p07" not in ids  # no name
        assert all(r.exact and r.score > 0 for r in ranked)
        assert [r.score for r in ranked] == sorted((r.score for r in ranked), reverse=True)

    def test_related_tier_when_nothing_positive(self) -> None:
        profiles = [
            _profile("a", identity={"full_name": "Rohan Mehta"}, location={"city": "Mumbai"}),
            _profile("b", identity={"full_name": "Priya Sharma"}, location={"city": "Mumbai"}),
            _profile("c", identity={"full_name": "Vikram Rao"}, location={"city": "Delhi"}),
            _profile("d", identity={"full_name": "Arjun Nair"}, location={"city": "Delhi"}),
        ]
        ranked = rank(profiles, SearchIntent(locations=["pune"]), ScoringConfig(), NOW)
        assert len(ranked) == 3
        assert all(not r.exact for r in ranked)
        # equal scores fall back to display name order
        assert [r.profile.display_name for r in ranked] == ["Arjun Nair", "Priya Sharma", "Rohan Mehta"]

    def test_related_limit_zero(self) -> None:
        profiles = [_profile("a", location={"city": "Mumbai"})]
        config = ScoringConfig(related_limit=0)
        assert rank(profiles, SearchIntent(locations=["pune"]), config, NOW) == []

    def test_positives_hide_negatives(self) -> None:
        profiles = [
            _profile("a", location={"city": "Pune"}),
            _profile("b", location={"city": "Mumbai"}),
        ]
        ranked = rank(profiles, SearchIntent(locations=["pune"]), ScoringConfig(), NOW)
        assert [r.profile.id for r in ranked] == ["a"]

    def test_nameless_excluded(self) -> None:
        profiles = [Profile.model_validate({"id": "x", "location": {"city": "Pune"}})]
        assert rank(profiles, SearchIntent(locations=["pune"]), ScoringConfig(), NOW) == []
