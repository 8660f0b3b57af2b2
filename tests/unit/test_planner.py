"""Tests for the query planner."""

from alumni_search.core.query import AllOf, AnyOf, FieldMatch, PlanStrategy
from alumni_search.core.schemas import Profile, RequirementFlag, SearchIntent
from alumni_search.pipeline.planner import NAME_FIELDS, plan


def _intent(**kwargs: object) -> SearchIntent:
    return SearchIntent(**kwargs)  # type: ignore[arg-type]


class TestNamePlan:
    def test_single_exclusive_plan(self) -> None:
        plans = plan(_intent(names=["raj patel"], locations=["pune"]))
        assert len(plans) == 1
        assert plans[0].strategy is PlanStrategy.NAME
        clause = plans[0].clause
        assert isinstance(clause, AnyOf)
        assert {c.field for c in clause.clauses if isinstance(c, FieldMatch)} == set(NAME_FIELDS)

    def test_matches_any_name_field(self) -> None:
        query = plan(_intent(names=["raj"]))[0]
        profile = Profile(id="1", identity={"linkedin_name": "Raj Malhotra"})  # type: ignore[arg-type]
        assert query.matches(profile)


class TestCategoryPlans:
    def test_single_category(self) -> None:
        plans = plan(_intent(skills=["python"]))
        assert len(plans) == 1
        assert plans[0].strategy is PlanStrategy.CONJUNCTIVE
        assert isinstance(plans[0].clause, AnyOf)

    def test_conjunctive_then_relaxed(self) -> None:
        plans = plan(_intent(skills=["web"], locations=["pune"], roles=["developer"]))
        assert [p.strategy for p in plans] == [
            PlanStrategy.CONJUNCTIVE,
            PlanStrategy.RELAXED,
            PlanStrategy.RELAXED,
        ]
        assert plans[0].categories == ["skills", "locations", "roles"]
        assert isinstance(plans[0].clause, AllOf)
        assert plans[1].dropped == ["roles"]
        assert plans[2].categories == ["locations"]
        assert plans[2].dropped == ["roles", "skills"]

    def test_relaxation_order(self) -> None:
        plans = plan(
            _intent(
                skills=["python"],
                locations=["pune"],
                roles=["developer"],
                companies=["google"],
            ),
        )
        assert [p.dropped for p in plans] == [
            [],
            ["companies"],
            ["companies", "roles"],
            ["companies", "roles", "skills"],
        ]

    def test_never_relaxes_to_nothing(self) -> None:
        for p in plan(_intent(locations=["pune"], education=["coep"])):
            assert p.categories

    def test_flags_only_falls_back_to_keywords(self) -> None:
        intent = _intent(requirement_flags=frozenset({RequirementFlag.SENIOR_LEVEL}))
        plans = plan(intent)
        assert len(plans) == 1
        assert plans[0].strategy is PlanStrategy.KEYWORD


class TestKeywordPlan:
    def test_keyword_plan(self) -> None:
        plans = plan(_intent(keywords=["gardening"]))
        assert len(plans) == 1
        assert plans[0].strategy is PlanStrategy.KEYWORD
        profile = Profile(id="1", about="Weekend gardening club")
        assert plans[0].matches(profile)

    def test_empty_intent_matches_nothing(self) -> None:
        plans = plan(SearchIntent())
        assert len(plans) == 1
        assert plans[0].clause == AnyOf()
        assert not plans[0].matches(Profile(id="1", about="anything"))
