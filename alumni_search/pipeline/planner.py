"""Turn a SearchIntent into store queries, most specific first.

Plan order:
  1. Name plan: OR over name fields. Exclusive, never combined or relaxed.
  2. Conjunctive plan: AND of one OR-condition per non-empty category.
  3. Relaxed plans: cumulatively drop companies, roles, skills, locations.
  4. Keyword plan: only when the intent has no searchable category.
"""

import logging

from alumni_search.core.query import AllOf, AnyOf, DocumentQuery, PlanStrategy, any_field
from alumni_search.core.schemas import SearchIntent

logger = logging.getLogger(__name__)

NAME_FIELDS: tuple[str, ...] = (
    "identity.name",
    "identity.full_name",
    "identity.linkedin_name",
)

PROFESSIONAL_FIELDS: tuple[str, ...] = (
    "professional.headline",
    "professional.current_title",
    "professional.professional_role",
    "professional.domain",
    "professional.experience.title",
    "professional.experience.description",
    "skills",
    "about",
)

LOCATION_FIELDS: tuple[str, ...] = (
    "location.city",
    "location.state",
    "location.country",
    "location.address",
    "location.linkedin_location",
)

COMPANY_FIELDS: tuple[str, ...] = (
    "professional.current_company",
    "professional.experience.company",
    "professional.headline",
)

EDUCATION_FIELDS: tuple[str, ...] = (
    "education.school",
    "education.degree",
    "education.field",
    "about",
)

KEYWORD_FIELDS: tuple[str, ...] = (*NAME_FIELDS, "professional.headline", "about")

CATEGORY_FIELDS: dict[str, tuple[str, ...]] = {
    "skills": PROFESSIONAL_FIELDS,
    "locations": LOCATION_FIELDS,
    "roles": PROFESSIONAL_FIELDS,
    "companies": COMPANY_FIELDS,
    "education": EDUCATION_FIELDS,
}

# Order in which categories are combined into the conjunctive plan.
CATEGORY_ORDER: tuple[str, ...] = ("skills", "locations", "roles", "companies", "education")

# Least selective first; locations are the last constraint given up.
RELAXATION_ORDER: tuple[str, ...] = ("companies", "roles", "skills", "locations")


def plan(intent: SearchIntent) -> list[DocumentQuery]:
    """Build the ordered, non-empty list of queries for an intent."""
    if intent.names:
        plans = [_name_plan(intent.names)]
    else:
        active = [c for c in CATEGORY_ORDER if getattr(intent, c)]
        plans = _category_plans(intent, active) if active else [_keyword_plan(intent.keywords)]

    for p in plans:
        logger.debug("Planned %s query '%s'", p.strategy.value, p.label)
    return plans


def _name_plan(names: list[str]) -> DocumentQuery:
    return DocumentQuery(
        label=f"name: {', '.join(names)}",
        strategy=PlanStrategy.NAME,
        clause=any_field(NAME_FIELDS, names),
        categories=["names"],
    )


def _category_plans(intent: SearchIntent, active: list[str]) -> list[DocumentQuery]:
    conditions = {c: any_field(CATEGORY_FIELDS[c], getattr(intent, c)) for c in active}
    plans = [
        DocumentQuery(
            label=" AND ".join(active),
            strategy=PlanStrategy.CONJUNCTIVE,
            clause=_combine([conditions[c] for c in active]),
            categories=list(active),
        ),
    ]

    kept = list(active)
    dropped: list[str] = []
    for category in RELAXATION_ORDER:
        if category not in kept:
            continue
        if len(kept) == 1:
            break
        kept.remove(category)
        dropped.append(category)
        plans.append(
            DocumentQuery(
                label=f"{' AND '.join(kept)} (without {', '.join(dropped)})",
                strategy=PlanStrategy.RELAXED,
                clause=_combine([conditions[c] for c in kept]),
                categories=list(kept),
                dropped=list(dropped),
            ),
        )
    return plans


def _keyword_plan(keywords: list[str]) -> DocumentQuery:
    return DocumentQuery(
        label=f"keywords: {', '.join(keywords) or '(none)'}",
        strategy=PlanStrategy.KEYWORD,
        clause=any_field(KEYWORD_FIELDS, keywords),
        categories=["keywords"],
    )


def _combine(conditions: list[AnyOf]) -> AnyOf | AllOf:
    if len(conditions) == 1:
        return conditions[0]
    return AllOf(clauses=conditions)
