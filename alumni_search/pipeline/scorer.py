"""Rule-based relevance scoring for alumni profiles.

Scores are additive integers; every addend is recorded in match_reasons as
"<reason> (+N)" / "<reason> (-N)" so a score can always be explained.
Hard penalties (location mismatch, student profile when a professional is
needed) pull the total below zero no matter what else matched.
"""

import logging
from datetime import datetime

from alumni_search.core.config import ScoringConfig
from alumni_search.core.schemas import Profile, RankedResult, RequirementFlag, SearchIntent
from alumni_search.pipeline.normalizer import contains_term
from alumni_search.pipeline.planner import CATEGORY_ORDER, EDUCATION_FIELDS, LOCATION_FIELDS

logger = logging.getLogger(__name__)

SENIORITY_KEYWORDS = ("senior", "staff", "principal", "lead", "director", "head", "vp",
                      "chief", "founder")
PROFESSIONAL_MARKERS = ("professional", "expert", "years", "experience")
GRADUATE_MARKERS = ("graduate", "graduated")


class _Tally:
    """Accumulates points together with their reasons."""

    def __init__(self) -> None:
        self.score = 0
        self.reasons: list[str] = []

    def add(self, points: int, reason: str) -> None:
        if points == 0:
            return
        self.score += points
        sign = "+" if points > 0 else "-"
        self.reasons.append(f"{reason} ({sign}{abs(points)})")

    def floor_at(self, floor: int, reason: str) -> None:
        """Apply a hard penalty that leaves the score at exactly ``floor``."""
        self.add(floor - self.score, reason)


def score_profile(
    profile: Profile,
    intent: SearchIntent,
    config: ScoringConfig,
    now: datetime | None = None,
) -> RankedResult:
    """Score one profile against an intent.

    Args:
        profile: Candidate returned by the retriever.
        intent: The interpreted query.
        config: Scoring weights from settings.
        now: Reference time for the recency bonus (defaults to now).

    Returns:
        RankedResult with ``exact`` set to ``score > 0``.
    """
    tally = _Tally()
    text = profile.full_text()
    headline = " ".join(
        (
            profile.professional.headline,
            profile.professional.current_title,
            profile.professional.professional_role,
        ),
    ).lower()

    if intent.names:
        _score_names(profile, intent.names, config, tally)

    location_matched = _score_locations(profile, intent.locations, config, tally)
    _score_skills(profile, intent.skills, headline, text, config, tally)
    _score_roles(profile, intent.roles, headline, text, config, tally)
    _score_education(profile, intent.education, config, tally)
    _score_companies(profile, intent.companies, config, tally)
    # Keywords count exactly when the planner fell back to the keyword plan.
    if not intent.names and not any(getattr(intent, c) for c in CATEGORY_ORDER):
        _score_keywords(intent.keywords, text, config, tally)

    _score_completeness(profile, config, tally)
    _score_recency(profile, config, tally, now or datetime.now())

    if RequirementFlag.SENIOR_LEVEL in intent.requirement_flags and any(
        contains_term(headline, kw) for kw in SENIORITY_KEYWORDS
    ):
        tally.add(config.seniority_match_bonus, "Senior profile")

    is_student = False
    if RequirementFlag.NEEDS_PROFESSIONAL_HELP in intent.requirement_flags:
        is_student = contains_term(text, "student") and not any(
            contains_term(text, g) for g in GRADUATE_MARKERS
        )
        if not is_student and any(contains_term(text, m) for m in PROFESSIONAL_MARKERS):
            tally.add(config.professional_bonus, "Professional expertise")

    # Hard penalties go last so they see the full positive total.
    if intent.locations and not location_matched:
        tally.floor_at(
            -config.location_mismatch_penalty,
            f"Outside {', '.join(intent.locations[:2])}",
        )
    if is_student:
        tally.floor_at(min(tally.score, 0) - config.student_penalty, "Student profile")

    return RankedResult(
        profile=profile,
        score=tally.score,
        match_reasons=tally.reasons,
        exact=tally.score > 0,
    )


def rank(
    profiles: list[Profile],
    intent: SearchIntent,
    config: ScoringConfig,
    now: datetime | None = None,
) -> list[RankedResult]:
    """Score, sort and tier candidates.

    Returns positive scorers only (exact=True). If none score above zero,
    returns the ``related_limit`` least-negative candidates with exact=False.
    """
    now = now or datetime.now()
    scored = [score_profile(p, intent, config, now) for p in profiles if p.has_name]
    scored.sort(key=lambda r: (-r.score, r.profile.display_name.lower(), r.profile.id))

    exact = [r for r in scored if r.score > 0]
    if exact:
        logger.debug("Ranked %d candidates, %d exact", len(scored), len(exact))
        return exact

    related = [r.model_copy(update={"exact": False}) for r in scored[: config.related_limit]]
    if related:
        logger.debug("No exact matches; surfacing %d related candidates", len(related))
    return related


def _score_names(
    profile: Profile,
    names: list[str],
    config: ScoringConfig,
    tally: _Tally,
) -> None:
    profile_names = [n.lower() for n in profile.names]
    best = 0
    matched = ""
    for name in names:
        wanted = name.lower().strip()
        for candidate in profile_names:
            if candidate == wanted:
                points = config.name_exact_bonus
            elif wanted in candidate or candidate in wanted:
                points = config.name_partial_bonus
            else:
                continue
            if points > best:
                best, matched = points, candidate
    if best:
        label = "Name" if best == config.name_exact_bonus else "Partial name"
        tally.add(best, f"{label}: {matched.title()}")


def _score_locations(
    profile: Profile,
    locations: list[str],
    config: ScoringConfig,
    tally: _Tally,
) -> bool:
    if not locations:
        return False
    values = [v.lower() for field in LOCATION_FIELDS for v in profile.field_values(field)]
    for loc in locations:
        if any(contains_term(v, loc) for v in values):
            tally.add(config.location_match_bonus, f"Location: {profile.location.display or loc}")
            return True
    return False


def _score_skills(
    profile: Profile,
    skills: list[str],
    headline: str,
    text: str,
    config: ScoringConfig,
    tally: _Tally,
) -> None:
    if not skills:
        return
    record = " ".join(
        [
            *profile.skills,
            *profile.field_values("professional.experience.title"),
            *profile.field_values("professional.experience.description"),
        ],
    ).lower()
    about = profile.about.lower()
    tiers: dict[str, list[str]] = {"headline": [], "record": [], "about": [], "anywhere": []}
    for skill in skills:
        if contains_term(headline, skill):
            tiers["headline"].append(skill)
        elif contains_term(record, skill):
            tiers["record"].append(skill)
        elif contains_term(about, skill):
            tiers["about"].append(skill)
        elif contains_term(text, skill):
            tiers["anywhere"].append(skill)

    weights = {
        "headline": (config.skill_headline_bonus, "Skills in headline"),
        "record": (config.skill_record_bonus, "Skills in experience"),
        "about": (config.skill_about_bonus, "Skills in about"),
        "anywhere": (config.skill_anywhere_bonus, "Skills mentioned"),
    }
    for tier, matched in tiers.items():
        if matched:
            weight, label = weights[tier]
            tally.add(weight * len(matched), f"{label}: {', '.join(matched)}")


def _score_roles(
    profile: Profile,
    roles: list[str],
    headline: str,
    text: str,
    config: ScoringConfig,
    tally: _Tally,
) -> None:
    if not roles:
        return
    history = " ".join(profile.field_values("professional.experience.title")).lower()
    current: list[str] = []
    past: list[str] = []
    anywhere: list[str] = []
    for role in roles:
        if contains_term(headline, role):
            current.append(role)
        elif contains_term(history, role):
            past.append(role)
        elif contains_term(text, role):
            anywhere.append(role)
    if current:
        tally.add(config.role_headline_bonus * len(current), f"Role: {', '.join(current)}")
    if past:
        tally.add(config.role_history_bonus * len(past), f"Past role: {', '.join(past)}")
    if anywhere:
        tally.add(config.role_anywhere_bonus * len(anywhere), f"Role mentioned: {', '.join(anywhere)}")


def _score_education(
    profile: Profile,
    education: list[str],
    config: ScoringConfig,
    tally: _Tally,
) -> None:
    if not education:
        return
    formal = " ".join(
        v for field in EDUCATION_FIELDS if field != "about" for v in profile.field_values(field)
    ).lower()
    about = profile.about.lower()
    in_record = [e for e in education if contains_term(formal, e)]
    in_about = [e for e in education if e not in in_record and contains_term(about, e)]
    if in_record:
        tally.add(
            config.education_match_bonus * len(in_record),
            f"Education: {', '.join(in_record)}",
        )
    if in_about:
        tally.add(
            config.education_about_bonus * len(in_about),
            f"Education mentioned: {', '.join(in_about)}",
        )


def _score_companies(
    profile: Profile,
    companies: list[str],
    config: ScoringConfig,
    tally: _Tally,
) -> None:
    if not companies:
        return
    current = " ".join((profile.professional.current_company, profile.professional.headline)).lower()
    past = " ".join(profile.field_values("professional.experience.company")).lower()
    at_current = [c for c in companies if contains_term(current, c)]
    at_past = [c for c in companies if c not in at_current and contains_term(past, c)]
    if at_current:
        tally.add(
            config.company_current_bonus * len(at_current),
            f"Company: {', '.join(at_current)}",
        )
    if at_past:
        tally.add(
            config.company_past_bonus * len(at_past),
            f"Past company: {', '.join(at_past)}",
        )


def _score_keywords(
    keywords: list[str],
    text: str,
    config: ScoringConfig,
    tally: _Tally,
) -> None:
    matched = [k for k in keywords if contains_term(text, k)]
    if matched:
        tally.add(config.keyword_match_bonus * len(matched), f"Keywords: {', '.join(matched)}")


def _score_completeness(profile: Profile, config: ScoringConfig, tally: _Tally) -> None:
    if profile.meta.profile_complete:
        tally.add(config.complete_profile_bonus, "Complete profile")
    if profile.professional.experience:
        tally.add(config.work_history_bonus, "Work history")
    if profile.about.strip():
        tally.add(config.about_bonus, "About section")
    if profile.skills:
        tally.add(config.skills_list_bonus, "Skills listed")


def _score_recency(
    profile: Profile,
    config: ScoringConfig,
    tally: _Tally,
    now: datetime,
) -> None:
    """Linear decay: full bonus when active today, zero after recency_days."""
    last_active = profile.meta.last_active
    if last_active is None or config.recency_max_bonus <= 0:
        return
    if last_active.tzinfo is not None and now.tzinfo is None:
        last_active = last_active.astimezone().replace(tzinfo=None)
    elif last_active.tzinfo is None and now.tzinfo is not None:
        last_active = last_active.replace(tzinfo=now.tzinfo)
    days_ago = max(0.0, (now - last_active).total_seconds() / 86400)
    remaining = max(0.0, 1.0 - days_ago / config.recency_days)
    points = round(config.recency_max_bonus * remaining)
    if points:
        tally.add(points, "Recently active")
