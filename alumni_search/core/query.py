"""Store-agnostic document queries.

A DocumentQuery is a boolean tree of case-insensitive substring predicates
over dotted profile field paths. Stores compile the tree into their own
query language; matches() evaluates it in Python.
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from alumni_search.core.schemas import Profile


class FieldMatch(BaseModel):
    """True when any value under ``field`` contains ``term`` (case-insensitive)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["field"] = "field"
    field: str
    term: str

    def matches(self, profile: Profile) -> bool:
        needle = self.term.lower()
        return any(needle in value.lower() for value in profile.field_values(self.field))


class AnyOf(BaseModel):
    """Disjunction. An empty AnyOf matches nothing."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["any"] = "any"
    clauses: list["Clause"] = Field(default_factory=list)

    def matches(self, profile: Profile) -> bool:
        return any(c.matches(profile) for c in self.clauses)


class AllOf(BaseModel):
    """Conjunction. An empty AllOf matches everything and is never planned."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["all"] = "all"
    clauses: list["Clause"] = Field(default_factory=list)

    def matches(self, profile: Profile) -> bool:
        return all(c.matches(profile) for c in self.clauses)


Clause = Annotated[FieldMatch | AnyOf | AllOf, Field(discriminator="kind")]

AnyOf.model_rebuild()
AllOf.model_rebuild()


class PlanStrategy(str, Enum):
    NAME = "name"
    CONJUNCTIVE = "conjunctive"
    RELAXED = "relaxed"
    KEYWORD = "keyword"


class DocumentQuery(BaseModel):
    """One planned store query."""

    model_config = ConfigDict(frozen=True)

    label: str
    strategy: PlanStrategy
    clause: Clause
    categories: list[str] = Field(default_factory=list)
    dropped: list[str] = Field(default_factory=list)

    @property
    def is_relaxed(self) -> bool:
        return self.strategy is PlanStrategy.RELAXED

    def matches(self, profile: Profile) -> bool:
        return self.clause.matches(profile)


def any_field(fields: tuple[str, ...], terms: list[str]) -> AnyOf:
    """OR of every term across every field."""
    return AnyOf(
        clauses=[FieldMatch(field=f, term=t) for t in terms for f in fields],
    )
