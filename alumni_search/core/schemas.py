"""Core data models for the alumni directory search service."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Experience(BaseModel):
    """One entry of a profile's work history."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    company: str = ""
    description: str = ""


class Education(BaseModel):
    model_config = ConfigDict(frozen=True)

    school: str = ""
    degree: str = ""
    field: str = ""


class Identity(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    full_name: str = ""
    linkedin_name: str = ""


class Professional(BaseModel):
    model_config = ConfigDict(frozen=True)

    headline: str = ""
    current_company: str = ""
    current_title: str = ""
    professional_role: str = ""
    domain: str = ""
    experience: list[Experience] = Field(default_factory=list)


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    city: str = ""
    state: str = ""
    country: str = ""
    address: str = ""
    linkedin_location: str = ""

    @property
    def display(self) -> str:
        if self.linkedin_location:
            return self.linkedin_location
        parts = [p for p in (self.city, self.state, self.country) if p]
        return ", ".join(parts) or self.address


class ProfileMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    profile_complete: bool = False
    last_active: datetime | None = None


class Contact(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str = ""
    linkedin: str = ""


class Profile(BaseModel):
    """An alumni profile as stored in the directory.

    Frozen: the search core only ever reads profiles.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    identity: Identity = Field(default_factory=Identity)
    professional: Professional = Field(default_factory=Professional)
    location: Location = Field(default_factory=Location)
    education: list[Education] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    about: str = ""
    meta: ProfileMeta = Field(default_factory=ProfileMeta)
    contact: Contact = Field(default_factory=Contact)

    @property
    def names(self) -> list[str]:
        """All non-empty name fields, in display priority order."""
        candidates = (
            self.identity.full_name,
            self.identity.linkedin_name,
            self.identity.name,
        )
        return [n.strip() for n in candidates if n and n.strip()]

    @property
    def has_name(self) -> bool:
        return bool(self.names)

    @property
    def display_name(self) -> str:
        names = self.names
        return names[0] if names else "Alumni Member"

    def field_values(self, path: str) -> list[str]:
        """Return every string found under a dotted field path.

        Lists are traversed transparently, so ``professional.experience.title``
        yields the title of each experience entry.
        """
        values: list[Any] = [self]
        for part in path.split("."):
            next_values: list[Any] = []
            for value in values:
                child = getattr(value, part, None) if isinstance(value, BaseModel) else None
                if child is None:
                    continue
                if isinstance(child, list):
                    next_values.extend(child)
                else:
                    next_values.append(child)
            values = next_values
        return [v for v in values if isinstance(v, str) and v]

    def flatten(self) -> list[tuple[str, str]]:
        """All (dotted path, text value) pairs held by the profile."""
        pairs: list[tuple[str, str]] = []
        _flatten_into(self, "", pairs)
        return pairs

    def full_text(self) -> str:
        """Lower-cased concatenation of every text value in the record."""
        return " ".join(value for _, value in self.flatten()).lower()


def _flatten_into(model: BaseModel, prefix: str, pairs: list[tuple[str, str]]) -> None:
    for name in type(model).model_fields:
        if not prefix and name == "id":
            continue
        value = getattr(model, name)
        path = f"{prefix}{name}"
        items = value if isinstance(value, list) else [value]
        for item in items:
            if isinstance(item, BaseModel):
                _flatten_into(item, f"{path}.", pairs)
            elif isinstance(item, str) and item:
                pairs.append((path, item))


class RequirementFlag(str, Enum):
    NEEDS_PROFESSIONAL_HELP = "needs_professional_help"
    SENIOR_LEVEL = "senior_level"


class SearchIntent(BaseModel):
    """Structured interpretation of a free-text query."""

    model_config = ConfigDict(frozen=True)

    names: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    roles: list[str] = Field(default_factory=list)
    companies: list[str] = Field(default_factory=list)
    education: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    requirement_flags: frozenset[RequirementFlag] = Field(default_factory=frozenset)

    def is_empty(self) -> bool:
        """True when no structured category is set (keywords don't count)."""
        return not (
            self.names
            or self.skills
            or self.locations
            or self.roles
            or self.companies
            or self.education
            or self.requirement_flags
        )

    def is_name_search(self) -> bool:
        return bool(self.names)

    def summary(self) -> str:
        """Short human-readable description, e.g. for log lines."""
        parts = []
        for label in ("names", "skills", "roles", "locations", "companies", "education"):
            values = getattr(self, label)
            if values:
                parts.append(f"{label}={', '.join(values[:4])}")
        if self.requirement_flags:
            flags = sorted(f.value for f in self.requirement_flags)
            parts.append(f"flags={', '.join(flags)}")
        if not parts and self.keywords:
            parts.append(f"keywords={', '.join(self.keywords)}")
        return "; ".join(parts) or "(empty)"


class RankedResult(BaseModel):
    """A scored profile. Every point of ``score`` is listed in ``match_reasons``."""

    model_config = ConfigDict(frozen=True)

    profile: Profile
    score: int
    match_reasons: list[str] = Field(default_factory=list)
    exact: bool = True


class SessionStatus(str, Enum):
    ACTIVE = "active"
    EXHAUSTED = "exhausted"


class SearchSession(BaseModel):
    """Per-user conversational state. Mutable, owned by the SessionManager."""

    user_id: str
    created_at: datetime = Field(default_factory=datetime.now)
    last_activity: datetime = Field(default_factory=datetime.now)
    last_intent: SearchIntent | None = None
    last_query: str = ""
    ranked_results: list[RankedResult] = Field(default_factory=list)
    shown_count: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return len(self.ranked_results)

    @property
    def remaining(self) -> int:
        return max(0, self.total - self.shown_count)

    @property
    def status(self) -> SessionStatus:
        if self.shown_count < self.total:
            return SessionStatus.ACTIVE
        return SessionStatus.EXHAUSTED


class ErrorKind(str, Enum):
    STORE_UNAVAILABLE = "store_unavailable"
    ORACLE_UNAVAILABLE = "oracle_unavailable"
    NO_SESSION_FOUND = "no_session_found"


class SearchOutcome(BaseModel):
    """What the search facade hands to the response assembler."""

    model_config = ConfigDict(frozen=True)

    query: str = ""
    results: list[RankedResult] = Field(default_factory=list)
    intent_summary: SearchIntent = Field(default_factory=SearchIntent)
    error: ErrorKind | None = None
    follow_up: bool = False
    total_results: int = 0
    remaining: int = 0
    exhausted: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None
