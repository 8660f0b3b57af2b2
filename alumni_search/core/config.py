"""Configuration models and YAML loader for the alumni search service."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from alumni_search.core.vocabulary import Vocabulary


class DatabaseConfig(BaseModel):
    """Directory database configuration."""

    path: str = "data/alumni.db"
    log_searches: bool = True


class SessionConfig(BaseModel):
    """Conversation session lifetime and pagination."""

    ttl_minutes: int = Field(default=30, ge=1)
    first_page_size: int = Field(default=3, ge=1, le=20)
    page_size: int = Field(default=3, ge=1, le=20)


class RetrievalConfig(BaseModel):
    """Limits applied while executing planned queries."""

    limit_per_plan: int = Field(default=50, ge=1)
    aggregate_cap: int = Field(default=100, ge=1)
    min_results: int = Field(default=3, ge=1)
    store_timeout_seconds: float = Field(default=5.0, gt=0.0)

    @model_validator(mode="after")
    def cap_covers_threshold(self) -> "RetrievalConfig":
        if self.aggregate_cap < self.min_results:
            msg = "aggregate_cap must be >= min_results"
            raise ValueError(msg)
        return self


class ScoringConfig(BaseModel):
    """Weights for rule-based relevance scoring."""

    name_exact_bonus: int = 100
    name_partial_bonus: int = 50
    location_match_bonus: int = 50
    location_mismatch_penalty: int = Field(default=30, ge=1)

    skill_headline_bonus: int = 30
    skill_record_bonus: int = 20
    skill_about_bonus: int = 15
    skill_anywhere_bonus: int = 5

    role_headline_bonus: int = 35
    role_history_bonus: int = 20
    role_anywhere_bonus: int = 5

    education_match_bonus: int = 25
    education_about_bonus: int = 10

    company_current_bonus: int = 20
    company_past_bonus: int = 10

    keyword_match_bonus: int = 10

    complete_profile_bonus: int = 10
    work_history_bonus: int = 15
    about_bonus: int = 5
    skills_list_bonus: int = 10

    recency_max_bonus: int = Field(default=5, ge=0)
    recency_days: int = Field(default=90, ge=1)

    seniority_match_bonus: int = 15
    professional_bonus: int = 30
    student_penalty: int = Field(default=100, ge=1)

    related_limit: int = Field(default=3, ge=0)


class OracleConfig(BaseModel):
    """Optional LLM-backed intent extraction."""

    enabled: bool = False
    provider: str = "anthropic"
    model: str | None = None
    timeout_seconds: float = Field(default=8.0, gt=0.0)

    @field_validator("provider")
    @classmethod
    def provider_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "provider must not be empty"
            raise ValueError(msg)
        return v.strip().lower()


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    oracle: OracleConfig = Field(default_factory=OracleConfig)
    vocabulary: Vocabulary = Field(default_factory=Vocabulary)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
