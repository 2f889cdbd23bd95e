from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

SCORE_MIN = 0.0
SCORE_MAX = 10.0


class EvidenceType(str, Enum):
    CODE_COMMIT = "code_commit"
    PROJECT_CREATION = "project_creation"
    PROBLEM_SOLVING = "problem_solving"
    ARTICLE_PUBLICATION = "article_publication"
    FREELANCE_PROJECT = "freelance_project"
    DEPLOYED_APP = "deployed_app"
    COMPETITION_PARTICIPATION = "competition_participation"
    CODE_REVIEW = "code_review"
    DOCUMENTATION = "documentation"
    OPEN_SOURCE_CONTRIBUTION = "open_source_contribution"
    # Anything an adapter emits outside the canonical set.
    OTHER = "other"


def clamp_score(value: float, low: float = SCORE_MIN, high: float = SCORE_MAX) -> float:
    if math.isnan(value):
        return low
    return max(low, min(high, float(value)))


class RawActivityRecord(BaseModel):
    """One platform-native fact, as emitted by an adapter.

    ``evidence_type`` and ``timestamp`` are optional here so that malformed
    records survive until the normalizer, which drops and counts them.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    platform_id: str | None = None
    evidence_type: str | None = None
    timestamp: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class EvidenceItem(BaseModel):
    """Platform-agnostic unit of proof. Scores are clamped to [0, 10] on every write."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    user_id: str
    platform_id: str
    evidence_type: EvidenceType
    complexity_score: float = 5.0
    originality_score: float = 5.0
    consistency_score: float = 5.0
    growth_score: float = 5.0
    activity_frequency_score: float = 5.0
    tech_stack: list[str] = Field(default_factory=list)
    created_at: datetime
    raw_metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator(
        "complexity_score",
        "originality_score",
        "consistency_score",
        "growth_score",
        "activity_frequency_score",
    )
    @classmethod
    def _clamp(cls, value: float) -> float:
        return clamp_score(value)

    @field_validator("tech_stack")
    @classmethod
    def _dedupe_tags(cls, value: list[str]) -> list[str]:
        seen: set[str] = set()
        tags: list[str] = []
        for raw in value:
            tag = str(raw).strip().lower()
            if tag and tag not in seen:
                seen.add(tag)
                tags.append(tag)
        return tags

    @property
    def quality(self) -> float:
        """Mean of the four sub-scores."""
        return (
            self.complexity_score
            + self.originality_score
            + self.consistency_score
            + self.growth_score
        ) / 4
