from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, computed_field

from .evidence import EvidenceType
from .platforms import PlatformFailure

SkillLevel = Literal["Beginner", "Intermediate", "Advanced", "Expert"]


class ConfidenceTier(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"

    @property
    def numeric(self) -> int:
        return _TIER_NUMERIC[self]


_TIER_NUMERIC = {
    ConfidenceTier.LOW: 40,
    ConfidenceTier.MEDIUM: 60,
    ConfidenceTier.HIGH: 75,
    ConfidenceTier.VERY_HIGH: 90,
}


class DataQuality(str, Enum):
    INSUFFICIENT = "INSUFFICIENT"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class EvidenceMetrics(BaseModel):
    total_evidence: int = 0
    average_complexity: float = 0.0
    average_originality: float = 0.0
    average_consistency: float = 0.0
    average_growth: float = 0.0
    time_span_days: float = 0.0
    frequency: float = Field(default=0.0, description="Evidence items per week.")
    quality_score: float = 0.0


class QualityDistribution(BaseModel):
    high: int = 0
    medium: int = 0
    low: int = 0


class PlatformContribution(BaseModel):
    platform_id: str
    contribution_weight: float = Field(ge=0.0, le=1.0)
    evidence_count: int = Field(ge=1)
    average_quality: float = Field(ge=0.0, le=10.0)


class ConstructedSkill(BaseModel):
    name: str
    score: float = Field(ge=0.0, le=100.0)
    confidence: ConfidenceTier
    level: SkillLevel
    evidence_count: int = Field(ge=1)
    platforms: list[str] = Field(default_factory=list)
    evidence_types: list[EvidenceType] = Field(default_factory=list)
    average_quality: float = 0.0
    time_span_days: float = 0.0
    platform_contributions: list[PlatformContribution] = Field(default_factory=list)
    explanation: str = ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def confidence_score(self) -> int:
        return self.confidence.numeric


class SkillVerificationResult(BaseModel):
    user_id: str = ""
    overall_score: float = Field(default=0.0, ge=0.0, le=100.0)
    confidence_level: ConfidenceTier = ConfidenceTier.LOW
    skills: list[ConstructedSkill] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    data_quality: DataQuality = DataQuality.INSUFFICIENT
    metrics: EvidenceMetrics = Field(default_factory=EvidenceMetrics)
    quality_distribution: QualityDistribution = Field(default_factory=QualityDistribution)
    platform_weights: dict[str, float] = Field(default_factory=dict)
    platform_failures: list[PlatformFailure] = Field(default_factory=list)
    dropped_records: int = 0
    generated_at: datetime
