from .api import CollectRequest, PlatformRecordsPayload, VerifyRequest
from .evidence import EvidenceItem, EvidenceType, RawActivityRecord, clamp_score
from .platforms import PlatformCredentials, PlatformDescriptor, PlatformFailure, PlatformType
from .skills import (
    ConfidenceTier,
    ConstructedSkill,
    DataQuality,
    EvidenceMetrics,
    PlatformContribution,
    QualityDistribution,
    SkillLevel,
    SkillVerificationResult,
)

__all__ = [
    "CollectRequest",
    "PlatformRecordsPayload",
    "VerifyRequest",
    "EvidenceItem",
    "EvidenceType",
    "RawActivityRecord",
    "clamp_score",
    "PlatformCredentials",
    "PlatformDescriptor",
    "PlatformFailure",
    "PlatformType",
    "ConfidenceTier",
    "ConstructedSkill",
    "DataQuality",
    "EvidenceMetrics",
    "PlatformContribution",
    "QualityDistribution",
    "SkillLevel",
    "SkillVerificationResult",
]
