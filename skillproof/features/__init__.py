from .evidence_metrics import (
    average_quality,
    calculate_evidence_metrics,
    filter_by_tech_stack,
    filter_by_time_range,
    quality_distribution,
    time_span_days,
)
from .insights import InsightGenerator, Insights
from .normalizer import BONUS_RULES, EvidenceNormalizer, NormalizationReport
from .rebalancer import CrossPlatformRebalancer
from .skill_construction import (
    NO_EVIDENCE_GAP,
    SkillConstructor,
    group_by_technology,
    platform_weight_table,
)

__all__ = [
    "average_quality",
    "calculate_evidence_metrics",
    "filter_by_tech_stack",
    "filter_by_time_range",
    "quality_distribution",
    "time_span_days",
    "InsightGenerator",
    "Insights",
    "BONUS_RULES",
    "EvidenceNormalizer",
    "NormalizationReport",
    "CrossPlatformRebalancer",
    "NO_EVIDENCE_GAP",
    "SkillConstructor",
    "group_by_technology",
    "platform_weight_table",
]
