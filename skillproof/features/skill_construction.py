from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from skillproof.core.config.scoring import get_scoring_value
from skillproof.schemas import (
    ConfidenceTier,
    ConstructedSkill,
    DataQuality,
    EvidenceItem,
    PlatformContribution,
    SkillLevel,
    SkillVerificationResult,
)

from .evidence_metrics import average_quality, calculate_evidence_metrics, quality_distribution, time_span_days

logger = logging.getLogger(__name__)

NO_EVIDENCE_GAP = "No evidence available to construct skills"

_DEFAULT_WEIGHTS = {"complexity": 0.30, "originality": 0.25, "consistency": 0.25, "growth": 0.20}


def group_by_technology(items: Sequence[EvidenceItem]) -> dict[str, list[EvidenceItem]]:
    """Tech tag -> items carrying it, in first-seen order. One item may join several groups."""
    groups: dict[str, list[EvidenceItem]] = {}
    for item in items:
        for tech in item.tech_stack:
            groups.setdefault(tech, []).append(item)
    return groups


def platform_weight_table(items: Sequence[EvidenceItem], depth_divisor: float | None = None) -> dict[str, float]:
    """Per-platform weight ``(avg_quality/10) * (1 + min(count/divisor, 1))``, normalized to sum 1."""
    divisor = float(depth_divisor or get_scoring_value("platform_weights.depth_divisor", 10))
    by_platform: dict[str, list[EvidenceItem]] = {}
    for item in items:
        by_platform.setdefault(item.platform_id, []).append(item)

    raw: dict[str, float] = {}
    for platform_id, platform_items in by_platform.items():
        depth = 1 + min(len(platform_items) / divisor, 1.0)
        raw[platform_id] = (average_quality(platform_items) / 10) * depth

    total = sum(raw.values())
    if total <= 0:
        return {platform_id: 1 / len(raw) for platform_id in raw} if raw else {}
    return {platform_id: weight / total for platform_id, weight in raw.items()}


def _points(value: float, table: Sequence[Sequence[float]]) -> float:
    for threshold, points in table:
        if value >= threshold:
            return float(points)
    return 0.0


class SkillConstructor:
    """Aggregates evidence into per-technology skills and an overall profile."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        weights = get_scoring_value("skills.weights", _DEFAULT_WEIGHTS) or _DEFAULT_WEIGHTS
        self._weights = {key: float(weights.get(key, _DEFAULT_WEIGHTS[key])) for key in _DEFAULT_WEIGHTS}
        self._tiers: list[dict[str, Any]] = list(get_scoring_value("skills.tiers", []) or [])
        self._levels = get_scoring_value("skills.levels", {}) or {}

    def construct(
        self,
        items: Sequence[EvidenceItem],
        platform_weights: Mapping[str, float] | None = None,
        user_id: str = "",
    ) -> SkillVerificationResult:
        generated_at = self._clock()
        if not items:
            return SkillVerificationResult(
                user_id=user_id,
                overall_score=0.0,
                confidence_level=ConfidenceTier.LOW,
                skills=[],
                gaps=[NO_EVIDENCE_GAP],
                data_quality=DataQuality.INSUFFICIENT,
                generated_at=generated_at,
            )

        weights = dict(platform_weights) if platform_weights is not None else platform_weight_table(items)
        skills = [self.build_skill(tech, group, weights) for tech, group in group_by_technology(items).items()]
        skills.sort(key=lambda skill: (-skill.score, skill.name))

        result = SkillVerificationResult(
            user_id=user_id,
            overall_score=self.overall_score(skills),
            confidence_level=self.overall_confidence(items),
            skills=skills,
            data_quality=self.data_quality(items),
            metrics=calculate_evidence_metrics(items),
            quality_distribution=quality_distribution(items),
            platform_weights=weights,
            generated_at=generated_at,
        )
        logger.info(
            "skills_constructed user=%s skills=%s evidence=%s",
            user_id or "-",
            len(skills),
            len(items),
        )
        return result

    def build_skill(
        self,
        name: str,
        group: Sequence[EvidenceItem],
        platform_weights: Mapping[str, float],
    ) -> ConstructedSkill:
        score = self.skill_score(group)
        confidence = self.skill_confidence(group)
        platforms = list(dict.fromkeys(item.platform_id for item in group))
        return ConstructedSkill(
            name=name,
            score=score,
            confidence=confidence,
            level=self.level_for(score),
            evidence_count=len(group),
            platforms=platforms,
            evidence_types=list(dict.fromkeys(item.evidence_type for item in group)),
            average_quality=average_quality(group),
            time_span_days=time_span_days(group),
            platform_contributions=self._contributions(group, platforms, platform_weights),
            explanation=self.explain(name, group, platforms, score, confidence),
        )

    def skill_score(self, group: Sequence[EvidenceItem]) -> float:
        count = len(group)
        weighted = (
            self._weights["complexity"] * sum(item.complexity_score for item in group)
            + self._weights["originality"] * sum(item.originality_score for item in group)
            + self._weights["consistency"] * sum(item.consistency_score for item in group)
            + self._weights["growth"] * sum(item.growth_score for item in group)
        ) / count
        return max(0.0, min(100.0, weighted * 10))

    def skill_confidence(self, group: Sequence[EvidenceItem]) -> ConfidenceTier:
        count = len(group)
        quality = average_quality(group)
        span = time_span_days(group)
        for tier in self._tiers:
            if (
                count >= tier["min_count"]
                and quality >= tier["min_quality"]
                and span >= tier["min_span_days"]
            ):
                return ConfidenceTier(tier["name"])
        return ConfidenceTier.LOW

    def level_for(self, score: float) -> SkillLevel:
        if score >= self._levels.get("expert", 80):
            return "Expert"
        if score >= self._levels.get("advanced", 60):
            return "Advanced"
        if score >= self._levels.get("intermediate", 40):
            return "Intermediate"
        return "Beginner"

    @staticmethod
    def explain(
        name: str,
        group: Sequence[EvidenceItem],
        platforms: Sequence[str],
        score: float,
        confidence: ConfidenceTier,
    ) -> str:
        avg_complexity = round(sum(item.complexity_score for item in group) / len(group))
        if avg_complexity >= 8:
            depth = "High complexity work indicates advanced proficiency"
        elif avg_complexity >= 5:
            depth = "Moderate complexity work indicates intermediate proficiency"
        else:
            depth = "Basic complexity work indicates developing proficiency"
        return (
            f"{name} skill constructed from {len(group)} evidence items across "
            f"{len(platforms)} platform(s). {depth}. "
            f"Score: {round(score)}/100, Confidence: {confidence.numeric}%"
        )

    @staticmethod
    def _contributions(
        group: Sequence[EvidenceItem],
        platforms: Sequence[str],
        platform_weights: Mapping[str, float],
    ) -> list[PlatformContribution]:
        contributions: list[PlatformContribution] = []
        for platform_id in platforms:
            platform_items = [item for item in group if item.platform_id == platform_id]
            share = len(platform_items) / len(group)
            contributions.append(
                PlatformContribution(
                    platform_id=platform_id,
                    contribution_weight=min(1.0, platform_weights.get(platform_id, 0.0) * share),
                    evidence_count=len(platform_items),
                    average_quality=average_quality(platform_items),
                )
            )
        return contributions

    @staticmethod
    def overall_score(skills: Sequence[ConstructedSkill]) -> float:
        total_weight = 0.0
        weighted = 0.0
        for skill in skills:
            weight = (skill.confidence.numeric / 100) * math.log(skill.evidence_count + 1)
            weighted += skill.score * weight
            total_weight += weight
        if total_weight <= 0:
            return 0.0
        return max(0.0, min(100.0, weighted / total_weight))

    def overall_confidence(self, items: Sequence[EvidenceItem]) -> ConfidenceTier:
        points = (
            _points(len(items), get_scoring_value("overall_confidence.evidence_count", []))
            + _points(average_quality(items), get_scoring_value("overall_confidence.quality", []))
            + _points(time_span_days(items), get_scoring_value("overall_confidence.span_days", []))
            + _points(
                len({item.platform_id for item in items}),
                get_scoring_value("overall_confidence.platforms", []),
            )
        )
        thresholds = get_scoring_value("overall_confidence.thresholds", {}) or {}
        if points >= thresholds.get("very_high", 80):
            return ConfidenceTier.VERY_HIGH
        if points >= thresholds.get("high", 60):
            return ConfidenceTier.HIGH
        if points >= thresholds.get("medium", 40):
            return ConfidenceTier.MEDIUM
        return ConfidenceTier.LOW

    @staticmethod
    def data_quality(items: Sequence[EvidenceItem]) -> DataQuality:
        count = len(items)
        if count < get_scoring_value("data_quality.insufficient_below_count", 5):
            return DataQuality.INSUFFICIENT

        platforms = len({item.platform_id for item in items})
        span = time_span_days(items)
        low = get_scoring_value("data_quality.low", {}) or {}
        if count < low.get("min_count", 20) or platforms < low.get("min_platforms", 2) or span < low.get("min_span_days", 108):
            return DataQuality.LOW

        medium = get_scoring_value("data_quality.medium", {}) or {}
        if (
            count < medium.get("min_count", 50)
            or platforms < medium.get("min_platforms", 3)
            or span < medium.get("min_span_days", 216)
            or average_quality(items) < medium.get("min_quality", 6)
        ):
            return DataQuality.MEDIUM
        return DataQuality.HIGH
