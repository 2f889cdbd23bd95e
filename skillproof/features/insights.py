from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from skillproof.core.config.scoring import get_scoring_value
from skillproof.schemas import ConfidenceTier, ConstructedSkill, EvidenceItem, EvidenceType
from skillproof.taxonomy import TechnologyTaxonomy, get_default_taxonomy

_TIER_ORDER = [ConfidenceTier.LOW, ConfidenceTier.MEDIUM, ConfidenceTier.HIGH, ConfidenceTier.VERY_HIGH]


@dataclass(slots=True)
class Insights:
    strengths: list[str] = field(default_factory=list)
    gaps: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


class InsightGenerator:
    def __init__(
        self,
        taxonomy: TechnologyTaxonomy | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._taxonomy = taxonomy or get_default_taxonomy()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def generate(self, skills: Sequence[ConstructedSkill], items: Sequence[EvidenceItem]) -> Insights:
        return Insights(
            strengths=self.strengths(skills),
            gaps=self.gaps(skills, items),
            recommendations=self.recommendations(skills, items),
        )

    def strengths(self, skills: Sequence[ConstructedSkill]) -> list[str]:
        limit = int(get_scoring_value("insights.strengths.limit", 5))
        min_score = float(get_scoring_value("insights.strengths.min_score", 70))
        min_tier = ConfidenceTier(get_scoring_value("insights.strengths.min_confidence", "HIGH"))
        eligible = [
            skill
            for skill in skills
            if _TIER_ORDER.index(skill.confidence) >= _TIER_ORDER.index(min_tier) and skill.score >= min_score
        ]
        eligible.sort(key=lambda skill: (-(skill.score * skill.confidence.numeric), skill.name))
        return [
            f"{skill.name} ({round(skill.score)}/100, confidence {skill.confidence.numeric}%)"
            for skill in eligible[:limit]
        ]

    def gaps(self, skills: Sequence[ConstructedSkill], items: Sequence[EvidenceItem]) -> list[str]:
        present = {skill.name.lower() for skill in skills}
        gaps = [
            tech
            for tech in self._taxonomy.expected_technologies()
            if tech not in present and any(related in present for related in self._taxonomy.related_technologies(tech))
        ]

        seen_types = {item.evidence_type for item in items}
        type_gaps = get_scoring_value("insights.evidence_type_gaps", {}) or {}
        for type_value, label in type_gaps.items():
            if EvidenceType(type_value) not in seen_types:
                gaps.append(label)
        return gaps

    def recommendations(self, skills: Sequence[ConstructedSkill], items: Sequence[EvidenceItem]) -> list[str]:
        recommendations: list[str] = []

        weak_score = float(get_scoring_value("insights.weak_skill_score", 50))
        weak = [skill.name for skill in skills if skill.score < weak_score]
        if weak:
            recommendations.append(f"Focus on improving: {', '.join(weak)}")

        platforms = {item.platform_id for item in items}
        if len(platforms) < int(get_scoring_value("insights.min_platforms", 3)):
            recommendations.append("Connect more platforms to demonstrate diverse skills")

        window = timedelta(days=float(get_scoring_value("insights.recent_window_days", 30)))
        cutoff = self._clock() - window
        recent = sum(1 for item in items if item.created_at >= cutoff)
        if recent < int(get_scoring_value("insights.min_recent_items", 5)):
            recommendations.append("Increase recent activity to show current skills")
        return recommendations
