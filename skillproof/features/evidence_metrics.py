from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from skillproof.schemas import EvidenceItem, EvidenceMetrics, QualityDistribution

HIGH_QUALITY_MIN = 8.0
MEDIUM_QUALITY_MIN = 5.0


def time_span_days(items: Sequence[EvidenceItem]) -> float:
    """Fractional days between the oldest and newest item; 0 for fewer than two."""
    if len(items) < 2:
        return 0.0
    stamps = [item.created_at for item in items]
    return (max(stamps) - min(stamps)).total_seconds() / 86400


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def average_quality(items: Sequence[EvidenceItem]) -> float:
    return _mean([item.quality for item in items])


def calculate_evidence_metrics(items: Sequence[EvidenceItem]) -> EvidenceMetrics:
    if not items:
        return EvidenceMetrics()

    complexity = _mean([item.complexity_score for item in items])
    originality = _mean([item.originality_score for item in items])
    consistency = _mean([item.consistency_score for item in items])
    growth = _mean([item.growth_score for item in items])
    span = time_span_days(items)
    weeks = span / 7
    # A single burst of activity has no measurable span; report the raw count.
    frequency = len(items) / weeks if weeks > 0 else float(len(items))

    return EvidenceMetrics(
        total_evidence=len(items),
        average_complexity=complexity,
        average_originality=originality,
        average_consistency=consistency,
        average_growth=growth,
        time_span_days=span,
        frequency=frequency,
        quality_score=(complexity + originality + consistency + growth) / 4,
    )


def quality_distribution(items: Iterable[EvidenceItem]) -> QualityDistribution:
    distribution = QualityDistribution()
    for item in items:
        core = (item.complexity_score, item.originality_score, item.consistency_score)
        if all(score >= HIGH_QUALITY_MIN for score in core):
            distribution.high += 1
        elif all(score >= MEDIUM_QUALITY_MIN for score in core):
            distribution.medium += 1
        else:
            distribution.low += 1
    return distribution


def filter_by_time_range(
    items: Iterable[EvidenceItem],
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[EvidenceItem]:
    """Items created within ``[start, end]``; either bound may be open."""
    return [
        item
        for item in items
        if (start is None or item.created_at >= start) and (end is None or item.created_at <= end)
    ]


def filter_by_tech_stack(items: Iterable[EvidenceItem], technologies: Iterable[str]) -> list[EvidenceItem]:
    wanted = {tech.strip().lower() for tech in technologies if tech and tech.strip()}
    if not wanted:
        return []
    return [item for item in items if wanted.intersection(item.tech_stack)]
