from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from skillproof.adapters.base import parse_timestamp
from skillproof.core.config.scoring import get_scoring_value
from skillproof.schemas import EvidenceItem, EvidenceType, RawActivityRecord, clamp_score
from skillproof.taxonomy import TechnologyTaxonomy, get_default_taxonomy

logger = logging.getLogger(__name__)

TAG_FIELDS = ("language", "languages", "topics", "tags", "technologies", "skills")
TEXT_FIELDS = ("title", "name", "description", "body", "message")

# (complexity, originality, consistency, growth) increments over the base score.
Bonus = tuple[float, float, float, float]
BonusRule = Callable[[Mapping[str, Any], datetime], Bonus]

_NO_BONUS: Bonus = (0.0, 0.0, 0.0, 0.0)


@dataclass(slots=True)
class NormalizationReport:
    items: list[EvidenceItem] = field(default_factory=list)
    dropped: int = 0


def _num(metadata: Mapping[str, Any], key: str) -> float | None:
    value = metadata.get(key)
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _text_len(metadata: Mapping[str, Any], key: str) -> int:
    value = metadata.get(key)
    return len(value) if isinstance(value, str) else 0


def _list_len(metadata: Mapping[str, Any], key: str) -> int:
    value = metadata.get(key)
    if isinstance(value, (list, tuple, set)):
        return len(value)
    if isinstance(value, str):
        return len([part for part in value.split(",") if part.strip()])
    return 0


def _gt(value: float | None, threshold: float) -> bool:
    return value is not None and value > threshold


def _ge(value: float | None, threshold: float) -> bool:
    return value is not None and value >= threshold


def _tiered(value: float | None, steps: tuple[tuple[float, float], ...]) -> float:
    """First matching ``(threshold, bonus)`` where ``value > threshold``."""
    if value is None:
        return 0.0
    for threshold, bonus in steps:
        if value > threshold:
            return bonus
    return 0.0


def _days_between(later: datetime | None, earlier: datetime | None) -> float | None:
    if later is None or earlier is None:
        return None
    return (later - earlier).total_seconds() / 86400


def _timestamp(metadata: Mapping[str, Any], key: str) -> datetime | None:
    return parse_timestamp(metadata.get(key))


def _code_commit(meta: Mapping[str, Any], now: datetime) -> Bonus:
    commits = _num(meta, "commit_count")
    complexity = (2 if _gt(_num(meta, "lines_changed"), 500) else 0) + (
        1 if _gt(_num(meta, "files_changed"), 10) else 0
    )
    originality = 1 if _text_len(meta, "message") > 50 else 0
    consistency = (1 if _ge(commits, 3) else 0) + (1 if _ge(commits, 10) else 0)
    return (complexity, originality, consistency, 0)


def _project_creation(meta: Mapping[str, Any], now: datetime) -> Bonus:
    stars = _num(meta, "stars")
    forks = _num(meta, "forks")
    topics = _list_len(meta, "topics")
    complexity = (
        (2 if _gt(_num(meta, "size"), 1000) else 0)
        + (1 if _gt(forks, 10) else 0)
        + (1 if _gt(stars, 50) else 0)
        + (1 if topics > 3 else 0)
    )
    originality = (
        (1 if meta.get("is_private") is False else 0)
        + (1 if _text_len(meta, "description") > 100 else 0)
        + (1 if topics > 0 else 0)
    )
    active_days = _days_between(_timestamp(meta, "updated_at"), _timestamp(meta, "created_at"))
    consistency = 2 if _gt(active_days, 30) and meta.get("pushed_at") else 0
    growth = (1 if _gt(stars, 0) else 0) + (1 if _gt(forks, 0) else 0) + (1 if _gt(_num(meta, "watchers"), 0) else 0)
    return (complexity, originality, consistency, growth)


def _open_source_contribution(meta: Mapping[str, Any], now: datetime) -> Bonus:
    merged = bool(meta.get("merged"))
    complexity = (
        (2 if _gt(_num(meta, "additions"), 500) else 0)
        + (1 if _gt(_num(meta, "changed_files"), 10) else 0)
        + (1 if merged else 0)
    )
    originality = 1 if _text_len(meta, "body") > 100 else 0
    return (complexity, originality, 1 if merged else 0, 0)


_DIFFICULTY_BONUS = {"hard": 3, "medium": 2, "easy": 1}


def _problem_solving(meta: Mapping[str, Any], now: datetime) -> Bonus:
    complexity = _DIFFICULTY_BONUS.get(str(meta.get("difficulty") or "").lower(), 0)
    originality = _tiered(_num(meta, "total_solved"), ((500, 3), (200, 2), (50, 1)))
    consistency = _tiered(_num(meta, "rating"), ((2000, 3), (1600, 2), (1200, 1)))
    growth = 1 if meta.get("accepted") else 0
    return (complexity, originality, consistency, growth)


def _competition(meta: Mapping[str, Any], now: datetime) -> Bonus:
    complexity = _tiered(_num(meta, "new_rating"), ((2000, 3), (1600, 2), (1200, 1)))
    percentile = _num(meta, "rank_percentile")
    if percentile is not None:
        complexity += 2 if percentile <= 0.1 else 1 if percentile <= 0.25 else 0
    originality = 1 if meta.get("medal") else 0
    consistency = 1 if _ge(_num(meta, "problems_solved"), 3) else 0
    change = _num(meta, "rating_change")
    growth = 0
    if change is not None:
        growth = 3 if change > 0 else 1 if change > -50 else 0
    return (complexity, originality, consistency, growth)


def _article(meta: Mapping[str, Any], now: datetime) -> Bonus:
    tags = _list_len(meta, "tags")
    description = _text_len(meta, "description")
    complexity = (
        (2 if description > 1000 else 0)
        + (2 if _gt(_num(meta, "reading_time_minutes"), 10) else 0)
        + (1 if tags > 5 else 0)
    )
    originality = (1 if _text_len(meta, "title") > 50 else 0) + (1 if description > 500 else 0) + (1 if tags else 0)
    age = _days_between(now, _timestamp(meta, "published_at"))
    consistency = 0
    if age is not None:
        consistency = 3 if age < 30 else 2 if age < 90 else 1 if age < 180 else 0
    growth = (2 if _gt(_num(meta, "reactions"), 10) else 0) + (1 if _gt(_num(meta, "comments"), 5) else 0)
    return (complexity, originality, consistency, growth)


def _freelance(meta: Mapping[str, Any], now: datetime) -> Bonus:
    budget = _num(meta, "budget")
    rating = _num(meta, "rating")
    complexity = (
        (2 if _gt(budget, 1000) else 0)
        + (1 if _gt(_num(meta, "duration_days"), 30) else 0)
        + (1 if _list_len(meta, "technologies") > 5 else 0)
        + (1 if _ge(rating, 4) else 0)
    )
    originality = (
        (1 if _text_len(meta, "description") > 200 else 0)
        + (1 if meta.get("client") else 0)
        + (1 if rating is not None else 0)
    )
    consistency = (3 if str(meta.get("status") or "").lower() == "completed" else 0) + (2 if _ge(rating, 4) else 0)
    growth = (
        (2 if _gt(budget, 2000) else 0)
        + (2 if _ge(rating, 4.5) else 0)
        + (1 if _text_len(meta, "review") > 100 else 0)
    )
    return (complexity, originality, consistency, growth)


def _deployed_app(meta: Mapping[str, Any], now: datetime) -> Bonus:
    complexity = (2 if _list_len(meta, "technologies") > 3 else 0) + (1 if _gt(_num(meta, "team_size"), 1) else 0)
    originality = (
        (1 if meta.get("has_source") else 0)
        + (1 if _text_len(meta, "description") > 200 else 0)
        + (2 if meta.get("winner") else 0)
    )
    consistency = 2 if _gt(_num(meta, "uptime_days"), 30) else 0
    growth = (2 if _gt(_num(meta, "likes"), 10) else 0) + (1 if _gt(_num(meta, "comments"), 5) else 0)
    return (complexity, originality, consistency, growth)


def _code_review(meta: Mapping[str, Any], now: datetime) -> Bonus:
    complexity = (1 if _gt(_num(meta, "comment_count"), 5) else 0) + (
        1 if _gt(_num(meta, "files_changed"), 10) else 0
    )
    consistency = 1 if str(meta.get("state") or "").lower() in ("approved", "merged") else 0
    return (complexity, 0, consistency, 0)


def _documentation(meta: Mapping[str, Any], now: datetime) -> Bonus:
    complexity = 2 if _text_len(meta, "description") > 1000 else 0
    originality = 1 if _gt(_num(meta, "downloads"), 100) else 0
    growth = (2 if _gt(_num(meta, "votes"), 10) else 0) + (1 if _ge(_num(meta, "usability"), 0.8) else 0)
    return (complexity, originality, 0, growth)


BONUS_RULES: dict[EvidenceType, BonusRule] = {
    EvidenceType.CODE_COMMIT: _code_commit,
    EvidenceType.PROJECT_CREATION: _project_creation,
    EvidenceType.OPEN_SOURCE_CONTRIBUTION: _open_source_contribution,
    EvidenceType.PROBLEM_SOLVING: _problem_solving,
    EvidenceType.COMPETITION_PARTICIPATION: _competition,
    EvidenceType.ARTICLE_PUBLICATION: _article,
    EvidenceType.FREELANCE_PROJECT: _freelance,
    EvidenceType.DEPLOYED_APP: _deployed_app,
    EvidenceType.CODE_REVIEW: _code_review,
    EvidenceType.DOCUMENTATION: _documentation,
}


def resolve_evidence_type(raw: str | None) -> EvidenceType | None:
    if raw is None or not str(raw).strip():
        return None
    try:
        return EvidenceType(str(raw).strip().lower())
    except ValueError:
        return EvidenceType.OTHER


class EvidenceNormalizer:
    """Turns raw platform records into scored, tech-tagged evidence items."""

    def __init__(
        self,
        taxonomy: TechnologyTaxonomy | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._taxonomy = taxonomy or get_default_taxonomy()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._base = float(get_scoring_value("normalizer.base_score", 5))
        buckets = get_scoring_value("normalizer.recency_buckets", []) or []
        self._recency = [(float(bucket["max_days"]), float(bucket["score"])) for bucket in buckets]
        self._recency_floor = float(get_scoring_value("normalizer.recency_floor", 4))

    def normalize(self, records: Iterable[RawActivityRecord], user_id: str) -> list[EvidenceItem]:
        return self.normalize_records(records, user_id).items

    def normalize_records(
        self,
        records: Iterable[RawActivityRecord],
        user_id: str,
        platform_id: str | None = None,
    ) -> NormalizationReport:
        now = self._clock()
        report = NormalizationReport()
        for record in records:
            item = self._normalize_one(record, user_id, platform_id, now)
            if item is None:
                report.dropped += 1
                continue
            report.items.append(item)
        return report

    def _normalize_one(
        self,
        record: RawActivityRecord,
        user_id: str,
        platform_id: str | None,
        now: datetime,
    ) -> EvidenceItem | None:
        evidence_type = resolve_evidence_type(record.evidence_type)
        if evidence_type is None or record.timestamp is None:
            logger.debug(
                "record_dropped id=%s platform=%s: missing %s",
                record.id,
                platform_id or record.platform_id,
                "evidence_type" if evidence_type is None else "timestamp",
            )
            return None

        created_at = record.timestamp if record.timestamp.tzinfo else record.timestamp.replace(tzinfo=timezone.utc)
        metadata = record.metadata or {}
        rule = BONUS_RULES.get(evidence_type)
        bonus = rule(metadata, now) if rule is not None and metadata else _NO_BONUS
        complexity, originality, consistency, growth = (clamp_score(self._base + value) for value in bonus)

        return EvidenceItem(
            id=record.id,
            user_id=user_id,
            platform_id=platform_id or record.platform_id or "unknown",
            evidence_type=evidence_type,
            complexity_score=complexity,
            originality_score=originality,
            consistency_score=consistency,
            growth_score=growth,
            activity_frequency_score=self.recency_score(created_at, now),
            tech_stack=self.extract_tech_stack(metadata),
            created_at=created_at,
            raw_metadata=dict(metadata),
        )

    def recency_score(self, timestamp: datetime, now: datetime) -> float:
        days = (now - timestamp).total_seconds() / 86400
        for max_days, score in self._recency:
            if days < max_days:
                return score
        return self._recency_floor

    def extract_tech_stack(self, metadata: Mapping[str, Any]) -> list[str]:
        tags: list[str] = []
        for key in TAG_FIELDS:
            value = metadata.get(key)
            if isinstance(value, str):
                tags.extend(part for part in value.split(","))
            elif isinstance(value, (list, tuple, set)):
                tags.extend(str(part) for part in value if part is not None)
        for key in TEXT_FIELDS:
            value = metadata.get(key)
            if isinstance(value, str) and value:
                tags.extend(self._taxonomy.match_keywords(value))

        canonical: list[str] = []
        for tag in tags:
            cleaned = tag.strip()
            if not cleaned:
                continue
            name = self._taxonomy.canonicalize(cleaned)
            if name and name not in canonical:
                canonical.append(name)
        return canonical
