from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from skillproof.adapters import AdapterFetchError, AdapterRegistry, build_default_registry
from skillproof.core.config import settings
from skillproof.features import (
    CrossPlatformRebalancer,
    EvidenceNormalizer,
    InsightGenerator,
    SkillConstructor,
    platform_weight_table,
)
from skillproof.schemas import (
    EvidenceItem,
    PlatformCredentials,
    PlatformFailure,
    RawActivityRecord,
    SkillVerificationResult,
)
from skillproof.taxonomy import TechnologyTaxonomy, get_default_taxonomy

logger = logging.getLogger(__name__)

PlatformRecords = tuple[str, Sequence[RawActivityRecord]]


@dataclass(slots=True)
class CollectionOutcome:
    records: list[PlatformRecords] = field(default_factory=list)
    failures: list[PlatformFailure] = field(default_factory=list)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SkillVerificationService:
    """Runs adapters, then normalize -> rebalance -> construct -> insights.

    ``analyze`` is pure given a fixed clock. ``collect`` and ``verify`` add the
    concurrent adapter fan-out in front of it.
    """

    def __init__(
        self,
        registry: AdapterRegistry | None = None,
        *,
        taxonomy: TechnologyTaxonomy | None = None,
        clock: Callable[[], datetime] | None = None,
        normalizer: EvidenceNormalizer | None = None,
        rebalancer: CrossPlatformRebalancer | None = None,
        constructor: SkillConstructor | None = None,
        insight_generator: InsightGenerator | None = None,
        fetch_timeout_s: float | None = None,
    ) -> None:
        clock = clock or _utc_now
        taxonomy = taxonomy or get_default_taxonomy()
        self.registry = registry if registry is not None else build_default_registry(settings.enabled_platforms)
        self._normalizer = normalizer or EvidenceNormalizer(taxonomy=taxonomy, clock=clock)
        self._rebalancer = rebalancer or CrossPlatformRebalancer()
        self._constructor = constructor or SkillConstructor(clock=clock)
        self._insights = insight_generator or InsightGenerator(taxonomy=taxonomy, clock=clock)
        self._fetch_timeout_s = fetch_timeout_s or settings.adapter_fetch_timeout_s

    def analyze(
        self,
        user_id: str,
        platform_records: Iterable[PlatformRecords],
        platform_failures: Sequence[PlatformFailure] = (),
    ) -> SkillVerificationResult:
        items: list[EvidenceItem] = []
        dropped = 0
        for platform_id, records in platform_records:
            report = self._normalizer.normalize_records(records, user_id, platform_id)
            items.extend(report.items)
            dropped += report.dropped
            if report.dropped:
                logger.info("records_dropped platform=%s count=%s", platform_id, report.dropped)

        rebalanced = self._rebalancer.rebalance(items)
        weights = platform_weight_table(rebalanced)
        result = self._constructor.construct(rebalanced, weights, user_id=user_id)
        insights = self._insights.generate(result.skills, rebalanced)

        logger.info(
            "skill_verification_completed user=%s evidence=%s skills=%s dropped=%s failures=%s",
            user_id,
            len(rebalanced),
            len(result.skills),
            dropped,
            len(platform_failures),
        )
        return result.model_copy(
            update={
                "strengths": insights.strengths,
                "gaps": [*result.gaps, *insights.gaps],
                "recommendations": insights.recommendations,
                "platform_failures": list(platform_failures),
                "dropped_records": dropped,
            }
        )

    async def collect(self, credentials_by_platform: Mapping[str, PlatformCredentials]) -> CollectionOutcome:
        outcome = CollectionOutcome()
        pending: list[str] = []
        tasks = []
        for platform_id, credentials in credentials_by_platform.items():
            if platform_id not in self.registry:
                self._record_failure(outcome, platform_id, f"Unknown platform '{platform_id}'.")
                continue
            adapter = self.registry.get(platform_id)
            try:
                valid = adapter.validate(credentials)
            except Exception as exc:
                self._record_failure(outcome, platform_id, f"Credential check failed: {exc}")
                continue
            if not valid:
                required = ", ".join(adapter.describe().accepted_credentials)
                self._record_failure(outcome, platform_id, f"Missing credentials; expected one of: {required}.")
                continue
            pending.append(platform_id)
            tasks.append(asyncio.wait_for(asyncio.to_thread(adapter.fetch, credentials), self._fetch_timeout_s))

        results = await asyncio.gather(*tasks, return_exceptions=True)
        for platform_id, result in zip(pending, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, asyncio.TimeoutError):
                self._record_failure(outcome, platform_id, f"Fetch timed out after {self._fetch_timeout_s:g}s.")
            elif isinstance(result, AdapterFetchError):
                self._record_failure(outcome, platform_id, result.reason)
            elif isinstance(result, Exception):
                self._record_failure(outcome, platform_id, f"{type(result).__name__}: {result}")
            else:
                outcome.records.append((platform_id, result))
                logger.info("platform_fetched platform=%s records=%s", platform_id, len(result))
        return outcome

    async def verify(
        self,
        user_id: str,
        credentials_by_platform: Mapping[str, PlatformCredentials],
    ) -> SkillVerificationResult:
        outcome = await self.collect(credentials_by_platform)
        return self.analyze(user_id, outcome.records, outcome.failures)

    @staticmethod
    def _record_failure(outcome: CollectionOutcome, platform_id: str, message: str) -> None:
        logger.warning("platform_fetch_failed platform=%s: %s", platform_id, message)
        outcome.failures.append(PlatformFailure(platform_id=platform_id, error=message))
