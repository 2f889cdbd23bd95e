from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from skillproof.core.config.scoring import get_scoring_value
from skillproof.schemas import EvidenceItem, EvidenceType

logger = logging.getLogger(__name__)

SUB_SCORE_FIELDS = ("complexity_score", "originality_score", "consistency_score", "growth_score")


class CrossPlatformRebalancer:
    """Scales sub-scores by evidence type so platforms with easy signals do not dominate.

    Not idempotent: applying it twice compounds the multipliers. The verification
    service calls it exactly once per analysis.
    """

    def __init__(self, multipliers: Mapping[str, float] | None = None, default: float | None = None) -> None:
        configured = multipliers if multipliers is not None else get_scoring_value("rebalancer.multipliers", {})
        self._multipliers = {str(key).lower(): float(value) for key, value in (configured or {}).items()}
        self._default = float(
            default if default is not None else get_scoring_value("rebalancer.default_multiplier", 1.0)
        )

    def multiplier_for(self, evidence_type: EvidenceType) -> float:
        return self._multipliers.get(evidence_type.value, self._default)

    def rebalance(self, items: Iterable[EvidenceItem]) -> list[EvidenceItem]:
        rebalanced: list[EvidenceItem] = []
        for item in items:
            factor = self.multiplier_for(item.evidence_type)
            copy = item.model_copy(deep=True)
            if factor != 1.0:
                # Assignment re-runs the field validators, which clamp to [0, 10].
                for name in SUB_SCORE_FIELDS:
                    setattr(copy, name, getattr(item, name) * factor)
            rebalanced.append(copy)
        logger.debug("evidence_rebalanced items=%s", len(rebalanced))
        return rebalanced
