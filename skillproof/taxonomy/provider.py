from __future__ import annotations

from typing import Protocol


class TechnologyTaxonomy(Protocol):
    def canonicalize(self, raw: str) -> str:
        """Return the canonical lower-case technology tag for a raw label."""

    def match_keywords(self, text: str) -> list[str]:
        """Return canonical tags for vocabulary terms found in free text."""

    def expected_technologies(self) -> tuple[str, ...]:
        """Technologies most profiles are expected to show."""

    def related_technologies(self, tech: str) -> tuple[str, ...]:
        """Technologies whose presence implies ``tech`` should also appear."""
