from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from .provider import TechnologyTaxonomy


def _normalize_label(raw: str) -> str:
    return re.sub(r"\s+", " ", (raw or "").strip().lower())


class LocalTaxonomy(TechnologyTaxonomy):
    def __init__(self, taxonomy_path: str | Path | None = None) -> None:
        path = Path(taxonomy_path) if taxonomy_path else Path(__file__).with_name("technologies.json")
        raw = self._load(path)
        self._aliases = {
            _normalize_label(key): _normalize_label(value) for key, value in (raw.get("aliases") or {}).items()
        }
        self._keywords = tuple(_normalize_label(term) for term in raw.get("keywords") or [])
        self._keyword_patterns = [
            (term, re.compile(rf"(?<![a-z0-9]){re.escape(term)}(?![a-z0-9])")) for term in self._keywords
        ]
        self._expected = tuple(_normalize_label(term) for term in raw.get("expected") or [])
        self._related = {
            _normalize_label(key): tuple(_normalize_label(item) for item in values)
            for key, values in (raw.get("related") or {}).items()
        }

    @staticmethod
    def _load(path: Path) -> dict[str, Any]:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, dict):
            raise RuntimeError(f"Invalid taxonomy file '{path}': expected a top-level mapping.")
        return data

    def canonicalize(self, raw: str) -> str:
        normalized = _normalize_label(raw)
        return self._aliases.get(normalized, normalized)

    def match_keywords(self, text: str) -> list[str]:
        lowered = (text or "").lower()
        if not lowered.strip():
            return []
        found: list[str] = []
        for term, pattern in self._keyword_patterns:
            if pattern.search(lowered):
                tag = self.canonicalize(term)
                if tag not in found:
                    found.append(tag)
        return found

    def expected_technologies(self) -> tuple[str, ...]:
        return self._expected

    def related_technologies(self, tech: str) -> tuple[str, ...]:
        return self._related.get(self.canonicalize(tech), ())
