from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import BaseModel, Field

from skillproof.schemas import EvidenceType, PlatformCredentials, PlatformType, RawActivityRecord

from .base import AdapterBase, Clock, PayloadLoader, as_items, as_tag_list

logger = logging.getLogger(__name__)

# Loose vocabulary used by arbitrary sources, mapped onto the canonical types.
TYPE_MAPPING: dict[str, EvidenceType] = {
    "commit": EvidenceType.CODE_COMMIT,
    "push": EvidenceType.CODE_COMMIT,
    "project": EvidenceType.PROJECT_CREATION,
    "repository": EvidenceType.PROJECT_CREATION,
    "article": EvidenceType.ARTICLE_PUBLICATION,
    "post": EvidenceType.ARTICLE_PUBLICATION,
    "blog": EvidenceType.ARTICLE_PUBLICATION,
    "submission": EvidenceType.PROBLEM_SOLVING,
    "challenge": EvidenceType.PROBLEM_SOLVING,
    "review": EvidenceType.CODE_REVIEW,
    "doc": EvidenceType.DOCUMENTATION,
    "docs": EvidenceType.DOCUMENTATION,
    "contest": EvidenceType.COMPETITION_PARTICIPATION,
    "hackathon": EvidenceType.COMPETITION_PARTICIPATION,
    "deployment": EvidenceType.DEPLOYED_APP,
    "app": EvidenceType.DEPLOYED_APP,
    "contract": EvidenceType.FREELANCE_PROJECT,
    "gig": EvidenceType.FREELANCE_PROJECT,
    "pull_request": EvidenceType.OPEN_SOURCE_CONTRIBUTION,
    "contribution": EvidenceType.OPEN_SOURCE_CONTRIBUTION,
}

_RESERVED_KEYS = {"id", "type", "category", "kind", "timestamp", "date", "created_at"}


class CustomPlatformConfig(BaseModel):
    platform_id: str = Field(min_length=1)
    name: str
    description: str = ""
    endpoint: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    accepted_credentials: list[str] = Field(default_factory=lambda: ["access_token"])
    auth_type: Literal["bearer", "api_key", "none"] = "bearer"
    default_evidence_type: EvidenceType = EvidenceType.PROJECT_CREATION


def resolve_evidence_type(raw: Any, default: EvidenceType) -> EvidenceType:
    label = str(raw or "").strip().lower()
    if not label:
        return default
    try:
        return EvidenceType(label)
    except ValueError:
        return TYPE_MAPPING.get(label, default)


class CustomPlatformAdapter(AdapterBase):
    """Adapter for a user-declared platform that returns a generic item list."""

    platform_type = PlatformType.CUSTOM

    def __init__(
        self,
        config: CustomPlatformConfig,
        loader: PayloadLoader | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(loader=loader, clock=clock)
        self.config = config
        self.platform_id = config.platform_id
        self.name = config.name
        self.description = config.description
        self.accepted_credentials = tuple(config.accepted_credentials)

    def build_request(self, credentials: PlatformCredentials) -> dict[str, Any]:
        """Describe the HTTP request an injected loader should perform."""
        headers = {"Content-Type": "application/json", **self.config.headers}
        if self.config.auth_type == "bearer" and credentials.access_token:
            headers["Authorization"] = f"Bearer {credentials.access_token}"
        elif self.config.auth_type == "api_key" and credentials.api_key:
            headers["X-API-Key"] = credentials.api_key
        return {
            "method": "GET",
            "url": f"{self.config.endpoint.rstrip('/')}/data",
            "headers": headers,
        }

    def parse(self, payload: Any) -> list[RawActivityRecord]:
        if not isinstance(payload, (dict, list)):
            raise ValueError(f"expected an item list, got {type(payload).__name__}")
        records: list[RawActivityRecord] = []
        for index, item in enumerate(as_items(payload, None)):
            evidence_type = resolve_evidence_type(
                item.get("type") or item.get("category") or item.get("kind"),
                self.config.default_evidence_type,
            )
            metadata = {key: value for key, value in item.items() if key not in _RESERVED_KEYS}
            metadata["title"] = item.get("title") or item.get("name")
            metadata["description"] = item.get("description") or item.get("summary")
            metadata["url"] = item.get("url") or item.get("link")
            metadata["technologies"] = (
                as_tag_list(item.get("technologies"))
                + as_tag_list(item.get("skills"))
                + as_tag_list(item.get("languages"))
            )
            timestamp = item.get("timestamp") or item.get("date") or item.get("created_at")
            if timestamp is None:
                logger.debug("custom_item_untimed platform=%s index=%s", self.platform_id, index)
            records.append(
                self._record(item.get("id") or f"item_{index}", evidence_type, timestamp, metadata)
            )
        return records
