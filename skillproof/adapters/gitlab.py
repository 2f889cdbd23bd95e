from __future__ import annotations

from typing import Any

from skillproof.schemas import EvidenceType, PlatformType, RawActivityRecord

from .base import AdapterBase, as_items

_EVENT_TYPES = {
    "pushed to": EvidenceType.CODE_COMMIT,
    "pushed new": EvidenceType.CODE_COMMIT,
    "push": EvidenceType.CODE_COMMIT,
    "issue": EvidenceType.CODE_COMMIT,
    "opened": EvidenceType.CODE_COMMIT,
    "merge_request": EvidenceType.OPEN_SOURCE_CONTRIBUTION,
    "accepted": EvidenceType.OPEN_SOURCE_CONTRIBUTION,
}


class GitLabAdapter(AdapterBase):
    """Translates GitLab API v4 ``/projects`` and ``/events`` payloads."""

    platform_id = "gitlab"
    name = "GitLab"
    platform_type = PlatformType.CODE_REPOSITORY
    description = "Projects, pushes and merge requests."
    accepted_credentials = ("access_token",)

    def parse(self, payload: Any) -> list[RawActivityRecord]:
        data = self._require_mapping(payload)
        records = [self._project(project) for project in as_items(data, "projects")]
        for event in as_items(data, "events"):
            record = self._event(event)
            if record is not None:
                records.append(record)
        return records

    def _project(self, project: dict[str, Any]) -> RawActivityRecord:
        return self._record(
            f"project_{project.get('id')}",
            EvidenceType.PROJECT_CREATION,
            project.get("last_activity_at") or project.get("created_at"),
            {
                "title": project.get("name"),
                "description": project.get("description"),
                "url": project.get("web_url"),
                "topics": project.get("topics") or project.get("tag_list") or [],
                "stars": project.get("star_count"),
                "forks": project.get("forks_count"),
                "is_private": project.get("visibility") not in (None, "public"),
                "created_at": project.get("created_at"),
                "updated_at": project.get("last_activity_at"),
                "pushed_at": project.get("last_activity_at"),
            },
        )

    def _event(self, event: dict[str, Any]) -> RawActivityRecord | None:
        action = str(event.get("action_name") or "").lower()
        target = str(event.get("target_type") or "").lower()
        if target == "mergerequest":
            evidence_type = EvidenceType.OPEN_SOURCE_CONTRIBUTION
        else:
            evidence_type = _EVENT_TYPES.get(action)
        if evidence_type is None:
            return None

        push = event.get("push_data") or {}
        metadata: dict[str, Any] = {
            "event_type": action,
            "title": event.get("target_title"),
        }
        if evidence_type is EvidenceType.CODE_COMMIT:
            metadata["message"] = push.get("commit_title")
            metadata["commit_count"] = push.get("commit_count")
        else:
            metadata["merged"] = action in ("accepted", "merged")
            metadata["state"] = action
        return self._record(f"event_{event.get('id')}", evidence_type, event.get("created_at"), metadata)
