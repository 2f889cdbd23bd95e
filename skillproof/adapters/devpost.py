from __future__ import annotations

from typing import Any

from skillproof.schemas import EvidenceType, PlatformType, RawActivityRecord

from .base import AdapterBase, as_items, as_tag_list, parse_timestamp


class DevpostAdapter(AdapterBase):
    """Translates Devpost portfolio ``projects`` and ``hackathons``.

    Projects with a live demo become DEPLOYED_APP evidence; the rest are
    plain PROJECT_CREATION.
    """

    platform_id = "devpost"
    name = "Devpost"
    platform_type = PlatformType.DEPLOYMENT_PLATFORM
    description = "Hackathon submissions and participation."
    accepted_credentials = ("username",)

    def parse(self, payload: Any) -> list[RawActivityRecord]:
        data = self._require_mapping(payload)
        records = [self._project(project) for project in as_items(data, "projects")]
        records.extend(self._hackathon(hackathon) for hackathon in as_items(data, "hackathons"))
        return records

    def _project(self, project: dict[str, Any]) -> RawActivityRecord:
        created = project.get("created_at") or project.get("updated_at")
        has_demo = bool(project.get("demo_url"))
        metadata: dict[str, Any] = {
            "title": project.get("name"),
            "description": project.get("tagline") or project.get("short_description"),
            "url": project.get("url"),
            "technologies": as_tag_list(project.get("tags")),
            "likes": project.get("like_count"),
            "comments": project.get("comment_count"),
            "winner": bool(project.get("winners")),
            "team_size": len(project.get("members") or []) or 1,
            "has_demo": has_demo,
            "has_source": bool(project.get("github_url")),
        }
        if has_demo:
            started = parse_timestamp(created)
            if started is not None:
                metadata["uptime_days"] = max(0, (self._clock() - started).days)
            return self._record(f"project_{project.get('id')}", EvidenceType.DEPLOYED_APP, created, metadata)
        return self._record(f"project_{project.get('id')}", EvidenceType.PROJECT_CREATION, created, metadata)

    def _hackathon(self, hackathon: dict[str, Any]) -> RawActivityRecord:
        starts = parse_timestamp(hackathon.get("starts_at"))
        ends = parse_timestamp(hackathon.get("ends_at"))
        duration = None
        if starts is not None and ends is not None:
            duration = max(0, (ends - starts).days)
        return self._record(
            f"hackathon_{hackathon.get('id')}",
            EvidenceType.COMPETITION_PARTICIPATION,
            hackathon.get("created_at") or hackathon.get("starts_at"),
            {
                "title": hackathon.get("title"),
                "url": hackathon.get("url"),
                "participants": hackathon.get("participant_count"),
                "prize_amount": hackathon.get("prize_amount"),
                "duration_days": duration,
                "project_count": hackathon.get("project_count"),
                "medal": "winner" if hackathon.get("winner") else None,
            },
        )
