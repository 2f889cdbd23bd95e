from __future__ import annotations

from typing import Any

from skillproof.schemas import EvidenceType, PlatformType, RawActivityRecord

from .base import AdapterBase, as_items, as_tag_list


def _first(project: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = project.get(key)
        if value is not None and value != "":
            return value
    return None


class FreelanceAdapter(AdapterBase):
    """Manually submitted client projects.

    Accepts both ``snake_case`` and the ``camelCase`` keys produced by the
    submission form.
    """

    platform_id = "freelance"
    name = "Freelance Projects"
    platform_type = PlatformType.FREELANCE_PLATFORM
    description = "Client projects and freelance work."
    # Submitted by the user directly, so nothing to authenticate.
    accepted_credentials = ()

    def parse(self, payload: Any) -> list[RawActivityRecord]:
        if not isinstance(payload, (dict, list)):
            raise ValueError(f"expected a project list, got {type(payload).__name__}")
        projects = as_items(payload, "projects") if isinstance(payload, dict) else as_items(payload)
        records: list[RawActivityRecord] = []
        for project in projects:
            status = _first(project, "status", "verification_status", "verificationStatus")
            records.append(
                self._record(
                    f"project_{project.get('id')}",
                    EvidenceType.FREELANCE_PROJECT,
                    _first(project, "completed_at", "completedAt", "created_at", "createdAt"),
                    {
                        "title": project.get("title"),
                        "description": project.get("description"),
                        "client": _first(project, "client", "client_name", "clientName"),
                        "budget": project.get("budget"),
                        "duration_days": _first(project, "duration_days", "duration"),
                        "technologies": as_tag_list(project.get("technologies")),
                        "rating": project.get("rating"),
                        "review": _first(project, "review", "testimonial"),
                        "status": str(status).lower() if status is not None else None,
                    },
                )
            )
        return records
