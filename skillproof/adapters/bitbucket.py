from __future__ import annotations

from typing import Any

from skillproof.schemas import EvidenceType, PlatformType, RawActivityRecord

from .base import AdapterBase, as_items


class BitbucketAdapter(AdapterBase):
    """Translates Bitbucket Cloud 2.0 paged responses.

    ``repositories`` and ``pull_requests`` may be either plain lists or the
    paged ``{"values": [...]}`` envelope. ``reviews`` holds pull-request
    activity entries authored by the user (approvals and comments).
    """

    platform_id = "bitbucket"
    name = "Bitbucket"
    platform_type = PlatformType.CODE_REPOSITORY
    description = "Repositories, merged pull requests and reviews."
    accepted_credentials = ("access_token",)

    def parse(self, payload: Any) -> list[RawActivityRecord]:
        data = self._require_mapping(payload)
        records: list[RawActivityRecord] = []
        for repo in as_items(data, "repositories"):
            records.append(
                self._record(
                    f"repo_{repo.get('uuid')}",
                    EvidenceType.PROJECT_CREATION,
                    repo.get("updated_on") or repo.get("created_on"),
                    {
                        "title": repo.get("name"),
                        "description": repo.get("description"),
                        "language": repo.get("language") or None,
                        "size": _kilobytes(repo.get("size")),
                        "is_private": bool(repo.get("is_private", False)),
                        "created_at": repo.get("created_on"),
                        "updated_at": repo.get("updated_on"),
                        "pushed_at": repo.get("updated_on"),
                    },
                )
            )
        for pull in as_items(data, "pull_requests"):
            state = str(pull.get("state") or "").upper()
            records.append(
                self._record(
                    f"pr_{pull.get('id')}",
                    EvidenceType.OPEN_SOURCE_CONTRIBUTION,
                    pull.get("created_on"),
                    {
                        "title": pull.get("title"),
                        "body": pull.get("description"),
                        "state": state.lower() or None,
                        "merged": state == "MERGED",
                    },
                )
            )
        for review in as_items(data, "reviews"):
            records.append(
                self._record(
                    f"review_{review.get('id')}",
                    EvidenceType.CODE_REVIEW,
                    review.get("created_on") or review.get("date"),
                    {
                        "title": review.get("title"),
                        "state": review.get("state"),
                        "comment_count": review.get("comment_count"),
                        "files_changed": review.get("files_changed"),
                    },
                )
            )
        return records


def _kilobytes(size: Any) -> int | None:
    # Bitbucket reports bytes where GitHub reports kilobytes.
    if isinstance(size, (int, float)) and not isinstance(size, bool):
        return int(size // 1024)
    return None
