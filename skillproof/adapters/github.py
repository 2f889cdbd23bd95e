from __future__ import annotations

from typing import Any

from skillproof.schemas import EvidenceType, PlatformType, RawActivityRecord

from .base import AdapterBase, as_items

_TRACKED_EVENTS = {"PushEvent", "PullRequestEvent", "IssuesEvent"}
_FRONTEND_HINTS = ("react", "vue", "angular")
_BACKEND_HINTS = ("node", "express", "nest")


class GitHubAdapter(AdapterBase):
    """Translates GitHub REST v3 payloads.

    Expected payload: ``{"repos": [...], "events": [...], "pull_requests": [...]}``
    where each list holds items as returned by ``/user/repos``, ``/user/events``
    and the issue search API respectively.
    """

    platform_id = "github"
    name = "GitHub"
    platform_type = PlatformType.CODE_REPOSITORY
    description = "Repositories, push activity and pull requests."
    accepted_credentials = ("access_token", "username")

    def parse(self, payload: Any) -> list[RawActivityRecord]:
        data = self._require_mapping(payload)
        records: list[RawActivityRecord] = []
        records.extend(self._repositories(as_items(data, "repos")))
        records.extend(self._events(as_items(data, "events")))
        records.extend(self._pull_requests(as_items(data, "pull_requests")))
        return records

    def _repositories(self, repos: list[dict[str, Any]]) -> list[RawActivityRecord]:
        return [
            self._record(
                f"repo_{repo.get('id')}",
                EvidenceType.PROJECT_CREATION,
                repo.get("created_at"),
                {
                    "title": repo.get("name"),
                    "description": repo.get("description"),
                    "url": repo.get("html_url"),
                    "language": repo.get("language"),
                    "topics": repo.get("topics") or [],
                    "stars": repo.get("stargazers_count"),
                    "forks": repo.get("forks_count"),
                    "watchers": repo.get("watchers_count"),
                    "size": repo.get("size"),
                    "is_private": bool(repo.get("private", False)),
                    "created_at": repo.get("created_at"),
                    "updated_at": repo.get("updated_at"),
                    "pushed_at": repo.get("pushed_at"),
                },
            )
            for repo in repos
        ]

    def _events(self, events: list[dict[str, Any]]) -> list[RawActivityRecord]:
        records: list[RawActivityRecord] = []
        for event in events:
            if event.get("type") not in _TRACKED_EVENTS:
                continue
            repo_name = str((event.get("repo") or {}).get("name") or "")
            event_payload = event.get("payload") or {}
            commits = event_payload.get("commits") or []
            messages = [str(commit.get("message") or "") for commit in commits if isinstance(commit, dict)]
            records.append(
                self._record(
                    f"event_{event.get('id')}",
                    EvidenceType.CODE_COMMIT,
                    event.get("created_at"),
                    {
                        "event_type": event.get("type"),
                        "repo": repo_name,
                        "message": "\n".join(message for message in messages if message) or None,
                        "commit_count": event_payload.get("size", len(commits)),
                        "tags": _repo_name_hints(repo_name),
                    },
                )
            )
        return records

    def _pull_requests(self, pulls: list[dict[str, Any]]) -> list[RawActivityRecord]:
        records: list[RawActivityRecord] = []
        for pull in pulls:
            links = pull.get("pull_request") or {}
            records.append(
                self._record(
                    f"pr_{pull.get('id')}",
                    EvidenceType.OPEN_SOURCE_CONTRIBUTION,
                    pull.get("created_at"),
                    {
                        "title": pull.get("title"),
                        "body": pull.get("body"),
                        "state": pull.get("state"),
                        "merged": bool(links.get("merged_at")),
                        "additions": pull.get("additions"),
                        "deletions": pull.get("deletions"),
                        "changed_files": pull.get("changed_files"),
                        "repo": pull.get("repository_url"),
                    },
                )
            )
        return records


def _repo_name_hints(repo_name: str) -> list[str]:
    short_name = repo_name.split("/")[-1].lower()
    hints: list[str] = []
    if any(hint in short_name for hint in _FRONTEND_HINTS):
        hints.append("frontend")
    if any(hint in short_name for hint in _BACKEND_HINTS):
        hints.append("backend")
    return hints
