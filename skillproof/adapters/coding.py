"""Competitive-programming adapters: LeetCode, Codeforces and HackerRank."""

from __future__ import annotations

import logging
import re
from typing import Any

from skillproof.schemas import EvidenceType, PlatformType, RawActivityRecord

from .base import AdapterBase, as_items

logger = logging.getLogger(__name__)

PROFILE_TAGS = ["algorithms", "data-structures"]


def difficulty_from_rating(rating: Any) -> str | None:
    """Map a Codeforces problem rating onto the Easy/Medium/Hard scale."""
    if not isinstance(rating, (int, float)) or isinstance(rating, bool):
        return None
    if rating >= 2000:
        return "Hard"
    if rating >= 1400:
        return "Medium"
    return "Easy"


class LeetCodeAdapter(AdapterBase):
    """Translates LeetCode GraphQL results.

    Expected payload: ``{"profile": matchedUser, "submissions": recentAcSubmissionList,
    "contests": userContestRankingHistory}``.
    """

    platform_id = "leetcode"
    name = "LeetCode"
    platform_type = PlatformType.CODING_PLATFORM
    description = "Solved problems, contest history and profile statistics."
    accepted_credentials = ("username",)

    def parse(self, payload: Any) -> list[RawActivityRecord]:
        data = self._require_mapping(payload)
        records: list[RawActivityRecord] = []

        profile = data.get("profile")
        if isinstance(profile, dict):
            records.append(self._profile(profile))

        for submission in as_items(data, "submissions"):
            status = str(submission.get("statusDisplay") or submission.get("status") or "Accepted")
            records.append(
                self._record(
                    f"submission_{submission.get('id') or submission.get('titleSlug')}",
                    EvidenceType.PROBLEM_SOLVING,
                    submission.get("timestamp"),
                    {
                        "title": submission.get("title"),
                        "difficulty": submission.get("difficulty"),
                        "language": submission.get("lang"),
                        "accepted": status.lower() == "accepted",
                        "tags": PROFILE_TAGS,
                    },
                )
            )

        previous_rating: float | None = None
        for entry in as_items(data, "contests"):
            contest = entry.get("contest") or {}
            rating = entry.get("rating")
            change = entry.get("ratingChange")
            if change is None and previous_rating is not None and isinstance(rating, (int, float)):
                change = rating - previous_rating
            if isinstance(rating, (int, float)):
                previous_rating = float(rating)
            records.append(
                self._record(
                    f"contest_{contest.get('title') or entry.get('id')}",
                    EvidenceType.COMPETITION_PARTICIPATION,
                    contest.get("startTime") or entry.get("timestamp"),
                    {
                        "title": contest.get("title"),
                        "new_rating": rating,
                        "rank": entry.get("ranking"),
                        "problems_solved": entry.get("problemsSolved"),
                        "total_problems": entry.get("totalProblems"),
                        "rating_change": change,
                    },
                )
            )
        return records

    def _profile(self, profile: dict[str, Any]) -> RawActivityRecord:
        stats = (profile.get("submitStats") or {}).get("acSubmissionNum") or []
        counts: dict[str, int] = {}
        for row in stats:
            if not isinstance(row, dict):
                continue
            try:
                counts[str(row.get("difficulty"))] = int(row.get("count") or 0)
            except (TypeError, ValueError, OverflowError):
                logger.debug("leetcode_count_skipped difficulty=%s", row.get("difficulty"))
        total = counts.pop("All", None)
        if total is None:
            total = sum(counts.values())
        ranking = profile.get("ranking") or {}
        rating = ranking.get("currentRating") if isinstance(ranking, dict) else None
        return self._record(
            f"profile_{profile.get('username')}",
            EvidenceType.PROBLEM_SOLVING,
            self._clock(),
            {
                "username": profile.get("username"),
                "total_solved": total,
                "solved_by_difficulty": counts or None,
                "rating": rating,
                "tags": PROFILE_TAGS,
            },
        )


class CodeforcesAdapter(AdapterBase):
    """Translates Codeforces ``user.status``, ``user.rating`` and ``user.info`` results."""

    platform_id = "codeforces"
    name = "Codeforces"
    platform_type = PlatformType.CODING_PLATFORM
    description = "Accepted submissions, rated contests and profile rating."
    accepted_credentials = ("username",)

    def parse(self, payload: Any) -> list[RawActivityRecord]:
        data = self._require_mapping(payload)
        records: list[RawActivityRecord] = []
        solved: set[str] = set()

        for submission in as_items(data, "submissions"):
            if submission.get("verdict") != "OK":
                continue
            problem = submission.get("problem") or {}
            problem_id = f"{problem.get('contestId', '')}{problem.get('index', '')}"
            solved.add(problem_id)
            records.append(
                self._record(
                    f"submission_{submission.get('id')}",
                    EvidenceType.PROBLEM_SOLVING,
                    submission.get("creationTimeSeconds"),
                    {
                        "title": problem.get("name"),
                        "problem_id": problem_id,
                        "problem_rating": problem.get("rating"),
                        "difficulty": difficulty_from_rating(problem.get("rating")),
                        "language": _language_family(submission.get("programmingLanguage")),
                        "accepted": True,
                        "tags": PROFILE_TAGS,
                    },
                )
            )

        for contest in as_items(data, "contests"):
            new_rating = contest.get("newRating")
            old_rating = contest.get("oldRating")
            change = None
            if isinstance(new_rating, (int, float)) and isinstance(old_rating, (int, float)):
                change = new_rating - old_rating
            records.append(
                self._record(
                    f"contest_{contest.get('contestId')}",
                    EvidenceType.COMPETITION_PARTICIPATION,
                    contest.get("ratingUpdateTimeSeconds"),
                    {
                        "title": contest.get("contestName"),
                        "rank": contest.get("rank"),
                        "new_rating": new_rating,
                        "rating_change": change,
                    },
                )
            )

        users = as_items(data, "user")
        if users:
            user = users[0]
            records.append(
                self._record(
                    f"profile_{user.get('handle')}",
                    EvidenceType.PROBLEM_SOLVING,
                    self._clock(),
                    {
                        "username": user.get("handle"),
                        "rating": user.get("rating"),
                        "max_rating": user.get("maxRating"),
                        "rank_title": user.get("rank"),
                        "total_solved": len(solved),
                        "tags": PROFILE_TAGS,
                    },
                )
            )
        return records


class HackerRankAdapter(AdapterBase):
    """Translates HackerRank ``/rest/hackers/<user>`` submissions and skill badges."""

    platform_id = "hackerrank"
    name = "HackerRank"
    platform_type = PlatformType.CODING_PLATFORM
    description = "Accepted challenge submissions and skill badges."
    accepted_credentials = ("username",)

    def parse(self, payload: Any) -> list[RawActivityRecord]:
        data = self._require_mapping(payload)
        records: list[RawActivityRecord] = []
        for submission in as_items(data, "submissions"):
            if submission.get("status") != "Accepted":
                continue
            records.append(
                self._record(
                    f"submission_{submission.get('id')}",
                    EvidenceType.PROBLEM_SOLVING,
                    submission.get("created_at"),
                    {
                        "title": submission.get("challenge_name"),
                        "difficulty": submission.get("difficulty"),
                        "language": _language_family(submission.get("language")),
                        "accepted": True,
                        "score": submission.get("score"),
                    },
                )
            )
        for skill in as_items(data, "skills"):
            skill_name = str(skill.get("name") or "")
            records.append(
                self._record(
                    f"skill_{skill.get('id')}",
                    EvidenceType.PROBLEM_SOLVING,
                    self._clock(),
                    {
                        "title": skill_name or None,
                        "level": skill.get("level"),
                        "stars": skill.get("stars"),
                        "tags": [re.sub(r"\s*\(.*\)$", "", skill_name)] if skill_name else None,
                    },
                )
            )
        return records


def _language_family(raw: Any) -> str | None:
    """``"GNU C++17"`` -> ``"gnu c++17"``, ``"Python 3"`` -> ``"python 3"``; aliases resolve the rest."""
    if not raw:
        return None
    return str(raw).strip().lower()
