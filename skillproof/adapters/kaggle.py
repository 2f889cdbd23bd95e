from __future__ import annotations

from typing import Any

from skillproof.schemas import EvidenceType, PlatformType, RawActivityRecord

from .base import AdapterBase, as_items, as_tag_list

DATA_SCIENCE_TAGS = ["data science", "machine learning"]


class KaggleAdapter(AdapterBase):
    """Translates Kaggle ``competitions``, ``datasets`` and ``kernels`` listings."""

    platform_id = "kaggle"
    name = "Kaggle"
    platform_type = PlatformType.DATA_SCIENCE_PLATFORM
    description = "Competition placements, published datasets and notebooks."
    accepted_credentials = ("username", "api_key")

    def parse(self, payload: Any) -> list[RawActivityRecord]:
        data = self._require_mapping(payload)
        records: list[RawActivityRecord] = []

        for competition in as_items(data, "competitions"):
            rank = competition.get("teamRank")
            out_of = competition.get("rankOutOf")
            percentile = None
            if isinstance(rank, (int, float)) and isinstance(out_of, (int, float)) and out_of > 0:
                percentile = rank / out_of
            records.append(
                self._record(
                    f"competition_{competition.get('id') or competition.get('ref')}",
                    EvidenceType.COMPETITION_PARTICIPATION,
                    competition.get("dateEntered") or competition.get("deadline"),
                    {
                        "title": competition.get("competitionTitle") or competition.get("title"),
                        "team": competition.get("teamName"),
                        "rank": rank,
                        "rank_percentile": percentile,
                        "medal": competition.get("medal") or None,
                        "tags": DATA_SCIENCE_TAGS,
                    },
                )
            )

        for dataset in as_items(data, "datasets"):
            records.append(
                self._record(
                    f"dataset_{dataset.get('ref')}",
                    EvidenceType.DOCUMENTATION,
                    dataset.get("creationDate") or dataset.get("lastUpdated"),
                    {
                        "title": dataset.get("title"),
                        "description": dataset.get("description") or dataset.get("subtitle"),
                        "downloads": dataset.get("totalDownloads") or dataset.get("downloadCount"),
                        "votes": dataset.get("totalVotes") or dataset.get("voteCount"),
                        "usability": dataset.get("usabilityRating"),
                        "tags": as_tag_list(dataset.get("tags")) or DATA_SCIENCE_TAGS,
                    },
                )
            )

        for kernel in as_items(data, "kernels"):
            votes = kernel.get("totalVotes")
            records.append(
                self._record(
                    f"kernel_{kernel.get('ref')}",
                    EvidenceType.PROJECT_CREATION,
                    kernel.get("dateCreated") or kernel.get("lastRunTime"),
                    {
                        "title": kernel.get("title"),
                        "description": kernel.get("description") or kernel.get("subtitle"),
                        "language": kernel.get("language"),
                        "stars": votes,
                        "is_private": bool(kernel.get("isPrivate", False)),
                        "forked": bool(kernel.get("isForked", False)),
                        "tags": DATA_SCIENCE_TAGS,
                    },
                )
            )
        return records
