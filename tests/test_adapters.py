import sys
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from skillproof.adapters import (  # noqa: E402
    AdapterFetchError,
    AdapterRegistry,
    BitbucketAdapter,
    CodeforcesAdapter,
    CustomPlatformAdapter,
    CustomPlatformConfig,
    DevpostAdapter,
    DevToAdapter,
    FreelanceAdapter,
    GitHubAdapter,
    GitLabAdapter,
    HackerRankAdapter,
    KaggleAdapter,
    LeetCodeAdapter,
    MediumAdapter,
    UnknownPlatformError,
    build_default_registry,
    parse_timestamp,
)
from skillproof.schemas import PlatformCredentials  # noqa: E402

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)

MEDIUM_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss xmlns:content="http://purl.org/rss/1.0/modules/content/" version="2.0">
  <channel>
    <title>Stories by Ada</title>
    <item>
      <title><![CDATA[Scaling Django with Redis]]></title>
      <link>https://medium.com/@ada/scaling-django</link>
      <guid isPermaLink="false">https://medium.com/p/abc123</guid>
      <category><![CDATA[python]]></category>
      <category><![CDATA[django]]></category>
      <pubDate>Wed, 22 May 2024 10:00:00 GMT</pubDate>
      <content:encoded><![CDATA[<p>Caching <b>layers</b> for Django &amp; Redis.</p>]]></content:encoded>
    </item>
    <item>
      <title>Untitled draft</title>
    </item>
  </channel>
</rss>
"""


def _types(records):
    return [record.evidence_type for record in records]


class ParseTimestampTests(unittest.TestCase):
    def test_supported_formats(self):
        expected = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
        self.assertEqual(parse_timestamp("2024-05-01T10:00:00Z"), expected)
        self.assertEqual(parse_timestamp(expected.timestamp()), expected)
        self.assertEqual(parse_timestamp(str(int(expected.timestamp()))), expected)
        self.assertEqual(parse_timestamp("Wed, 01 May 2024 10:00:00 GMT"), expected)
        self.assertEqual(parse_timestamp(datetime(2024, 5, 1, 10, 0)), expected)

    def test_unparseable_values(self):
        for value in (None, "", "yesterday", True):
            self.assertIsNone(parse_timestamp(value))


class AdapterBaseBehaviourTests(unittest.TestCase):
    def test_default_loader_reads_payload(self):
        records = GitHubAdapter().fetch(PlatformCredentials(username="ada", payload={"repos": []}))
        self.assertEqual(records, [])

    def test_missing_payload_is_fetch_error(self):
        with self.assertRaises(AdapterFetchError) as ctx:
            GitHubAdapter().fetch(PlatformCredentials(username="ada"))
        self.assertEqual(ctx.exception.platform_id, "github")

    def test_loader_failure_is_wrapped(self):
        def broken_loader(credentials):
            raise ConnectionError("connection reset")

        with self.assertRaises(AdapterFetchError) as ctx:
            GitHubAdapter(loader=broken_loader).fetch(PlatformCredentials(username="ada"))
        self.assertIn("connection reset", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, ConnectionError)

    def test_wrong_payload_shape_is_fetch_error(self):
        with self.assertRaises(AdapterFetchError):
            GitHubAdapter().fetch(PlatformCredentials(username="ada", payload=["not", "a", "mapping"]))

    def test_validate_requires_an_accepted_credential(self):
        adapter = GitHubAdapter()
        self.assertTrue(adapter.validate(PlatformCredentials(access_token="tok")))
        self.assertFalse(adapter.validate(PlatformCredentials(api_key="key")))
        self.assertTrue(FreelanceAdapter().validate(PlatformCredentials()))

    def test_describe(self):
        descriptor = KaggleAdapter().describe()
        self.assertEqual(descriptor.platform_id, "kaggle")
        self.assertEqual(descriptor.platform_type.value, "data_science_platform")
        self.assertEqual(descriptor.accepted_credentials, ["username", "api_key"])


class CodeHostAdapterTests(unittest.TestCase):
    def test_github_translation(self):
        payload = {
            "repos": [
                {
                    "id": 1,
                    "name": "react-dashboard",
                    "description": "Admin UI",
                    "language": "TypeScript",
                    "topics": ["react"],
                    "stargazers_count": 12,
                    "forks_count": 2,
                    "private": False,
                    "created_at": "2023-01-01T00:00:00Z",
                    "updated_at": "2024-05-01T00:00:00Z",
                    "pushed_at": "2024-05-01T00:00:00Z",
                }
            ],
            "events": [
                {
                    "id": "e1",
                    "type": "PushEvent",
                    "repo": {"name": "ada/react-dashboard"},
                    "payload": {"size": 3, "commits": [{"message": "Fix bug"}, {"message": "Add chart"}]},
                    "created_at": "2024-05-20T00:00:00Z",
                },
                {"id": "e2", "type": "WatchEvent", "created_at": "2024-05-20T00:00:00Z"},
            ],
            "pull_requests": [
                {
                    "id": 9,
                    "title": "Improve docs",
                    "body": "Details",
                    "state": "closed",
                    "pull_request": {"merged_at": "2024-05-02T00:00:00Z"},
                    "created_at": "2024-05-01T00:00:00Z",
                }
            ],
        }
        records = GitHubAdapter().parse(payload)
        self.assertEqual(_types(records), ["project_creation", "code_commit", "open_source_contribution"])
        repo, push, pull = records
        self.assertEqual(repo.id, "repo_1")
        self.assertEqual(repo.metadata["stars"], 12)
        self.assertIs(repo.metadata["is_private"], False)
        self.assertEqual(repo.metadata["platform"], "github")
        self.assertEqual(push.metadata["commit_count"], 3)
        self.assertEqual(push.metadata["message"], "Fix bug\nAdd chart")
        self.assertEqual(push.metadata["tags"], ["frontend"])
        self.assertTrue(pull.metadata["merged"])
        self.assertEqual(pull.timestamp, datetime(2024, 5, 1, tzinfo=timezone.utc))

    def test_gitlab_translation(self):
        payload = {
            "projects": [{"id": 5, "name": "api", "visibility": "public", "last_activity_at": "2024-05-01T00:00:00Z"}],
            "events": [
                {
                    "id": 1,
                    "action_name": "pushed to",
                    "push_data": {"commit_count": 4, "commit_title": "Refactor"},
                    "created_at": "2024-05-02T00:00:00Z",
                },
                {
                    "id": 2,
                    "action_name": "accepted",
                    "target_type": "MergeRequest",
                    "target_title": "Add caching",
                    "created_at": "2024-05-03T00:00:00Z",
                },
                {"id": 3, "action_name": "joined", "created_at": "2024-05-04T00:00:00Z"},
            ],
        }
        records = GitLabAdapter().parse(payload)
        self.assertEqual(_types(records), ["project_creation", "code_commit", "open_source_contribution"])
        self.assertIs(records[0].metadata["is_private"], False)
        self.assertEqual(records[1].metadata["commit_count"], 4)
        self.assertTrue(records[2].metadata["merged"])

    def test_bitbucket_paged_values(self):
        payload = {
            "repositories": {"values": [{"uuid": "{r1}", "name": "infra", "size": 2048000, "is_private": True}]},
            "pull_requests": {"values": [{"id": 7, "title": "Bump", "state": "MERGED", "created_on": "2024-05-01"}]},
            "reviews": [{"id": 3, "state": "approved", "comment_count": 6, "created_on": "2024-05-02"}],
        }
        records = BitbucketAdapter().parse(payload)
        self.assertEqual(_types(records), ["project_creation", "open_source_contribution", "code_review"])
        self.assertEqual(records[0].metadata["size"], 2000)
        self.assertIsNone(records[0].timestamp)
        self.assertTrue(records[1].metadata["merged"])
        self.assertEqual(records[2].metadata["comment_count"], 6)


class CodingPlatformAdapterTests(unittest.TestCase):
    def test_codeforces_translation(self):
        payload = {
            "submissions": {
                "result": [
                    {
                        "id": 1,
                        "verdict": "OK",
                        "creationTimeSeconds": 1714560000,
                        "problem": {"contestId": 1900, "index": "A", "name": "Two Arrays", "rating": 800},
                        "programmingLanguage": "GNU C++17",
                    },
                    {"id": 2, "verdict": "WRONG_ANSWER", "problem": {"contestId": 1900, "index": "B"}},
                    {
                        "id": 3,
                        "verdict": "OK",
                        "creationTimeSeconds": 1714570000,
                        "problem": {"contestId": 1901, "index": "D", "name": "Trees", "rating": 2100},
                        "programmingLanguage": "Python 3",
                    },
                ]
            },
            "contests": [
                {
                    "contestId": 1900,
                    "contestName": "Round 900",
                    "rank": 120,
                    "oldRating": 1500,
                    "newRating": 1620,
                    "ratingUpdateTimeSeconds": 1714600000,
                }
            ],
            "user": {"result": [{"handle": "ada", "rating": 1620, "maxRating": 1700, "rank": "expert"}]},
        }
        records = CodeforcesAdapter(clock=lambda: NOW).parse(payload)
        self.assertEqual(
            _types(records),
            ["problem_solving", "problem_solving", "competition_participation", "problem_solving"],
        )
        self.assertEqual(records[0].metadata["difficulty"], "Easy")
        self.assertEqual(records[0].metadata["language"], "gnu c++17")
        self.assertEqual(records[1].metadata["difficulty"], "Hard")
        self.assertEqual(records[2].metadata["rating_change"], 120)
        profile = records[3]
        self.assertEqual(profile.timestamp, NOW)
        self.assertEqual(profile.metadata["total_solved"], 2)
        self.assertEqual(profile.metadata["rating"], 1620)

    def test_leetcode_translation(self):
        payload = {
            "profile": {
                "username": "ada",
                "ranking": {"currentRating": 1850},
                "submitStats": {
                    "acSubmissionNum": [
                        {"difficulty": "All", "count": 320},
                        {"difficulty": "Easy", "count": 150},
                        {"difficulty": "Medium", "count": 140},
                        {"difficulty": "Hard", "count": 30},
                    ]
                },
            },
            "submissions": [
                {"id": "s1", "title": "Two Sum", "difficulty": "Easy", "lang": "python3", "timestamp": "1714560000"}
            ],
            "contests": [
                {"contest": {"title": "Weekly 390", "startTime": 1714000000}, "rating": 1700, "problemsSolved": 3},
                {"contest": {"title": "Weekly 391", "startTime": 1714600000}, "rating": 1750, "problemsSolved": 4},
            ],
        }
        records = LeetCodeAdapter(clock=lambda: NOW).parse(payload)
        profile = records[0]
        self.assertEqual(profile.metadata["total_solved"], 320)
        self.assertEqual(profile.metadata["rating"], 1850)
        self.assertTrue(records[1].metadata["accepted"])
        self.assertNotIn("rating_change", records[2].metadata)
        self.assertEqual(records[3].metadata["rating_change"], 50.0)

    def test_leetcode_bad_count_row_is_skipped(self):
        payload = {
            "profile": {
                "username": "ada",
                "submitStats": {
                    "acSubmissionNum": [
                        {"difficulty": "Easy", "count": 40},
                        {"difficulty": "Medium", "count": "lots"},
                        {"difficulty": "Hard", "count": 5},
                    ]
                },
            }
        }
        records = LeetCodeAdapter(clock=lambda: NOW).fetch(PlatformCredentials(username="ada", payload=payload))
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].metadata["total_solved"], 45)
        self.assertEqual(records[0].metadata["solved_by_difficulty"], {"Easy": 40, "Hard": 5})

    def test_hackerrank_translation(self):
        payload = {
            "submissions": {
                "models": [
                    {"id": 1, "status": "Accepted", "challenge_name": "Arrays", "language": "java", "created_at": "2024-05-01"},
                    {"id": 2, "status": "Wrong Answer", "challenge_name": "Trees", "created_at": "2024-05-01"},
                ]
            },
            "skills": {"models": [{"id": 4, "name": "Python (Basic)", "level": 2, "stars": 3}]},
        }
        records = HackerRankAdapter(clock=lambda: NOW).parse(payload)
        self.assertEqual(len(records), 2)
        self.assertEqual(records[1].metadata["tags"], ["Python"])
        self.assertEqual(records[1].timestamp, NOW)


class ContentAdapterTests(unittest.TestCase):
    def test_kaggle_rank_percentile(self):
        payload = {
            "competitions": [{"id": 1, "competitionTitle": "Titanic", "teamRank": 5, "rankOutOf": 100, "medal": "gold"}],
            "datasets": [{"ref": "ada/prices", "title": "Prices", "totalDownloads": 500, "usabilityRating": 0.9}],
            "kernels": [{"ref": "ada/eda", "title": "EDA", "language": "python", "totalVotes": 12}],
        }
        records = KaggleAdapter().parse(payload)
        self.assertEqual(_types(records), ["competition_participation", "documentation", "project_creation"])
        self.assertAlmostEqual(records[0].metadata["rank_percentile"], 0.05)
        self.assertEqual(records[1].metadata["downloads"], 500)

    def test_devpost_demo_projects_become_deployed_apps(self):
        payload = {
            "projects": [
                {
                    "id": 1,
                    "name": "Live app",
                    "demo_url": "https://demo",
                    "github_url": "https://github.com/ada/app",
                    "tags": ["react", "firebase"],
                    "members": ["ada", "bob"],
                    "created_at": (NOW - timedelta(days=60)).isoformat(),
                },
                {"id": 2, "name": "Prototype", "created_at": "2024-01-01T00:00:00Z"},
            ],
            "hackathons": [
                {"id": 3, "title": "HackMIT", "starts_at": "2024-02-01", "ends_at": "2024-02-03", "created_at": "2024-02-01"}
            ],
        }
        records = DevpostAdapter(clock=lambda: NOW).parse(payload)
        self.assertEqual(_types(records), ["deployed_app", "project_creation", "competition_participation"])
        self.assertEqual(records[0].metadata["uptime_days"], 60)
        self.assertEqual(records[0].metadata["team_size"], 2)
        self.assertTrue(records[0].metadata["has_source"])
        self.assertEqual(records[2].metadata["duration_days"], 2)

    def test_devto_articles(self):
        payload = [
            {
                "id": 11,
                "title": "Typed Python",
                "description": "Short intro",
                "tag_list": ["python", "typing"],
                "positive_reactions_count": 40,
                "comments_count": 3,
                "reading_time_minutes": 7,
                "published_at": "2024-05-10T00:00:00Z",
            }
        ]
        records = DevToAdapter().parse(payload)
        self.assertEqual(records[0].evidence_type, "article_publication")
        self.assertEqual(records[0].metadata["reactions"], 40)
        self.assertEqual(records[0].metadata["tags"], ["python", "typing"])

    def test_medium_rss(self):
        records = MediumAdapter().parse(MEDIUM_RSS)
        self.assertEqual(len(records), 1)
        article = records[0]
        self.assertEqual(article.id, "https://medium.com/p/abc123")
        self.assertEqual(article.metadata["title"], "Scaling Django with Redis")
        self.assertEqual(article.metadata["description"], "Caching layers for Django & Redis.")
        self.assertEqual(article.metadata["tags"], ["python", "django"])
        self.assertEqual(article.timestamp, datetime(2024, 5, 22, 10, 0, tzinfo=timezone.utc))

    def test_medium_invalid_xml_is_fetch_error(self):
        with self.assertRaises(AdapterFetchError):
            MediumAdapter().fetch(PlatformCredentials(username="ada", payload="<rss><item>"))

    def test_freelance_camel_case_keys(self):
        payload = {
            "projects": [
                {
                    "id": 1,
                    "title": "Shop rebuild",
                    "clientName": "Acme",
                    "budget": 3000,
                    "duration": 45,
                    "technologies": "react, node",
                    "testimonial": "Great work",
                    "verificationStatus": "COMPLETED",
                    "completedAt": "2024-04-01",
                }
            ]
        }
        record = FreelanceAdapter().parse(payload)[0]
        self.assertEqual(record.evidence_type, "freelance_project")
        self.assertEqual(record.metadata["client"], "Acme")
        self.assertEqual(record.metadata["duration_days"], 45)
        self.assertEqual(record.metadata["technologies"], ["react", "node"])
        self.assertEqual(record.metadata["status"], "completed")


class CustomPlatformAdapterTests(unittest.TestCase):
    def setUp(self):
        self.config = CustomPlatformConfig(
            platform_id="portfolio",
            name="Portfolio CMS",
            endpoint="https://api.example.com/v1/",
            headers={"X-Client": "skillproof"},
        )

    def test_type_mapping_and_default(self):
        items = [
            {"id": "a", "type": "commit", "timestamp": "2024-05-01T00:00:00Z", "title": "Refactor", "skills": ["python"]},
            {"type": "mystery", "date": "2024-05-02"},
            {"category": "code_review", "created_at": "2024-05-03"},
        ]
        records = CustomPlatformAdapter(self.config).parse(items)
        self.assertEqual(_types(records), ["code_commit", "project_creation", "code_review"])
        self.assertEqual(records[1].id, "item_1")
        self.assertEqual(records[0].metadata["technologies"], ["python"])
        self.assertEqual(records[0].platform_id, "portfolio")

    def test_build_request_headers(self):
        adapter = CustomPlatformAdapter(self.config)
        request = adapter.build_request(PlatformCredentials(access_token="tok"))
        self.assertEqual(request["url"], "https://api.example.com/v1/data")
        self.assertEqual(request["headers"]["Authorization"], "Bearer tok")
        self.assertEqual(request["headers"]["X-Client"], "skillproof")

        api_key_config = self.config.model_copy(update={"auth_type": "api_key"})
        request = CustomPlatformAdapter(api_key_config).build_request(PlatformCredentials(api_key="k"))
        self.assertEqual(request["headers"]["X-API-Key"], "k")
        self.assertNotIn("Authorization", request["headers"])

    def test_declared_credentials(self):
        config = self.config.model_copy(update={"accepted_credentials": ["workspace_token"]})
        adapter = CustomPlatformAdapter(config)
        self.assertTrue(adapter.validate(PlatformCredentials(workspace_token="abc")))
        self.assertFalse(adapter.validate(PlatformCredentials(access_token="tok")))
        self.assertEqual(adapter.describe().platform_type.value, "custom")


class RegistryTests(unittest.TestCase):
    def test_register_get_and_unknown(self):
        registry = AdapterRegistry([GitHubAdapter()])
        self.assertIn("github", registry)
        self.assertEqual(len(registry), 1)
        with self.assertRaises(UnknownPlatformError) as ctx:
            registry.get("myspace")
        self.assertIsInstance(ctx.exception, KeyError)
        self.assertEqual(str(ctx.exception), "Unknown platform 'myspace'.")

    def test_duplicate_registration_requires_replace(self):
        registry = AdapterRegistry([GitHubAdapter()])
        with self.assertRaises(ValueError):
            registry.register(GitHubAdapter())
        replacement = GitHubAdapter()
        registry.register(replacement, replace=True)
        self.assertIs(registry.get("github"), replacement)

    def test_default_registry(self):
        registry = build_default_registry()
        for platform_id in ("github", "gitlab", "bitbucket", "leetcode", "codeforces", "hackerrank",
                            "kaggle", "devpost", "devto", "medium", "freelance"):
            self.assertIn(platform_id, registry)
        self.assertEqual(len(registry.describe()), len(registry))

    def test_default_registry_respects_enabled_list(self):
        registry = build_default_registry(enabled=["GitHub", "nope"])
        self.assertEqual(registry.platform_ids(), ["github"])


if __name__ == "__main__":
    unittest.main()
