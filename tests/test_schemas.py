import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from skillproof.schemas import (  # noqa: E402
    ConfidenceTier,
    ConstructedSkill,
    EvidenceItem,
    EvidenceType,
    PlatformCredentials,
    clamp_score,
)


def _item(**overrides):
    data = {
        "id": "e1",
        "user_id": "u1",
        "platform_id": "github",
        "evidence_type": EvidenceType.CODE_COMMIT,
        "created_at": datetime(2024, 6, 1, tzinfo=timezone.utc),
    }
    data.update(overrides)
    return EvidenceItem(**data)


class EvidenceItemTests(unittest.TestCase):
    def test_scores_clamped_on_construction(self):
        item = _item(complexity_score=15, originality_score=-2)
        self.assertEqual(item.complexity_score, 10.0)
        self.assertEqual(item.originality_score, 0.0)

    def test_scores_clamped_on_assignment(self):
        item = _item()
        item.growth_score = 42
        item.consistency_score = -1
        self.assertEqual(item.growth_score, 10.0)
        self.assertEqual(item.consistency_score, 0.0)

    def test_tech_stack_lowercased_and_deduplicated(self):
        item = _item(tech_stack=["Python", "python", " Docker ", ""])
        self.assertEqual(item.tech_stack, ["python", "docker"])

    def test_quality_is_mean_of_four_sub_scores(self):
        item = _item(complexity_score=8, originality_score=7, consistency_score=9, growth_score=6)
        self.assertAlmostEqual(item.quality, 7.5)

    def test_clamp_score_handles_nan(self):
        self.assertEqual(clamp_score(float("nan")), 0.0)
        self.assertEqual(clamp_score(11.5), 10.0)


class SkillModelTests(unittest.TestCase):
    def test_confidence_numeric_values(self):
        self.assertEqual(ConfidenceTier.LOW.numeric, 40)
        self.assertEqual(ConfidenceTier.MEDIUM.numeric, 60)
        self.assertEqual(ConfidenceTier.HIGH.numeric, 75)
        self.assertEqual(ConfidenceTier.VERY_HIGH.numeric, 90)

    def test_constructed_skill_serializes_confidence_score(self):
        skill = ConstructedSkill(
            name="python",
            score=72.0,
            confidence=ConfidenceTier.HIGH,
            level="Advanced",
            evidence_count=4,
        )
        self.assertEqual(skill.model_dump()["confidence_score"], 75)


class PlatformCredentialsTests(unittest.TestCase):
    def test_value_reads_declared_and_extra_fields(self):
        credentials = PlatformCredentials(username="octocat", workspace_token="abc")
        self.assertEqual(credentials.value("username"), "octocat")
        self.assertEqual(credentials.value("workspace_token"), "abc")
        self.assertIsNone(credentials.value("missing"))


if __name__ == "__main__":
    unittest.main()
