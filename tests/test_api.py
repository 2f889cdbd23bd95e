import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from skillproof.adapters import build_default_registry  # noqa: E402
from skillproof.api.v1.verification import get_verification_service  # noqa: E402
from skillproof.main import app  # noqa: E402
from skillproof.services import SkillVerificationService  # noqa: E402

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _fixed_clock():
    return NOW


class VerificationApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        service = SkillVerificationService(build_default_registry(clock=_fixed_clock), clock=_fixed_clock)
        app.dependency_overrides[get_verification_service] = lambda: service
        cls.client = TestClient(app)

    @classmethod
    def tearDownClass(cls):
        app.dependency_overrides.clear()

    def test_routes_are_registered(self):
        paths = {route.path for route in app.routes}
        self.assertIn("/v1/health", paths)
        self.assertIn("/v1/platforms", paths)
        self.assertIn("/v1/platforms/{platform_id}", paths)
        self.assertIn("/v1/skills/verify", paths)
        self.assertIn("/v1/skills/collect", paths)

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")
        self.assertIn("version", response.json())

    def test_list_platforms(self):
        response = self.client.get("/v1/platforms")
        self.assertEqual(response.status_code, 200)
        ids = {entry["platform_id"] for entry in response.json()}
        self.assertTrue({"github", "leetcode", "medium", "freelance"}.issubset(ids))

    def test_unknown_platform_is_404(self):
        response = self.client.get("/v1/platforms/myspace")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "Unknown platform 'myspace'.")

    def test_verify_contract(self):
        records = [
            {
                "id": f"repo_{index}",
                "evidence_type": "project_creation",
                "timestamp": f"2024-05-{index + 10:02d}T00:00:00Z",
                "metadata": {"language": "Python", "title": f"service {index}", "stars": 20},
            }
            for index in range(3)
        ]
        response = self.client.post(
            "/v1/skills/verify",
            json={"user_id": "user-1", "platforms": [{"platform_id": "github", "records": records}]},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["user_id"], "user-1")
        self.assertEqual(body["metrics"]["total_evidence"], 3)
        python = next(skill for skill in body["skills"] if skill["name"] == "python")
        self.assertIn(python["confidence"], {"LOW", "MEDIUM", "HIGH", "VERY_HIGH"})
        self.assertIn("confidence_score", python)
        self.assertTrue(python["explanation"].startswith("python skill constructed from 3 evidence items"))
        self.assertIsInstance(body["recommendations"], list)

    def test_collect_reports_failures_alongside_results(self):
        payload = {
            "projects": [
                {"id": 1, "title": "Store", "technologies": ["react"], "completedAt": "2024-05-01T00:00:00Z"},
            ]
        }
        response = self.client.post(
            "/v1/skills/collect",
            json={
                "user_id": "user-1",
                "credentials": {"freelance": {"payload": payload}, "myspace": {"username": "ada"}},
            },
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["metrics"]["total_evidence"], 1)
        self.assertEqual(
            body["platform_failures"],
            [{"platform_id": "myspace", "error": "Unknown platform 'myspace'."}],
        )

    def test_verify_requires_user_id(self):
        response = self.client.post("/v1/skills/verify", json={"platforms": []})
        self.assertEqual(response.status_code, 422)


if __name__ == "__main__":
    unittest.main()
