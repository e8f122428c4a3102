import unittest

from fastapi.testclient import TestClient

import app as review_app
from infrastructure.record_store import Table
from middleware.rate_limit import limiter
from routes import review_routes

from review_fixtures import InMemoryRecordStore, three_set_corpus


class ReviewRoutesTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(review_app.app)

    def setUp(self):
        self._orig_limiter_enabled = limiter.enabled
        limiter.enabled = False
        self.store = InMemoryRecordStore(three_set_corpus())
        review_app.app.dependency_overrides[review_routes.get_record_store] = lambda: self.store

    def tearDown(self):
        limiter.enabled = self._orig_limiter_enabled
        review_app.app.dependency_overrides.clear()

    def test_health_check(self):
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "online")

    def test_rules_listing(self):
        resp = self.client.get("/api/review/rules")

        self.assertEqual(resp.status_code, 200, resp.text)
        rules = {rule["name"]: rule for rule in resp.json()["rules"]}
        self.assertEqual(len(rules), 12)
        self.assertFalse(rules["explanation-citations"]["autoFix"])
        self.assertEqual(rules["text-replace"]["parameters"], ["searchText", "replaceText"])

    def test_dry_run_is_the_default(self):
        resp = self.client.post("/api/review/double-quotes", json={"statuses": ["approved"]})

        self.assertEqual(resp.status_code, 200, resp.text)
        data = resp.json()
        self.assertTrue(data["success"])
        self.assertTrue(data["dryRun"])
        self.assertEqual(data["engine"], "double-quotes")
        self.assertEqual(data["affectedRecords"], 1)
        self.assertEqual(self.store.updates, [])

    def test_empty_body_reviews_whole_corpus(self):
        resp = self.client.post("/api/review/double-quotes")

        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["totalChecked"], 9)

    def test_apply(self):
        resp = self.client.post("/api/review/sentence-endings", json={"dryRun": False, "statuses": ["approved"]})

        self.assertEqual(resp.status_code, 200, resp.text)
        data = resp.json()
        self.assertFalse(data["dryRun"])
        self.assertEqual(data["successCount"], 4)
        self.assertEqual(data["errorCount"], 0)
        self.assertEqual(data["totalProcessed"], 4)

    def test_report_only_rule_ignores_apply_flag(self):
        resp = self.client.post("/api/review/answer-options", json={"dryRun": False, "statuses": ["approved"]})

        data = resp.json()
        self.assertTrue(data["dryRun"])
        self.assertEqual(data["mismatchCount"], 1)

    def test_session_range_scope(self):
        resp = self.client.post(
            "/api/review/vocabulary-mismatch",
            json={"sessionRange": {"start": 20, "end": 30}},
        )
        data = resp.json()
        self.assertEqual(data["totalChecked"], 2)
        self.assertEqual(data["affectedRecords"], 1)
        self.assertEqual(data["samples"][0]["id"], "vq-4")

    def test_reversed_session_range_is_rejected(self):
        resp = self.client.post("/api/review/double-quotes", json={"sessionRange": {"start": 10, "end": 1}})
        self.assertEqual(resp.status_code, 422)

    def test_text_replace_requires_search_text(self):
        resp = self.client.post("/api/review/text-replace", json={"replaceText": "x"})
        self.assertEqual(resp.status_code, 422)

        resp = self.client.post("/api/review/text-replace", json={"searchText": "   "})
        self.assertEqual(resp.status_code, 422)

    def test_text_replace(self):
        resp = self.client.post(
            "/api/review/text-replace",
            json={"searchText": "부산", "replaceText": "울산", "statuses": ["approved"]},
        )

        data = resp.json()
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(data["engine"], "text-replace")
        self.assertEqual(data["affectedRecords"], 4)

    def test_read_failure_returns_500(self):
        self.store.fail_fetch = lambda table, offset: table == Table.CONTENT_SETS

        resp = self.client.post("/api/review/sentence-endings", json={"dryRun": False})

        self.assertEqual(resp.status_code, 500)
        data = resp.json()
        self.assertFalse(data["success"])
        self.assertIn("CONTENT_SETS", data["error"])
        self.assertEqual(data["details"], {"table": "CONTENT_SETS", "offset": 0})
        self.assertEqual(self.store.updates, [])


if __name__ == "__main__":
    unittest.main()
