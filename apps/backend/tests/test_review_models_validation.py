import unittest
from pydantic import ValidationError

from models.review_models import ReviewRequest, SessionRangeModel, TextReplaceRequest


class ReviewRequestValidationTests(unittest.TestCase):
    def test_defaults(self):
        req = ReviewRequest()
        self.assertTrue(req.dry_run)
        self.assertEqual(req.statuses, [])
        self.assertIsNone(req.session_range)

    def test_camel_case_aliases(self):
        req = ReviewRequest.model_validate({"dryRun": False, "sessionRange": {"start": 1, "end": 5}})
        self.assertFalse(req.dry_run)
        self.assertEqual((req.session_range.start, req.session_range.end), (1, 5))

    def test_statuses_are_trimmed_and_deduplicated(self):
        req = ReviewRequest(statuses=[" approved", "approved", "", "pending "])
        self.assertEqual(req.statuses, ["approved", "pending"])

    def test_single_status_string_is_accepted(self):
        self.assertEqual(ReviewRequest(statuses="approved").statuses, ["approved"])

    def test_rejects_too_many_statuses(self):
        with self.assertRaises(ValidationError):
            ReviewRequest(statuses=[f"s{i}" for i in range(21)])

    def test_rejects_reversed_range(self):
        with self.assertRaises(ValidationError):
            SessionRangeModel(start=10, end=1)

    def test_rejects_negative_session(self):
        with self.assertRaises(ValidationError):
            SessionRangeModel(start=-1, end=1)

    def test_to_scope(self):
        scope = ReviewRequest(statuses=["approved"], sessionRange={"start": 1, "end": 50}).to_scope()
        self.assertEqual(scope.statuses, ("approved",))
        self.assertTrue(scope.session_range.contains("50"))
        self.assertFalse(scope.session_range.contains("51"))


class TextReplaceRequestValidationTests(unittest.TestCase):
    def test_rejects_whitespace_search_text(self):
        with self.assertRaises(ValidationError):
            TextReplaceRequest(searchText="   ")

    def test_rejects_oversized_search_text(self):
        with self.assertRaises(ValidationError):
            TextReplaceRequest(searchText="a" * 501)

    def test_missing_replace_text_means_delete(self):
        req = TextReplaceRequest(searchText="(삭제)", replaceText=None)
        self.assertEqual(req.replace_text, "")
        self.assertTrue(req.dry_run)

    def test_search_and_replace_text_are_trimmed(self):
        req = TextReplaceRequest(searchText="  부산 ", replaceText=" 울산  ")
        self.assertEqual((req.search_text, req.replace_text), ("부산", "울산"))


if __name__ == "__main__":
    unittest.main()
