import unittest

from infrastructure.record_store import Table
from services.review_rules.answer_match import (
    AnswerOptionMatchRule,
    check_answer,
    closest_option,
    option_slots,
)

from review_fixtures import question


class CheckAnswerTests(unittest.TestCase):
    SLOTS = [("option_1", "서울"), ("option_2", "부산"), ("option_3", "대구")]

    def test_answer_equal_to_option_passes(self):
        self.assertIsNone(check_answer("부산", self.SLOTS))

    def test_answer_is_trimmed(self):
        self.assertIsNone(check_answer("  부산 ", self.SLOTS))

    def test_mismatch_reports_closest_option(self):
        finding = check_answer("인천", self.SLOTS)

        self.assertEqual(finding.reason, "answer_not_in_options")
        self.assertEqual(finding.details["options"], ["서울", "부산", "대구"])
        self.assertEqual(finding.details["editDistance"], 2)
        # All options are two edits away; ties resolve to the earliest option
        self.assertEqual(finding.details["closestOption"], "서울")
        self.assertEqual(finding.details["closestOptionIndex"], 1)
        self.assertEqual(finding.details["closestOptionField"], "option_1")

    def test_closest_option_prefers_smallest_distance(self):
        best, distance = closest_option("대구시", ["서울", "부산", "대구"])
        self.assertEqual(best, "대구")
        self.assertEqual(distance, 1)

    def test_empty_answer_is_a_mismatch(self):
        self.assertEqual(check_answer("  ", self.SLOTS).reason, "empty_answer")
        self.assertEqual(check_answer(None, self.SLOTS).reason, "empty_answer")

    def test_no_options_is_a_mismatch(self):
        self.assertEqual(check_answer("부산", []).reason, "no_options")


class OptionSlotTests(unittest.TestCase):
    def test_blank_options_keep_their_field_names(self):
        record = question("q", "cs", option_1="", option_2=" 서울 ", option_3="부산")
        self.assertEqual(option_slots(record), [("option_2", "서울"), ("option_3", "부산")])


class AnswerOptionMatchRuleTests(unittest.TestCase):
    def setUp(self):
        self.rule = AnswerOptionMatchRule()

    def test_blank_options_are_ignored(self):
        record = question("q", "cs", option_1="  ", option_2="부산", option_3=None, correct_answer="부산")
        self.assertIsNone(self.rule.evaluate(Table.COMPREHENSIVE_QUESTIONS, record, {}))

    def test_closest_option_points_at_stored_field(self):
        record = question("q", "cs", option_1="", option_2="서울", option_3="부산", correct_answer="부선")
        details = self.rule.evaluate(Table.COMPREHENSIVE_QUESTIONS, record, {}).findings[0].details

        self.assertEqual(details["closestOption"], "부산")
        self.assertEqual(details["closestOptionField"], "option_3")
        self.assertEqual(details["closestOptionIndex"], 3)

    def test_mismatch_proposal_is_report_only(self):
        record = question("q", "cs", correct_answer="인천", question_number=4)
        proposal = self.rule.evaluate(Table.COMPREHENSIVE_QUESTIONS, record, {})

        self.assertEqual(proposal.record_id, "q")
        self.assertEqual(proposal.content_set_id, "cs")
        self.assertEqual(proposal.findings[0].details["questionNumber"], 4)
        self.assertEqual(proposal.findings[0].details["correctAnswer"], "인천")

    def test_short_answer_questions_are_exempt(self):
        record = question("q", "cs", question_format="short_answer", correct_answer="인천")
        self.assertIsNone(self.rule.evaluate(Table.COMPREHENSIVE_QUESTIONS, record, {}))

    def test_short_answer_without_answer_is_reported(self):
        record = question("q", "cs", question_format="short_answer", correct_answer="")
        proposal = self.rule.evaluate(Table.COMPREHENSIVE_QUESTIONS, record, {})
        self.assertEqual(proposal.findings[0].reason, "empty_answer")

    def test_word_order_questions_are_exempt(self):
        record = question(
            "q", "cs", question_type="어절 순서 맞추기",
            option_1=None, option_2=None, option_3=None, correct_answer="바람이 세게 불었다",
        )
        self.assertIsNone(self.rule.evaluate(Table.PARAGRAPH_QUESTIONS, record, {}))


if __name__ == "__main__":
    unittest.main()
