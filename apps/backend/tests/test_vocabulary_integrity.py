import unittest

from infrastructure.record_store import Table
from services.review_rules.base import Action
from services.review_rules.vocabulary_integrity import QuestionFlagRule, VocabularyMismatchRule

from review_fixtures import question, vocab_term


class VocabularyMismatchRuleTests(unittest.TestCase):
    def setUp(self):
        self.rule = VocabularyMismatchRule()
        self.context = self.rule.build_context({
            Table.VOCABULARY_TERMS: [
                vocab_term("t-1", "cs-1", "바람"),
                vocab_term("t-2", "cs-2", "나무"),
            ],
        })

    def test_matching_term_is_kept(self):
        self.assertIsNone(self.rule.evaluate(Table.VOCABULARY_QUESTIONS, question("q", "cs-1", term="바람"), self.context))

    def test_term_from_another_set_is_deleted(self):
        proposal = self.rule.evaluate(Table.VOCABULARY_QUESTIONS, question("q", "cs-1", term="나무"), self.context)
        self.assertEqual(proposal.action, Action.DELETE)
        self.assertEqual(proposal.record_id, "q")

    def test_trailing_whitespace_is_a_mismatch(self):
        proposal = self.rule.evaluate(Table.VOCABULARY_QUESTIONS, question("q", "cs-1", term="바람 "), self.context)
        self.assertEqual(proposal.action, Action.DELETE)

    def test_set_without_terms_deletes_question(self):
        proposal = self.rule.evaluate(Table.VOCABULARY_QUESTIONS, question("q", "cs-9", term="바람"), self.context)
        self.assertEqual(proposal.action, Action.DELETE)

    def test_terms_are_read_before_questions(self):
        self.assertEqual(self.rule.required_tables, (Table.VOCABULARY_TERMS, Table.VOCABULARY_QUESTIONS))


class QuestionFlagRuleTests(unittest.TestCase):
    def setUp(self):
        self.rule = QuestionFlagRule()
        self.context = self.rule.build_context({
            Table.VOCABULARY_QUESTIONS: [question("q", "cs-1", term="바람")],
        })

    def test_flag_is_set_when_question_exists(self):
        proposal = self.rule.evaluate(Table.VOCABULARY_TERMS, vocab_term("t", "cs-1", "바람", False), self.context)
        self.assertEqual(proposal.changes[0].field, "has_question_generated")
        self.assertIs(proposal.changes[0].after, True)

    def test_flag_is_cleared_when_no_question(self):
        proposal = self.rule.evaluate(Table.VOCABULARY_TERMS, vocab_term("t", "cs-1", "나무", True), self.context)
        self.assertIs(proposal.changes[0].after, False)

    def test_pair_must_match_content_set(self):
        proposal = self.rule.evaluate(Table.VOCABULARY_TERMS, vocab_term("t", "cs-2", "바람", True), self.context)
        self.assertIs(proposal.changes[0].after, False)

    def test_agreeing_flags_produce_nothing(self):
        self.assertIsNone(self.rule.evaluate(Table.VOCABULARY_TERMS, vocab_term("t", "cs-1", "바람", True), self.context))
        self.assertIsNone(self.rule.evaluate(Table.VOCABULARY_TERMS, vocab_term("t", "cs-1", "나무", False), self.context))

    def test_missing_flag_is_a_disagreement(self):
        proposal = self.rule.evaluate(Table.VOCABULARY_TERMS, vocab_term("t", "cs-1", "나무", None), self.context)
        self.assertIs(proposal.changes[0].after, False)


if __name__ == "__main__":
    unittest.main()
