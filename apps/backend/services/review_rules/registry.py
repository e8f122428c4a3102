from typing import Any, Dict, List, Type

from services.review_rules.answer_match import AnswerOptionMatchRule
from services.review_rules.base import ReviewRule
from services.review_rules.citation_check import CitationCheckRule
from services.review_rules.example_comma import ExampleCommaRule
from services.review_rules.quote_style import DoubleQuoteRule, ExplanationQuoteRule
from services.review_rules.sentence_endings import SentenceEndingRule
from services.review_rules.terminal_period import ShortOptionPeriodRule, TerminalPeriodRule
from services.review_rules.text_cleanup import ExampleSentenceRule, TextReplaceRule
from services.review_rules.vocabulary_integrity import QuestionFlagRule, VocabularyMismatchRule

RULE_TYPES: Dict[str, Type[ReviewRule]] = {
    rule_cls.name: rule_cls
    for rule_cls in (
        CitationCheckRule,
        AnswerOptionMatchRule,
        DoubleQuoteRule,
        ExplanationQuoteRule,
        SentenceEndingRule,
        TerminalPeriodRule,
        ExampleCommaRule,
        VocabularyMismatchRule,
        QuestionFlagRule,
        TextReplaceRule,
        ExampleSentenceRule,
        ShortOptionPeriodRule,
    )
}


class UnknownRuleError(KeyError):
    pass


def build_rule(name: str, **params: Any) -> ReviewRule:
    """Instantiate a rule by its endpoint name; params go to the rule constructor."""
    try:
        rule_cls = RULE_TYPES[name]
    except KeyError:
        raise UnknownRuleError(name) from None
    return rule_cls(**params)


def describe_rules() -> List[Dict[str, Any]]:
    return [rule_cls.describe() for rule_cls in RULE_TYPES.values()]
