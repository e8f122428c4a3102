# -*- coding: utf-8 -*-
"""
Terminal Period Rules
=====================
Sentence-like answers, options and quoted explanation spans end with a
period. One length guard (min_chars, measured on the trimmed text) applies
to both flat fields and quoted spans, so short nouns such as 바다 are left
alone.

ShortOptionPeriodRule reports the reverse defect: options under the guard
that already carry a 다. period.
"""

import re
from typing import Iterable, Optional

from config import settings
from infrastructure.record_store import OPTION_FIELDS, QUESTION_TABLES, Table
from services.review_rules.base import FieldRewriteRule, Finding, Proposal, ReviewRule

DECLARATIVE_ENDINGS = ("다",)

# Declarative, polite, plain and interrogative endings that close a quoted sentence.
SENTENCE_ENDINGS = (
    "다", "요", "죠", "네", "군", "구나", "구요", "네요", "군요",
    "니다", "습니다", "입니다", "됩니다", "합니다", "있습니다", "없습니다",
    "세요", "에요", "이에요", "예요", "래요", "대요", "나요", "까요",
    "어", "아", "야", "지", "래", "대", "냐", "니", "나", "돼", "겨", "사", "써", "져", "줘", "해",
    "자", "라", "렴", "려무나", "까", "가", "로구나", "는구나", "는군",
)
TERMINAL_PUNCTUATION = (".", "?", "!")

QUOTED_SPAN_RE = re.compile(r"'([^']+)'")

FLAT_PERIOD_FIELDS = {
    Table.VOCABULARY_QUESTIONS: OPTION_FIELDS + ("correct_answer",),
    Table.PARAGRAPH_QUESTIONS: OPTION_FIELDS + ("correct_answer",),
    Table.COMPREHENSIVE_QUESTIONS: OPTION_FIELDS + ("correct_answer",),
}
QUOTED_PERIOD_FIELDS = {
    Table.COMPREHENSIVE_QUESTIONS: ("explanation",),
    Table.PARAGRAPH_QUESTIONS: ("explanation",),
}


def needs_period(text: str, endings: Iterable[str], min_chars: int) -> bool:
    stripped = text.strip()
    if len(stripped) < min_chars:
        return False
    if stripped.endswith(TERMINAL_PUNCTUATION):
        return False
    return stripped.endswith(tuple(endings))


def add_flat_period(text: str, min_chars: int) -> str:
    if needs_period(text, DECLARATIVE_ENDINGS, min_chars):
        return text.strip() + "."
    return text


def add_quoted_periods(text: str, min_chars: int) -> str:
    def _replace(match: "re.Match[str]") -> str:
        content = match.group(1)
        if needs_period(content, SENTENCE_ENDINGS, min_chars):
            return f"'{content.rstrip()}.'"
        return match.group(0)

    return QUOTED_SPAN_RE.sub(_replace, text)


class TerminalPeriodRule(FieldRewriteRule):
    name = "terminal-periods"
    description = "Append a period to sentence-like options, answers and quoted explanation spans."
    fields_by_table = {
        table: FLAT_PERIOD_FIELDS[table] + QUOTED_PERIOD_FIELDS.get(table, ())
        for table in QUESTION_TABLES
    }
    sample_limit = 20

    def __init__(self, min_chars: Optional[int] = None):
        self.min_chars = settings.REVIEW_MIN_SENTENCE_CHARS if min_chars is None else min_chars

    def rewrite(self, table, field_name, text):
        if field_name in QUOTED_PERIOD_FIELDS.get(table, ()):
            return add_quoted_periods(text, self.min_chars)
        return add_flat_period(text, self.min_chars)


class ShortOptionPeriodRule(ReviewRule):
    name = "short-option-periods"
    description = "Report options shorter than the sentence guard that end with a period."
    target_tables = QUESTION_TABLES
    auto_fix = False
    sample_limit = 30

    def __init__(self, min_chars: Optional[int] = None):
        self.min_chars = settings.REVIEW_MIN_SENTENCE_CHARS if min_chars is None else min_chars

    def evaluate(self, table, record, context):
        findings = []
        for field_name in OPTION_FIELDS:
            value = record.get(field_name)
            if not isinstance(value, str):
                continue
            trimmed = value.strip()
            if trimmed.endswith("다.") and len(trimmed[:-1]) < self.min_chars:
                findings.append(
                    Finding(reason="short_option_period", details={"field": field_name, "value": trimmed, "length": len(trimmed)})
                )
        if not findings:
            return None
        return Proposal.report(table, record, findings)
