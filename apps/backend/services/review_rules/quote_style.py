# -*- coding: utf-8 -*-
"""
Quotation Style Rules
=====================
1. Double quotes of any flavour become the canonical single quote.
2. Single-quoted spans in explanations that are not genuine quotations
   (short, or not followed by a quoting particle) lose their delimiters.
"""

import re

from infrastructure.record_store import QUESTION_TABLES
from services.review_rules.base import FieldRewriteRule
from services.review_rules.answer_match import WORD_ORDER_QUESTION_TYPE

CANONICAL_QUOTE = "'"
DOUBLE_QUOTE_CHARS = "\u0022\u201c\u201d\u201e\u201f"
SINGLE_QUOTE_CHARS = "\u0027\u2018\u2019\u201a\u201b"

_DOUBLE_QUOTE_TABLE = str.maketrans({ch: CANONICAL_QUOTE for ch in DOUBLE_QUOTE_CHARS})

_QUOTED_SPAN_RE = re.compile(f"[{SINGLE_QUOTE_CHARS}]([^{SINGLE_QUOTE_CHARS}]+)[{SINGLE_QUOTE_CHARS}]")

# Particles that mark a span as a real quotation: 'X'라고, 'X'처럼, 'X'는 ...
QUOTING_PARTICLES = ("와", "라고", "고", "라는", "는", "처럼", "이", "가", "을", "를", "에")
MAX_STRIPPED_SPAN_LENGTH = 5


def normalize_double_quotes(text: str) -> str:
    return text.translate(_DOUBLE_QUOTE_TABLE)


def strip_non_citation_quotes(text: str) -> str:
    def _replace(match: "re.Match[str]") -> str:
        content = match.group(1)
        if len(content) <= MAX_STRIPPED_SPAN_LENGTH:
            return content
        if text.startswith(QUOTING_PARTICLES, match.end()):
            return match.group(0)
        return content

    return _QUOTED_SPAN_RE.sub(_replace, text)


class DoubleQuoteRule(FieldRewriteRule):
    name = "double-quotes"
    description = "Replace double quotation marks in explanations with single quotes."
    fields_by_table = {table: ("explanation",) for table in QUESTION_TABLES}
    sample_limit = 15

    def rewrite(self, table, field_name, text):
        return normalize_double_quotes(text)


class ExplanationQuoteRule(FieldRewriteRule):
    name = "explanation-quotes"
    description = "Remove quotation marks around explanation spans that are not quotations."
    fields_by_table = {table: ("explanation",) for table in QUESTION_TABLES}
    sample_limit = 20

    def skip_record(self, table, record):
        return str(record.get("question_type") or "").strip() == WORD_ORDER_QUESTION_TYPE

    def rewrite(self, table, field_name, text):
        return strip_non_citation_quotes(text)
