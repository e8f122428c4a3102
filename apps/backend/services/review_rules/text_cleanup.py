# -*- coding: utf-8 -*-
"""
Operator Text Cleanup
=====================
- TextReplaceRule: literal search/replace over editable text fields of
  vocabulary terms and questions. Passages and content sets are never
  touched.
- ExampleSentenceRule: repairs stray parentheses left in
  vocabulary_terms.example_sentence by the generation pipeline.
"""

import re
from typing import Optional

from infrastructure.record_store import OPTION_FIELDS, Table
from services.review_rules.base import FieldRewriteRule, apply_rewrites

_QUESTION_FIELDS = ("question_text",) + OPTION_FIELDS + ("correct_answer", "explanation")

TEXT_REPLACE_FIELDS = {
    Table.VOCABULARY_TERMS: ("term", "definition", "example_sentence"),
    Table.VOCABULARY_QUESTIONS: ("term",) + _QUESTION_FIELDS,
    Table.PARAGRAPH_QUESTIONS: _QUESTION_FIELDS,
    Table.COMPREHENSIVE_QUESTIONS: _QUESTION_FIELDS,
}

EXAMPLE_SENTENCE_REWRITES = [
    (re.compile(r"^\)"), ""),  # ")내용" -> "내용"
    (re.compile(r"\($"), ""),  # "내용(" -> "내용"
    (re.compile(r"\)\.$"), "."),  # "불었다)." -> "불었다."
    (re.compile(r"\)$"), ""),
    (re.compile(r"^\("), ""),
    (re.compile(r"\)([가-힣a-zA-Z])"), r" \1"),  # "내용)추가" -> "내용 추가"
    (re.compile(r"([가-힣a-zA-Z])\("), r"\1 "),  # "내용(추가" -> "내용 추가"
    (re.compile(r"\s+"), " "),
]


def clean_example_sentence(sentence: str) -> str:
    return apply_rewrites(sentence.strip(), EXAMPLE_SENTENCE_REWRITES).strip()


class TextReplaceRule(FieldRewriteRule):
    name = "text-replace"
    description = "Replace a literal text fragment across vocabulary terms and questions."
    fields_by_table = TEXT_REPLACE_FIELDS
    sample_limit = 20
    parameters = ("searchText", "replaceText")

    def __init__(self, search_text: Optional[str] = None, replace_text: str = ""):
        if not search_text or not search_text.strip():
            raise ValueError("search_text must be a non-blank string")
        self.search_text = search_text.strip()
        self.replace_text = (replace_text or "").strip()

    def rewrite(self, table, field_name, text):
        return text.replace(self.search_text, self.replace_text)


class ExampleSentenceRule(FieldRewriteRule):
    name = "example-sentences"
    description = "Remove stray parentheses from vocabulary example sentences."
    fields_by_table = {Table.VOCABULARY_TERMS: ("example_sentence",)}
    sample_limit = 10

    def rewrite(self, table, field_name, text):
        if "(" not in text and ")" not in text:
            return text
        return clean_example_sentence(text)
