# -*- coding: utf-8 -*-
"""
Sentence Ending Normalizer
==========================
Rewrites formal/polite sentence-final endings into the plain declarative
register used across the corpus (합니다 -> 한다, 있습니다 -> 있다, ...).

ENDING_REWRITES is order-sensitive. The general rule at the end turns a
ㅂ final before 니다 into ㄴ (나타냅니다 -> 나타낸다, 갑니다 -> 간다) and
drops it for adjective stems (큽니다 -> 크다, 아닙니다 -> 아니다). 됩니다,
합니다, 습니다 and the copula 입니다 are matched explicitly before it.
"""

import re

from infrastructure.record_store import OPTION_FIELDS, QUESTION_TABLES
from services.review_rules.base import FieldRewriteRule, apply_rewrites
from utils.text_utils import FINAL_BIEUP, FINAL_NIEUN, final_consonant, with_final_consonant

# Descriptive stems whose plain form is stem + 다, not stem + ㄴ다
ADJECTIVE_STEMS = (
    "아니", "크", "아프", "고프", "기쁘", "슬프", "나쁘", "바쁘", "예쁘",
    "다르", "빠르", "느리", "흐리", "어리",
)


def _plain_form(match: "re.Match[str]") -> str:
    prefix, syllable = match.group(1), match.group(2)
    if final_consonant(syllable) != FINAL_BIEUP:
        return match.group(0)
    stem = prefix + with_final_consonant(syllable, 0)
    if stem.endswith(ADJECTIVE_STEMS):
        return stem + "다"
    return prefix + with_final_consonant(syllable, FINAL_NIEUN) + "다"


ENDING_REWRITES = [
    (re.compile(r"됩니다"), "된다"),
    (re.compile(r"합니다"), "한다"),
    (re.compile(r"습니다"), "다"),
    (re.compile(r"습니까"), "는가"),
    (re.compile(r"입니까"), "인가"),
    (re.compile(r"입니다"), "이다"),
    (re.compile(r"([가-힣]*)([가-힣])니다"), _plain_form),
]

ABBREVIATION_REWRITES = [
    (re.compile(r"(?<![(\w])예\)[ \t]*(?=\S)"), "예를 들어, "),
    (re.compile(r"(?<![(\w])예\)"), "예를 들어,"),
]

# Question prompts end politely: 무엇인가? -> 무엇인가요?
POLITE_QUESTION_REWRITES = [
    (re.compile(r"([가나까])\?(\s*)$"), r"\1요?\2"),
]

ENDING_FIELDS = ("question_text",) + OPTION_FIELDS + ("correct_answer", "explanation")


def normalize_endings(text: str) -> str:
    return apply_rewrites(apply_rewrites(text, ABBREVIATION_REWRITES), ENDING_REWRITES)


def normalize_question_text(text: str) -> str:
    return apply_rewrites(normalize_endings(text), POLITE_QUESTION_REWRITES)


class SentenceEndingRule(FieldRewriteRule):
    name = "sentence-endings"
    description = "Convert formal sentence endings to the plain declarative register."
    fields_by_table = {table: ENDING_FIELDS for table in QUESTION_TABLES}
    sample_limit = 20

    def rewrite(self, table, field_name, text):
        if field_name == "question_text":
            return normalize_question_text(text)
        return normalize_endings(text)
