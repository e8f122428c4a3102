# -*- coding: utf-8 -*-
"""
Explanation Citation Check
==========================
Quoted fragments in question explanations claim to be verbatim passage
text. Each fragment is looked up in the concatenated passage text of the
same content set through an ordered cascade of equivalences; fragments that
survive none of them are reported. Nothing is rewritten: there is no safe
way to tell whether the explanation or the passage is wrong.
"""

import re
from typing import Callable, Dict, List, Optional, Tuple

from infrastructure.record_store import PARAGRAPH_FIELDS, Table
from services.review_rules.base import Finding, Proposal, Record, RecordsByTable, ReviewRule
from utils.text_utils import non_empty_values, remove_whitespace

CITATION_RE = re.compile(r"'([^']+)'")
MIN_CITATION_LENGTH = 3
SENTENCE_PERIODS = ".。"

Matcher = Callable[[str, str], bool]


def _exact(citation: str, passage: str) -> bool:
    return citation in passage


def _ignoring_whitespace(citation: str, passage: str) -> bool:
    return remove_whitespace(citation) in remove_whitespace(passage)


def _ignoring_trailing_period(citation: str, passage: str) -> bool:
    bare = citation.rstrip(SENTENCE_PERIODS)
    return bool(bare) and bare in passage


def _ignoring_commas(citation: str, passage: str) -> bool:
    return citation.replace(",", "") in passage.replace(",", "")


# First match wins; order only decides the reported match type.
MATCH_CASCADE: List[Tuple[str, Matcher]] = [
    ("exact", _exact),
    ("whitespace", _ignoring_whitespace),
    ("period", _ignoring_trailing_period),
    ("comma", _ignoring_commas),
]


def extract_citations(text: str) -> List[str]:
    citations = []
    for raw in CITATION_RE.findall(text or ""):
        candidate = raw.strip()
        if len(candidate) >= MIN_CITATION_LENGTH:
            citations.append(candidate)
    return citations


def match_citation(citation: str, passage_text: str) -> Optional[str]:
    """Name of the first equivalence under which the citation occurs, else None."""
    for match_type, matcher in MATCH_CASCADE:
        if matcher(citation, passage_text):
            return match_type
    return None


def passage_text(passage: Record) -> str:
    return " ".join(non_empty_values(passage, PARAGRAPH_FIELDS))


class CitationCheckRule(ReviewRule):
    name = "explanation-citations"
    description = "Report quoted explanation fragments that cannot be found in the passage."
    target_tables = (Table.PARAGRAPH_QUESTIONS, Table.COMPREHENSIVE_QUESTIONS)
    context_tables = (Table.PASSAGES,)
    auto_fix = False
    sample_limit = 30

    def build_context(self, records: RecordsByTable) -> Dict[str, Dict]:
        texts: Dict[object, List[str]] = {}
        for passage in records.get(Table.PASSAGES, []):
            text = passage_text(passage)
            if text:
                texts.setdefault(passage.get("content_set_id"), []).append(text)
        return {"passages": {cs_id: " ".join(parts) for cs_id, parts in texts.items()}}

    def evaluate(self, table, record, context):
        explanation = record.get("explanation")
        if not explanation:
            return None
        passage = context["passages"].get(record.get("content_set_id"))
        if not passage:
            return None

        findings = [
            Finding(
                reason="citation_not_found",
                details={
                    "citation": citation,
                    "matchType": "not_found",
                    "questionNumber": record.get("question_number"),
                },
            )
            for citation in extract_citations(explanation)
            if match_citation(citation, passage) is None
        ]
        if not findings:
            return None
        return Proposal.report(table, record, findings)
