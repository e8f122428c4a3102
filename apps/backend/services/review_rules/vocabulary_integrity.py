# -*- coding: utf-8 -*-
"""
Vocabulary Integrity Rules
==========================
- VocabularyMismatchRule: a vocabulary question must reference a term that
  exists in its content set. Terms are compared exactly (no trimming), so
  "사과 " never matches "사과". Orphaned questions are proposed for deletion.
- QuestionFlagRule: VOCABULARY_TERMS.has_question_generated must mirror
  whether any vocabulary question uses the (content_set_id, term) pair.
"""

import logging
from typing import Any, Dict, Set, Tuple

from infrastructure.record_store import Table
from services.review_rules.base import FieldChange, Proposal, RecordsByTable, ReviewRule

logger = logging.getLogger(__name__)


class VocabularyMismatchRule(ReviewRule):
    name = "vocabulary-mismatch"
    description = "Delete vocabulary questions whose term is not a vocabulary term of the same content set."
    target_tables = (Table.VOCABULARY_QUESTIONS,)
    context_tables = (Table.VOCABULARY_TERMS,)
    sample_limit = 20

    def build_context(self, records: RecordsByTable) -> Dict[str, Any]:
        terms_by_set: Dict[Any, Set[str]] = {}
        for term in records.get(Table.VOCABULARY_TERMS, []):
            terms_by_set.setdefault(term.get("content_set_id"), set()).add(term.get("term"))
        logger.debug("Built vocabulary term sets", extra={"content_sets": len(terms_by_set)})
        return {"terms_by_set": terms_by_set}

    def evaluate(self, table, record, context):
        known_terms = context["terms_by_set"].get(record.get("content_set_id"))
        if known_terms is None:
            return Proposal.delete(table, record, note="content set has no vocabulary terms")
        if record.get("term") not in known_terms:
            return Proposal.delete(table, record, note=f"term {record.get('term')!r} not in vocabulary terms")
        return None


class QuestionFlagRule(ReviewRule):
    name = "question-flags"
    description = "Sync vocabulary_terms.has_question_generated with existing vocabulary questions."
    target_tables = (Table.VOCABULARY_TERMS,)
    context_tables = (Table.VOCABULARY_QUESTIONS,)
    sample_limit = 15

    def build_context(self, records: RecordsByTable) -> Dict[str, Any]:
        pairs: Set[Tuple[Any, Any]] = {
            (question.get("content_set_id"), question.get("term"))
            for question in records.get(Table.VOCABULARY_QUESTIONS, [])
        }
        return {"question_pairs": pairs}

    def evaluate(self, table, record, context):
        has_question = (record.get("content_set_id"), record.get("term")) in context["question_pairs"]
        stored = record.get("has_question_generated")
        if stored is not None and bool(stored) == has_question:
            return None
        return Proposal.update(table, record, [FieldChange("has_question_generated", stored, has_question)])
