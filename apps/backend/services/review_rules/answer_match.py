from typing import List, Optional, Tuple

from rapidfuzz import fuzz
from rapidfuzz.distance import Levenshtein

from infrastructure.record_store import OPTION_FIELDS, Table
from services.review_rules.base import Finding, Proposal, ReviewRule

WORD_ORDER_QUESTION_TYPE = "어절 순서 맞추기"
FREE_RESPONSE_FORMATS = frozenset({"short_answer"})

# (field name, trimmed value)
OptionSlot = Tuple[str, str]


def is_free_response(record) -> bool:
    question_format = str(record.get("question_format") or "").strip()
    question_type = str(record.get("question_type") or "").strip()
    return question_format in FREE_RESPONSE_FORMATS or question_type == WORD_ORDER_QUESTION_TYPE


def option_slots(record) -> List[OptionSlot]:
    """Non-empty options with the field they are stored in; blanks leave gaps."""
    slots = []
    for field in OPTION_FIELDS:
        value = record.get(field)
        text = "" if value is None else str(value).strip()
        if text:
            slots.append((field, text))
    return slots


def closest_option(answer: str, options: List[str]) -> Tuple[str, int]:
    """Option with the smallest edit distance to the answer (earliest option on ties)."""
    best = min(options, key=lambda option: Levenshtein.distance(answer, option))
    return best, Levenshtein.distance(answer, best)


def check_answer(answer: Optional[str], slots: List[OptionSlot]) -> Optional[Finding]:
    answer = (answer or "").strip()
    options = [value for _, value in slots]
    if not answer:
        return Finding(reason="empty_answer", details={"correctAnswer": answer, "options": options})
    if not options:
        return Finding(reason="no_options", details={"correctAnswer": answer, "options": options})
    if answer in options:
        return None

    best, distance = closest_option(answer, options)
    field = slots[options.index(best)][0]
    return Finding(
        reason="answer_not_in_options",
        details={
            "correctAnswer": answer,
            "options": options,
            "closestOption": best,
            "closestOptionField": field,
            "closestOptionIndex": OPTION_FIELDS.index(field) + 1,
            "editDistance": distance,
            "similarity": round(fuzz.ratio(answer, best), 1),
        },
    )


class AnswerOptionMatchRule(ReviewRule):
    name = "answer-options"
    description = "Report objective questions whose correct answer is not exactly one of the options."
    target_tables = (Table.COMPREHENSIVE_QUESTIONS, Table.PARAGRAPH_QUESTIONS)
    auto_fix = False
    sample_limit = 30

    def evaluate(self, table, record, context):
        answer = str(record.get("correct_answer") or "").strip()
        # A missing answer is reported for every format
        if answer and is_free_response(record):
            return None
        finding = check_answer(answer, option_slots(record))
        if finding is None:
            return None
        details = {**finding.details, "questionNumber": record.get("question_number")}
        return Proposal.report(table, record, [Finding(finding.reason, details)])
